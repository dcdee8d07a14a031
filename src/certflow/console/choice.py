"""Menu option type shared by the resolver and input services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Choice(Generic[T]):
    """One labeled option in a menu.

    Parameters
    ----------
    item:
        The value returned when this option is picked.
    description:
        Label shown to the user.
    default:
        Whether this option is pre-selected.
    disabled:
        ``(True, reason)`` for options that are shown but cannot be
        picked.
    """

    item: T
    description: str
    default: bool = False
    disabled: tuple[bool, str | None] = (False, None)

    @property
    def is_disabled(self) -> bool:
        return self.disabled[0]

    @property
    def disabled_reason(self) -> str | None:
        return self.disabled[1]
