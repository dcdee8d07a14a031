"""Immutable metadata record identifying one plugin implementation."""
from __future__ import annotations

from dataclasses import dataclass, field

from certflow.core.steps import Step
from certflow.plugins.base import NullPluginFactory, PluginFactory


@dataclass(frozen=True)
class PluginDescriptor:
    """Catalog entry for a plugin.

    Parameters
    ----------
    name:
        Short name used in settings and on the command line.  Not
        necessarily unique within a step: validation plugins may share a
        name across challenge types.
    runner:
        Opaque, stable identifier unique across the whole catalog.
        Selection logic compares runners, never factory classes.
    step:
        The pipeline step the plugin belongs to.
    description:
        Human-readable label shown in menus.
    factory:
        The ``PluginFactory`` subclass that reports the plugin's
        capabilities.
    hidden:
        Hidden plugins are never offered in a menu.
    challenge_type:
        ACME challenge type for validation plugins, ``None`` otherwise.
    """

    name: str
    runner: str
    step: Step
    description: str
    factory: type[PluginFactory] = field(compare=False)
    hidden: bool = False
    challenge_type: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("A plugin descriptor needs a non-empty name.")
        if not self.runner:
            raise ValueError(f"Plugin {self.name!r} needs a non-empty runner identifier.")
        if not (isinstance(self.factory, type) and issubclass(self.factory, PluginFactory)):
            raise TypeError(
                f"Plugin {self.name!r}: factory {self.factory!r} must be a "
                f"subclass of {PluginFactory.__name__}."
            )

    @property
    def order(self) -> int:
        return self.factory.order

    @property
    def is_null(self) -> bool:
        """Return True for the step's "do nothing" sentinel."""
        return issubclass(self.factory, NullPluginFactory)

    def matches(self, name: str, sub_mode: str | None = None) -> bool:
        """Case-insensitive name match, narrowed by challenge type for validation."""
        if self.name.lower() != name.strip().lower():
            return False
        if self.step is Step.VALIDATION and sub_mode and self.challenge_type:
            return self.challenge_type.lower() == sub_mode.strip().lower()
        return True

    def __str__(self) -> str:
        if self.challenge_type:
            return f"{self.name} ({self.challenge_type})"
        return self.name
