"""Certificate target shape consulted by usability predicates.

A ``Target`` is what the target plugin produced: one or more parts
(e.g. one per web site), each carrying the identifiers that should end
up on the certificate.  The resolver never builds targets itself; it
only asks how many identifiers there are and whether any of them is a
wildcard.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Identifier:
    """A single name to include in the certificate."""

    value: str

    @property
    def is_wildcard(self) -> bool:
        return self.value.startswith("*.")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TargetPart:
    """A group of identifiers that originate from one source object."""

    identifiers: tuple[Identifier, ...] = ()
    site_id: int | None = None


@dataclass(frozen=True)
class Target:
    """The set of identifiers a certificate should cover.

    Parameters
    ----------
    friendly_name:
        Human-readable label used in logs and menus.
    common_name:
        Identifier used as the certificate subject.
    parts:
        The groups of identifiers that make up the target.
    """

    friendly_name: str
    common_name: Identifier
    parts: tuple[TargetPart, ...] = field(default_factory=tuple)

    @classmethod
    def from_hosts(cls, hosts: list[str], friendly_name: str | None = None) -> "Target":
        """Build a single-part target from a list of host names.

        Raises
        ------
        ValueError
            If ``hosts`` contains no non-blank entry.
        """
        identifiers = tuple(Identifier(h.strip().lower()) for h in hosts if h.strip())
        if not identifiers:
            raise ValueError("A target needs at least one host name.")
        return cls(
            friendly_name=friendly_name or f"[Manual] {identifiers[0]}",
            common_name=identifiers[0],
            parts=(TargetPart(identifiers=identifiers),),
        )

    @property
    def identifiers(self) -> list[Identifier]:
        """All identifiers across every part, in declaration order."""
        return [identifier for part in self.parts for identifier in part.identifiers]

    @property
    def has_wildcard(self) -> bool:
        return any(identifier.is_wildcard for identifier in self.identifiers)
