"""Pipeline steps and run levels.

A certificate is produced by running one plugin (or a chain of plugins)
per ``Step``, in the order the enum members are declared.  The
``RunLevel`` chosen by the operator decides whether a resolvable
default is accepted silently or still presented as a menu.
"""
from __future__ import annotations

from enum import Enum, Flag, auto

HTTP01_CHALLENGE_TYPE = "http-01"
DNS01_CHALLENGE_TYPE = "dns-01"
TLSALPN01_CHALLENGE_TYPE = "tls-alpn-01"


class Step(Enum):
    """Phases of the issuance pipeline, in execution order."""

    TARGET = "target"
    VALIDATION = "validation"
    ORDER = "order"
    CSR = "csr"
    STORE = "store"
    INSTALLATION = "installation"

    @property
    def is_chain(self) -> bool:
        """Return True for steps that build an ordered list of selections."""
        return self in (Step.STORE, Step.INSTALLATION)

    @classmethod
    def parse(cls, value: str) -> "Step":
        """Return the step named ``value`` (case-insensitive).

        Raises
        ------
        ValueError
            If ``value`` does not name a step.
        """
        lowered = value.strip().lower()
        for step in cls:
            if step.value == lowered:
                return step
        raise ValueError(
            f"Unknown step {value!r}. Valid steps: "
            + ", ".join(step.value for step in cls)
        )


class RunLevel(Flag):
    """Operator-selected mode flags.

    UNATTENDED
        No human is available; a cleanly resolving default is never
        second-guessed.
    INTERACTIVE
        A human is present and may be asked when no safe default exists.
    ADVANCED
        Always show the menu, even when a valid default exists, and
        allow chain steps to add further entries.
    TEST, FORCE_RENEW
        Reserved for the renewal runner; plugin resolution ignores them.
    """

    NONE = 0
    UNATTENDED = auto()
    INTERACTIVE = auto()
    ADVANCED = auto()
    TEST = auto()
    FORCE_RENEW = auto()
