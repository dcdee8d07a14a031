"""Filter, sort, usability and labeling hooks for step resolution.

Each hook is a plain function value.  The defaults used when a step
policy does not supply its own are ordinary strategies too
(``default_filter``, ``default_sort``, ``plain_description``), so the
resolution algorithm never special-cases a missing hook.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable

from certflow.core.steps import (
    DNS01_CHALLENGE_TYPE,
    HTTP01_CHALLENGE_TYPE,
    TLSALPN01_CHALLENGE_TYPE,
)
from certflow.plugins.context import FactoryContext

Filter = Callable[[list[FactoryContext]], list[FactoryContext]]
Sort = Callable[[list[FactoryContext]], list[FactoryContext]]
Unusable = Callable[[FactoryContext], tuple[bool, str | None]]
Describe = Callable[[FactoryContext], str]

CHALLENGE_PRIORITY: dict[str, int] = {
    HTTP01_CHALLENGE_TYPE: 0,
    DNS01_CHALLENGE_TYPE: 1,
    TLSALPN01_CHALLENGE_TYPE: 2,
}


def default_filter(options: list[FactoryContext]) -> list[FactoryContext]:
    """Drop the step's null sentinel."""
    return [option for option in options if not option.is_null]


def keep_all(options: list[FactoryContext]) -> list[FactoryContext]:
    """Identity filter; keeps the null sentinel on offer."""
    return list(options)


def _order_key(option: FactoryContext) -> tuple[int, str]:
    return option.meta.order, option.meta.description


def default_sort(options: list[FactoryContext]) -> list[FactoryContext]:
    """Ascending ordering weight, ties broken by description."""
    return sorted(options, key=_order_key)


def challenge_priority(challenge_type: str | None) -> int:
    """http-01 first, then dns-01, then tls-alpn-01, then anything else."""
    if challenge_type is None:
        return len(CHALLENGE_PRIORITY)
    return CHALLENGE_PRIORITY.get(challenge_type.lower(), len(CHALLENGE_PRIORITY))


def validation_sort(options: list[FactoryContext]) -> list[FactoryContext]:
    """Sort by challenge type priority, then by the default ordering."""
    return sorted(
        options,
        key=lambda option: (challenge_priority(option.meta.challenge_type), *_order_key(option)),
    )


def plain_description(option: FactoryContext) -> str:
    return option.meta.description


def challenge_description(option: FactoryContext) -> str:
    """Prefix the description with the challenge type, e.g. ``[dns-01] ...``."""
    if option.meta.challenge_type:
        return f"[{option.meta.challenge_type}] {option.meta.description}"
    return option.meta.description


# ---------------------------------------------------------------------------
# Chain overrides
# ---------------------------------------------------------------------------


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated list, dropping blanks and normalizing case."""
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


def chain_override(value: str | None, chosen: Iterable[object]) -> str:
    """Return the override for the next position in a plugin chain.

    The Nth invocation (N = number of plugins already chosen) consumes
    the Nth entry of the list.  An exhausted list yields ``""``, meaning
    no override for this position.
    """
    entries = parse_csv(value)
    index = sum(1 for _ in chosen)
    return entries[index] if len(entries) > index else ""
