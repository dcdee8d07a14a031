"""Pipeline driver: resolve every step for one certificate, in order.

The driver is the caller that gives ``None`` its meaning: a step that
resolves to ``None`` contributes nothing to the plan.  Store and
installation steps are invoked repeatedly to build chains; a chain ends
when the resolver returns ``None`` or the step's null sentinel.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from certflow.core.target import Target
from certflow.plugins.context import PluginScope
from certflow.plugins.descriptor import PluginDescriptor
from certflow.resolvers.unattended import UnattendedResolver

logger = logging.getLogger(__name__)


@dataclass
class ResolutionPlan:
    """The plugins selected for one certificate.

    Parameters
    ----------
    target:
        The identifiers the certificate covers.
    source:
        Target plugin, when resolved through :func:`resolve_target`.
    validation, order, csr:
        Single-plugin steps; ``None`` when skipped.
    stores, installations:
        Chains, in execution order.  Never contain null sentinels.
    """

    target: Target
    source: PluginDescriptor | None = None
    validation: PluginDescriptor | None = None
    order: PluginDescriptor | None = None
    csr: PluginDescriptor | None = None
    stores: list[PluginDescriptor] = field(default_factory=list)
    installations: list[PluginDescriptor] = field(default_factory=list)

    def rows(self) -> list[tuple[str, str]]:
        """Return ``(step, plugins)`` pairs for display."""

        def label(meta: PluginDescriptor | None) -> str:
            return str(meta) if meta is not None else "-"

        return [
            ("target", label(self.source)),
            ("validation", label(self.validation)),
            ("order", label(self.order)),
            ("csr", label(self.csr)),
            ("store", ", ".join(str(m) for m in self.stores) or "-"),
            ("installation", ", ".join(str(m) for m in self.installations) or "-"),
        ]


def resolve_target(resolver: UnattendedResolver, scope: PluginScope) -> PluginDescriptor | None:
    """Resolve the plugin that determines the certificate's identifiers."""
    return resolver.get_target_plugin(scope)


def resolve_chain(
    next_plugin: Callable[[Sequence[PluginDescriptor]], PluginDescriptor | None],
) -> list[PluginDescriptor]:
    """Build a plugin chain by calling ``next_plugin(chosen)`` until it ends.

    The chain ends on ``None``, on the null sentinel, or when a plugin
    that is already in the chain is picked again.
    """
    chosen: list[PluginDescriptor] = []
    while True:
        meta = next_plugin(list(chosen))
        if meta is None or meta.is_null:
            return chosen
        if meta in chosen:
            logger.warning("Plugin %s was already chosen; ending chain", meta.name)
            return chosen
        chosen.append(meta)


def resolve_plan(
    resolver: UnattendedResolver,
    scope: PluginScope,
    target: Target,
    source: PluginDescriptor | None = None,
) -> ResolutionPlan:
    """Resolve validation, order, csr, store and installation for ``target``.

    Steps run strictly in pipeline order; each call completes before the
    next starts.
    """
    plan = ResolutionPlan(target=target, source=source)
    plan.validation = resolver.get_validation_plugin(scope, target)
    plan.order = resolver.get_order_plugin(scope, target)
    plan.csr = resolver.get_csr_plugin(scope)
    plan.stores = resolve_chain(lambda chosen: resolver.get_store_plugin(scope, chosen))
    stores = list(plan.stores)
    plan.installations = resolve_chain(
        lambda chosen: resolver.get_installation_plugin(scope, stores, chosen)
    )
    logger.info(
        "Resolved plan for %s: %s",
        target.friendly_name,
        "; ".join(f"{step}={plugins}" for step, plugins in plan.rows()),
    )
    return plan
