"""Non-interactive plugin resolution.

``UnattendedResolver`` picks every plugin from the command line, the
settings file or the compiled-in default, in that order of precedence,
and never asks a question.  A plugin that cannot be found or cannot be
used is reported in the log and resolves to ``None``, which tells the
pipeline driver the step contributes nothing.

It is also the base class of
:class:`~certflow.resolvers.interactive.InteractiveResolver`, which
falls back on it for steps that need no decision.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from certflow.config.arguments import MainArguments
from certflow.config.settings import Settings
from certflow.core.steps import HTTP01_CHALLENGE_TYPE, Step
from certflow.core.target import Target
from certflow.plugins.builtin import (
    CSR_RSA,
    INSTALLATION_NONE,
    ORDER_SINGLE,
    STORE_CERTIFICATESTORE,
    TARGET_MANUAL,
    VALIDATION_SELFHOSTING,
)
from certflow.plugins.catalog import PluginCatalog
from certflow.plugins.context import FactoryContext, PluginScope
from certflow.plugins.descriptor import PluginDescriptor
from certflow.resolvers.strategies import Unusable, parse_csv

logger = logging.getLogger(__name__)


def _override(argument: str, configured: str) -> str:
    """Return the command-line value unless it is blank, else the configured one."""
    return argument if argument.strip() else configured


class UnattendedResolver:
    """Resolve each pipeline step without operator input.

    Parameters
    ----------
    catalog:
        Read-only catalog of known plugins.
    settings:
        Read-only snapshot of the persisted per-step defaults.
    arguments:
        Command-line overrides; take precedence over ``settings``.
    """

    def __init__(
        self,
        catalog: PluginCatalog,
        settings: Settings | None = None,
        arguments: MainArguments | None = None,
    ) -> None:
        self._catalog = catalog
        self._settings = settings or Settings()
        self._arguments = arguments or MainArguments()

    # ------------------------------------------------------------------
    # Shared lookup
    # ------------------------------------------------------------------

    def _get_plugin(
        self,
        scope: PluginScope,
        step: Step,
        *,
        class_name: str,
        default_runner: str,
        name: str = "",
        sub_mode: str | None = None,
        unusable: Unusable | None = None,
    ) -> PluginDescriptor | None:
        if name:
            meta = self._catalog.get_plugin(step, name, sub_mode)
            if meta is None:
                logger.error(
                    "Unable to find %s plugin %s. Choose another plugin using "
                    "the --%s switch or change the default in the settings file.",
                    class_name,
                    name,
                    class_name,
                )
                return None
        else:
            meta = self._catalog.get_by_runner(default_runner)
            if meta is None:
                logger.error("Unable to find default %s plugin %s", class_name, default_runner)
                return None

        verdict = FactoryContext(meta, scope).usability(unusable)
        if verdict.unusable:
            logger.error(
                "%s plugin %s not available: %s",
                class_name.capitalize(),
                meta.name,
                verdict.reason,
            )
            return None
        return meta

    def _chain_name(self, configured: str, chosen: Sequence[PluginDescriptor]) -> str | None:
        """Return the configured name for the next chain position.

        ``""`` asks for the compiled-in default (first position of an
        unconfigured chain); ``None`` ends the chain.
        """
        entries = parse_csv(configured)
        if len(entries) > len(chosen):
            return entries[len(chosen)]
        if not entries and not chosen:
            return ""
        return None

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def get_target_plugin(self, scope: PluginScope) -> PluginDescriptor | None:
        return self._get_plugin(
            scope,
            Step.TARGET,
            class_name="source",
            default_runner=TARGET_MANUAL,
            name=_override(self._arguments.source, self._settings.source.default_source),
        )

    def get_validation_plugin(
        self, scope: PluginScope, target: Target
    ) -> PluginDescriptor | None:
        name = _override(self._arguments.validation, self._settings.validation.default_validation)
        mode = (
            _override(
                self._arguments.validation_mode,
                self._settings.validation.default_validation_mode,
            )
            or HTTP01_CHALLENGE_TYPE
        )
        return self._get_plugin(
            scope,
            Step.VALIDATION,
            class_name="validation",
            default_runner=VALIDATION_SELFHOSTING,
            name=name,
            sub_mode=mode,
            unusable=lambda c: (
                not c.factory.can_validate(target),
                "Unsupported target. Most likely this is because you have included "
                "a wildcard identifier (*.example.com), which requires DNS validation.",
            ),
        )

    def get_order_plugin(self, scope: PluginScope, target: Target) -> PluginDescriptor | None:
        return self._get_plugin(
            scope,
            Step.ORDER,
            class_name="order",
            default_runner=ORDER_SINGLE,
            name=_override(self._arguments.order, self._settings.order.default_plugin),
            unusable=lambda c: (not c.factory.can_process(target), "Unsupported source."),
        )

    def get_csr_plugin(self, scope: PluginScope) -> PluginDescriptor | None:
        return self._get_plugin(
            scope,
            Step.CSR,
            class_name="csr",
            default_runner=CSR_RSA,
            name=_override(self._arguments.csr, self._settings.csr.default_csr),
        )

    def get_store_plugin(
        self, scope: PluginScope, chosen: Sequence[PluginDescriptor]
    ) -> PluginDescriptor | None:
        name = self._chain_name(
            _override(self._arguments.store, self._settings.store.default_store), chosen
        )
        if name is None:
            return None
        return self._get_plugin(
            scope,
            Step.STORE,
            class_name="store",
            default_runner=STORE_CERTIFICATESTORE,
            name=name,
        )

    def get_installation_plugin(
        self,
        scope: PluginScope,
        store_types: Sequence[PluginDescriptor],
        chosen: Sequence[PluginDescriptor],
    ) -> PluginDescriptor | None:
        name = self._chain_name(
            _override(
                self._arguments.installation,
                self._settings.installation.default_installation,
            ),
            chosen,
        )
        if name is None:
            return None
        store_runners = [meta.runner for meta in store_types]
        chosen_runners = [meta.runner for meta in chosen]

        def unusable(c: FactoryContext) -> tuple[bool, str | None]:
            ok, reason = c.factory.can_install(store_runners, chosen_runners)
            return not ok, reason

        return self._get_plugin(
            scope,
            Step.INSTALLATION,
            class_name="installation",
            default_runner=INSTALLATION_NONE,
            name=name,
            unusable=unusable,
        )
