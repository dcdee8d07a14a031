"""Interactive plugin resolution.

``InteractiveResolver`` reconciles three inputs for every pipeline step:
the compiled-in default, the operator's configured or command-line
override, and the runtime usability of each candidate.  When those
settle on a usable default and the run level does not ask for menus,
the default is returned without any I/O.  Otherwise the operator is
asked to choose.

Resolution never raises for a missing or unusable plugin; those are
logged and the step either falls back to asking or resolves to
``None`` ("skip this step").

Usage
-----
::

    resolver = InteractiveResolver(
        catalog, settings, arguments,
        input_service=RichInputService(),
        run_level=RunLevel.INTERACTIVE,
    )
    validation = resolver.get_validation_plugin(scope, target)
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple

from certflow.config.arguments import MainArguments
from certflow.config.settings import Settings
from certflow.console.choice import Choice
from certflow.console.input import InputService
from certflow.core.steps import HTTP01_CHALLENGE_TYPE, RunLevel, Step
from certflow.core.target import Target
from certflow.plugins.builtin import (
    CSR_EC,
    CSR_RSA,
    INSTALLATION_IIS,
    INSTALLATION_NONE,
    ORDER_SINGLE,
    STORE_CERTIFICATESTORE,
    STORE_NONE,
    STORE_PEMFILES,
    TARGET_IIS,
    TARGET_MANUAL,
    VALIDATION_FILESYSTEM,
    VALIDATION_SELFHOSTING,
)
from certflow.plugins.catalog import PluginCatalog
from certflow.plugins.context import FactoryContext, PluginScope, UsabilityVerdict
from certflow.plugins.descriptor import PluginDescriptor
from certflow.resolvers.strategies import (
    Describe,
    Filter,
    Sort,
    Unusable,
    chain_override,
    challenge_description,
    default_filter,
    default_sort,
    keep_all,
    plain_description,
    validation_sort,
)
from certflow.resolvers.unattended import UnattendedResolver

logger = logging.getLogger(__name__)

MAX_NAMES = 100
ABORT_LABEL = "Abort"


class _Option(NamedTuple):
    context: FactoryContext
    verdict: UsabilityVerdict


class InteractiveResolver(UnattendedResolver):
    """Resolve pipeline steps, asking the operator when needed.

    Parameters
    ----------
    catalog:
        Read-only catalog of known plugins.
    settings:
        Read-only snapshot of the persisted per-step defaults.
    arguments:
        Command-line overrides.
    input_service:
        Channel used to present menus.
    run_level:
        ``RunLevel.ADVANCED`` always shows menus and enables chain
        continuation; otherwise a usable default is taken silently.
    """

    def __init__(
        self,
        catalog: PluginCatalog,
        settings: Settings | None = None,
        arguments: MainArguments | None = None,
        *,
        input_service: InputService,
        run_level: RunLevel = RunLevel.INTERACTIVE,
    ) -> None:
        super().__init__(catalog, settings, arguments)
        self._input = input_service
        self._run_level = run_level

    @property
    def advanced(self) -> bool:
        return bool(self._run_level & RunLevel.ADVANCED)

    # ------------------------------------------------------------------
    # Generic algorithm
    # ------------------------------------------------------------------

    def resolve_step(
        self,
        scope: PluginScope,
        step: Step,
        *,
        default_runner: str,
        fallback_runner: str,
        class_name: str,
        short_description: str,
        long_description: str = "",
        override_name: str | None = None,
        override_sub_mode: str | None = None,
        sort: Sort = default_sort,
        filter: Filter = default_filter,  # noqa: A002
        unusable: Unusable | None = None,
        description: Describe = plain_description,
        allow_abort: bool = True,
    ) -> PluginDescriptor | None:
        """Select one plugin for ``step``.

        Parameters
        ----------
        scope:
            Scope used to instantiate the candidates' factories.
        step:
            The pipeline step being resolved.
        default_runner:
            Compiled-in default, replaced by a found override.
        fallback_runner:
            Pre-selected in the menu when the default is unusable.
        class_name:
            Lower-case plugin category used in log messages.
        short_description:
            Menu question.
        long_description:
            Optional guidance shown above the menu.
        override_name, override_sub_mode:
            Plugin explicitly requested by settings or command line.
        sort, filter, unusable, description:
            Step-specific strategy hooks.
        allow_abort:
            Offer an "Abort" option that resolves to ``None``.

        Returns
        -------
        PluginDescriptor | None
            The chosen plugin, or ``None`` when the step should be skipped.
        """
        candidates = [
            FactoryContext(meta, scope)
            for meta in self._catalog.get_plugins(step)
            if not meta.hidden
        ]
        candidates = sort(filter(candidates))
        options = [_Option(c, c.usability(unusable)) for c in candidates]

        if (
            not options
            or all(option.verdict.unusable for option in options)
            or all(option.context.is_null for option in options)
        ):
            logger.debug("No viable %s plugin; skipping step", class_name)
            return None

        show_menu = self.advanced
        if override_name:
            override = self._catalog.get_plugin(step, override_name, override_sub_mode)
            if override is not None:
                default_runner = override.runner
            else:
                logger.error("Unable to find %s plugin %s", class_name, override_name)
                show_menu = True

        default_option = next(
            (option for option in options if option.context.meta.runner == default_runner),
            None,
        )
        default_verdict = (
            default_option.verdict if default_option else UsabilityVerdict(True, "Not found")
        )
        if default_verdict.unusable:
            logger.warning(
                "%s plugin %s not available: %s",
                class_name[:1].upper() + class_name[1:],
                default_option.context.meta.name if default_option else default_runner,
                default_verdict.reason,
            )
            default_runner = fallback_runner
            show_menu = True

        if not show_menu:
            assert default_option is not None
            return default_option.context.meta

        if long_description:
            self._input.create_space()
            self._input.show(None, long_description)

        def creator(option: _Option) -> Choice[_Option]:
            return Choice(
                item=option,
                description=description(option.context),
                default=(
                    option.context.meta.runner == default_runner
                    and not option.verdict.unusable
                ),
                disabled=(option.verdict.unusable, option.verdict.reason),
            )

        if allow_abort:
            picked = self._input.choose_optional(
                short_description, options, creator, ABORT_LABEL
            )
        else:
            picked = self._input.choose_required(short_description, options, creator)
        return None if picked is None else picked.context.meta

    # ------------------------------------------------------------------
    # Step policies
    # ------------------------------------------------------------------

    def get_target_plugin(self, scope: PluginScope) -> PluginDescriptor | None:
        return self.resolve_step(
            scope,
            Step.TARGET,
            override_name=self._settings.source.default_source,
            default_runner=TARGET_IIS,
            fallback_runner=TARGET_MANUAL,
            class_name="source",
            short_description="How shall we determine the domain(s) to include in the certificate?",
            long_description=(
                "Please specify how the list of domain names that will be included in "
                "the certificate should be determined. If you choose for one of the "
                '"all bindings" options, the list will automatically be updated for '
                "future renewals to reflect the bindings at that time."
            ),
        )

    def get_validation_plugin(
        self, scope: PluginScope, target: Target
    ) -> PluginDescriptor | None:
        name = self._settings.validation.default_validation
        mode = self._settings.validation.default_validation_mode or HTTP01_CHALLENGE_TYPE
        if self._arguments.validation.strip():
            name = self._arguments.validation
        if self._arguments.validation_mode.strip():
            mode = self._arguments.validation_mode
        return self.resolve_step(
            scope,
            Step.VALIDATION,
            sort=validation_sort,
            unusable=lambda c: (
                not c.factory.can_validate(target),
                "Unsupported target. Most likely this is because you have included "
                "a wildcard identifier (*.example.com), which requires DNS validation.",
            ),
            description=challenge_description,
            override_name=name,
            override_sub_mode=mode,
            default_runner=VALIDATION_SELFHOSTING,
            fallback_runner=VALIDATION_FILESYSTEM,
            class_name="validation",
            short_description="How would you like prove ownership for the domain(s)?",
            long_description=(
                "The ACME server will need to verify that you are the owner of the "
                "domain names that you are requesting the certificate for. This happens "
                "both during initial setup *and* for every future renewal. There are two "
                "main methods of doing so: answering specific http requests (http-01) or "
                "create specific dns records (dns-01). For wildcard domains the latter is "
                "the only option."
            ),
        )

    def get_order_plugin(self, scope: PluginScope, target: Target) -> PluginDescriptor | None:
        if len(target.identifiers) <= 1:
            return super().get_order_plugin(scope, target)
        return self.resolve_step(
            scope,
            Step.ORDER,
            override_name=self._settings.order.default_plugin,
            default_runner=ORDER_SINGLE,
            fallback_runner=ORDER_SINGLE,
            unusable=lambda c: (not c.factory.can_process(target), "Unsupported source."),
            class_name="order",
            short_description="Would you like to split this source into multiple certificates?",
            long_description=(
                "By default your source hosts are covered by a single certificate. "
                f"But if you want to avoid the {MAX_NAMES} domain limit, want to prevent "
                "information disclosure via the SAN list, and/or reduce the impact of a "
                "single validation failure, you may choose to convert one source into "
                "multiple certificates, using different strategies."
            ),
        )

    def get_csr_plugin(self, scope: PluginScope) -> PluginDescriptor | None:
        return self.resolve_step(
            scope,
            Step.CSR,
            override_name=self._settings.csr.default_csr,
            default_runner=CSR_RSA,
            fallback_runner=CSR_EC,
            class_name="csr",
            short_description="What kind of private key should be used for the certificate?",
            long_description=(
                "After ownership of the domain(s) has been proven, we will create a "
                "Certificate Signing Request (CSR) to obtain the actual certificate. The "
                "CSR determines properties of the certificate like which (type of) key to "
                "use. If you are not sure what to pick here, RSA is the safe default."
            ),
        )

    def get_store_plugin(
        self, scope: PluginScope, chosen: Sequence[PluginDescriptor]
    ) -> PluginDescriptor | None:
        default_runner = STORE_CERTIFICATESTORE
        short_description = "How would you like to store the certificate?"
        long_description = (
            "When we have the certificate, you can store in one or more ways to make "
            "it accessible to your applications. The Windows Certificate Store is the "
            "default location for IIS (unless you are managing a cluster of them)."
        )
        if chosen:
            if not self.advanced:
                return None
            long_description = ""
            short_description = "Would you like to store it in another way too?"
            default_runner = STORE_NONE
        configured = self._settings.store.default_store
        if self._arguments.store.strip():
            configured = self._arguments.store
        return self.resolve_step(
            scope,
            Step.STORE,
            filter=keep_all,
            override_name=chain_override(configured, chosen),
            default_runner=default_runner,
            fallback_runner=STORE_PEMFILES,
            class_name="store",
            short_description=short_description,
            long_description=long_description,
            allow_abort=False,
        )

    def get_installation_plugin(
        self,
        scope: PluginScope,
        store_types: Sequence[PluginDescriptor],
        chosen: Sequence[PluginDescriptor],
    ) -> PluginDescriptor | None:
        default_runner = INSTALLATION_IIS
        short_description = "Which installation step should run first?"
        long_description = (
            "With the certificate saved to the store(s) of your choice, you may choose "
            "one or more steps to update your applications, e.g. to configure the new "
            "thumbprint, or to update bindings."
        )
        if chosen:
            if not self.advanced:
                return None
            long_description = ""
            short_description = "Add another installation step?"
            default_runner = INSTALLATION_NONE
        configured = self._settings.installation.default_installation
        if self._arguments.installation.strip():
            configured = self._arguments.installation
        store_runners = [meta.runner for meta in store_types]
        chosen_runners = [meta.runner for meta in chosen]

        def unusable(c: FactoryContext) -> tuple[bool, str | None]:
            ok, reason = c.factory.can_install(store_runners, chosen_runners)
            return not ok, reason

        return self.resolve_step(
            scope,
            Step.INSTALLATION,
            filter=keep_all,
            unusable=unusable,
            override_name=chain_override(configured, chosen),
            default_runner=default_runner,
            fallback_runner=INSTALLATION_NONE,
            class_name="installation",
            short_description=short_description,
            long_description=long_description,
            allow_abort=False,
        )
