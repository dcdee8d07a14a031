"""Plugin catalog for certflow.

Holds every known ``PluginDescriptor``, grouped by pipeline step.
Built-in plugins are loaded at construction time; third-party plugins
register by declaring entry-points in their own ``pyproject.toml`` under
the "certflow.plugins" group.

Example
-------
Register a plugin with the decorator::

    from certflow.core.steps import Step
    from certflow.plugins.base import PluginFactory
    from certflow.plugins.catalog import PluginCatalog

    catalog = PluginCatalog()

    @catalog.register("acmedns", Step.VALIDATION,
                      description="acme-dns", challenge_type="dns-01")
    class AcmeDnsFactory(PluginFactory):
        order = 5

Load all installed plugins via entry-points::

    catalog.load_entrypoints("certflow.plugins")

Look a plugin up the way settings refer to it::

    meta = catalog.get_plugin(Step.VALIDATION, "AcmeDns", "dns-01")
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable, Iterator

from certflow.core.errors import CertflowError
from certflow.core.steps import Step
from certflow.plugins.base import PluginFactory
from certflow.plugins.descriptor import PluginDescriptor

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "certflow.plugins"


class PluginNotFoundError(CertflowError, KeyError):
    """Raised when a required plugin is not in the catalog."""

    def __init__(self, name: str, step: Step, sub_mode: str | None = None) -> None:
        self.plugin_name = name
        self.step = step
        self.sub_mode = sub_mode
        mode = f" ({sub_mode})" if sub_mode else ""
        super().__init__(
            f"No {step.value} plugin named {name!r}{mode} is registered. "
            "Check that the package is installed and its entry-points are declared."
        )


class PluginAlreadyRegisteredError(CertflowError, ValueError):
    """Raised when attempting to register a runner that already exists."""

    def __init__(self, runner: str) -> None:
        self.runner = runner
        super().__init__(
            f"A plugin with runner {runner!r} is already registered. "
            "Use a unique runner or explicitly deregister the existing entry first."
        )


class PluginCatalog:
    """Registry of plugin descriptors, indexed by step and by runner.

    Iteration order within a step is registration order, which is stable
    for the lifetime of the process.

    Parameters
    ----------
    auto_load_builtins:
        If ``True`` (default), the built-in plugins from
        :mod:`certflow.plugins.builtin` are registered at construction.
    """

    def __init__(self, auto_load_builtins: bool = True) -> None:
        self._by_runner: dict[str, PluginDescriptor] = {}
        self._by_step: dict[Step, list[PluginDescriptor]] = {step: [] for step in Step}
        if auto_load_builtins:
            self._load_builtins()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load_builtins(self) -> None:
        from certflow.plugins.builtin import BUILTIN_PLUGINS

        for descriptor in BUILTIN_PLUGINS:
            self.add(descriptor)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        step: Step,
        *,
        description: str,
        runner: str | None = None,
        hidden: bool = False,
        challenge_type: str | None = None,
    ) -> Callable[[type[PluginFactory]], type[PluginFactory]]:
        """Return a class decorator that registers the decorated factory.

        Parameters
        ----------
        name:
            Name used in settings and on the command line.
        step:
            Pipeline step the plugin belongs to.
        description:
            Label shown in menus.
        runner:
            Unique identifier; defaults to ``"<step>.<name>"`` (plus the
            challenge type for validation plugins).
        hidden:
            Keep the plugin out of menus.
        challenge_type:
            ACME challenge type for validation plugins.

        Raises
        ------
        PluginAlreadyRegisteredError
            If the runner is already in use.
        TypeError
            If the decorated class does not subclass ``PluginFactory``.
        """

        def decorator(cls: type[PluginFactory]) -> type[PluginFactory]:
            self.add(
                PluginDescriptor(
                    name=name,
                    runner=runner or _default_runner(step, name, challenge_type),
                    step=step,
                    description=description,
                    factory=cls,
                    hidden=hidden,
                    challenge_type=challenge_type,
                )
            )
            return cls

        return decorator

    def add(self, descriptor: PluginDescriptor) -> None:
        """Register an already-built descriptor.

        Raises
        ------
        PluginAlreadyRegisteredError
            If ``descriptor.runner`` is already registered.
        """
        if descriptor.runner in self._by_runner:
            raise PluginAlreadyRegisteredError(descriptor.runner)
        self._by_runner[descriptor.runner] = descriptor
        self._by_step[descriptor.step].append(descriptor)
        logger.debug(
            "Registered %s plugin %r -> %s",
            descriptor.step.value,
            descriptor.runner,
            descriptor.factory.__qualname__,
        )

    def deregister(self, runner: str) -> None:
        """Remove the plugin registered under ``runner``.

        Raises
        ------
        KeyError
            If ``runner`` is not currently registered.
        """
        if runner not in self._by_runner:
            raise KeyError(f"No plugin with runner {runner!r} is registered.")
        descriptor = self._by_runner.pop(runner)
        self._by_step[descriptor.step].remove(descriptor)
        logger.debug("Deregistered plugin %r", runner)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_plugins(self, step: Step) -> list[PluginDescriptor]:
        """Return every plugin of ``step``, hidden ones included."""
        return list(self._by_step[step])

    def get_plugin(
        self, step: Step, name: str, sub_mode: str | None = None
    ) -> PluginDescriptor | None:
        """Find a plugin by the name users know it by.

        Name matching is case-insensitive.  ``sub_mode`` (the challenge
        type) narrows the match for validation plugins only.

        Returns
        -------
        PluginDescriptor | None
            The first matching plugin in registration order, or ``None``.
        """
        if not name or not name.strip():
            return None
        for descriptor in self._by_step[step]:
            if descriptor.matches(name, sub_mode):
                return descriptor
        return None

    def require(
        self, step: Step, name: str, sub_mode: str | None = None
    ) -> PluginDescriptor:
        """Like :meth:`get_plugin`, but raise when nothing matches.

        Raises
        ------
        PluginNotFoundError
            If no plugin matches.
        """
        descriptor = self.get_plugin(step, name, sub_mode)
        if descriptor is None:
            raise PluginNotFoundError(name, step, sub_mode)
        return descriptor

    def get_by_runner(self, runner: str) -> PluginDescriptor | None:
        return self._by_runner.get(runner)

    def __contains__(self, runner: object) -> bool:
        """Support ``"store.pemfiles" in catalog`` membership test."""
        return runner in self._by_runner

    def __len__(self) -> int:
        return len(self._by_runner)

    def __iter__(self) -> Iterator[PluginDescriptor]:
        for step in Step:
            yield from self._by_step[step]

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{step.value}={len(self._by_step[step])}" for step in Step
        )
        return f"PluginCatalog({counts})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register plugins declared as package entry-points.

        Each entry-point must resolve to a ``PluginDescriptor``.  Runners
        that are already registered are skipped with a debug-level log
        entry, which makes repeated calls idempotent.  Entry-points that
        fail to import or resolve to something else are logged and
        skipped.

        Parameters
        ----------
        group:
            The entry-point group name, e.g. "certflow.plugins".

        Example
        -------
        In a downstream package's ``pyproject.toml``::

            [project.entry-points."certflow.plugins"]
            acmedns = "my_package.acmedns:DESCRIPTOR"
        """
        for ep in importlib.metadata.entry_points(group=group):
            try:
                descriptor = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            if not isinstance(descriptor, PluginDescriptor):
                logger.warning(
                    "Entry-point %r does not resolve to a PluginDescriptor; skipping.",
                    ep.name,
                )
                continue
            if descriptor.runner in self._by_runner:
                logger.debug(
                    "Entry-point %r already registered as %r; skipping.",
                    ep.name,
                    descriptor.runner,
                )
                continue
            self.add(descriptor)


def _default_runner(step: Step, name: str, challenge_type: str | None) -> str:
    runner = f"{step.value}.{name.lower()}"
    if challenge_type:
        runner = f"{runner}.{challenge_type.lower()}"
    return runner
