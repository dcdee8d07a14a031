"""Lifetime scope and factory context used during one resolution call.

The ``PluginScope`` is a deliberately small service container: it holds
host services (such as ``HostEnvironment``) and creates factory
instances on demand, caching one instance per factory class.  A
``FactoryContext`` pairs a descriptor with the scope so the resolver can
query runtime state without knowing how factories are constructed.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import cached_property
from typing import NamedTuple, TypeVar

from certflow.core.errors import CertflowError
from certflow.plugins.base import PluginFactory
from certflow.plugins.descriptor import PluginDescriptor

logger = logging.getLogger(__name__)

S = TypeVar("S")


class ServiceNotFoundError(CertflowError, LookupError):
    """Raised when a scope is asked for a service it does not hold."""

    def __init__(self, service_type: type) -> None:
        self.service_type = service_type
        super().__init__(
            f"No service of type {service_type.__name__} is registered in this scope."
        )


@dataclass(frozen=True)
class HostEnvironment:
    """Static facts about the machine the pipeline runs on.

    Parameters
    ----------
    admin:
        Whether the process runs with administrator privileges.
    iis_version:
        Major version of the local IIS installation, ``0`` when absent.
    """

    admin: bool = False
    iis_version: int = 0

    @property
    def iis_available(self) -> bool:
        return self.iis_version > 0


class UsabilityVerdict(NamedTuple):
    """Merged result of static disability and a dynamic capability check."""

    unusable: bool
    reason: str | None = None


class PluginScope:
    """Service container handed to plugin factories.

    Parameters
    ----------
    *services:
        Service instances, registered under their concrete type.
    """

    def __init__(self, *services: object) -> None:
        self._services: dict[type, object] = {}
        self._factories: dict[type[PluginFactory], PluginFactory] = {}
        for service in services:
            self.register(service)

    def register(self, service: object) -> None:
        """Register ``service`` under its concrete type, replacing any previous one."""
        self._services[type(service)] = service

    def resolve(self, service_type: type[S]) -> S:
        """Return the registered instance of ``service_type``.

        Raises
        ------
        ServiceNotFoundError
            If no such service was registered.
        """
        try:
            return self._services[service_type]  # type: ignore[return-value]
        except KeyError:
            raise ServiceNotFoundError(service_type) from None

    def get(self, service_type: type[S], default: S) -> S:
        """Return the registered instance of ``service_type`` or ``default``."""
        return self._services.get(service_type, default)  # type: ignore[return-value]

    def create(self, factory_class: type[PluginFactory]) -> PluginFactory:
        """Return the scope's instance of ``factory_class``, creating it once."""
        instance = self._factories.get(factory_class)
        if instance is None:
            instance = factory_class(self)
            self._factories[factory_class] = instance
            logger.debug("Created %s in scope", factory_class.__qualname__)
        return instance

    def __repr__(self) -> str:
        names = sorted(t.__name__ for t in self._services)
        return f"PluginScope(services={names})"


class FactoryContext:
    """A plugin descriptor paired with the scope it will be created in.

    Parameters
    ----------
    meta:
        The catalog descriptor.
    scope:
        The lifetime scope used to instantiate the factory.
    """

    def __init__(self, meta: PluginDescriptor, scope: PluginScope) -> None:
        self.meta = meta
        self.scope = scope

    @cached_property
    def factory(self) -> PluginFactory:
        return self.scope.create(self.meta.factory)

    @property
    def is_null(self) -> bool:
        return self.meta.is_null

    def disabled(self) -> UsabilityVerdict:
        """Return the plugin's static ineligibility on this host."""
        return UsabilityVerdict(*self.factory.disabled())

    def usability(
        self,
        unusable: Callable[["FactoryContext"], tuple[bool, str | None]] | None = None,
    ) -> UsabilityVerdict:
        """Combine static disability with an optional dynamic check.

        The dynamic check is only consulted when the plugin is not
        statically disabled, so its reason never masks the static one.
        """
        disabled = self.disabled()
        if disabled.unusable:
            return disabled
        if unusable is not None:
            return UsabilityVerdict(*unusable(self))
        return UsabilityVerdict(False, None)

    def __repr__(self) -> str:
        return f"FactoryContext({self.meta.runner!r})"


def host_environment(scope: PluginScope) -> HostEnvironment:
    """Return the scope's ``HostEnvironment``, or an unprivileged host without IIS."""
    return scope.get(HostEnvironment, HostEnvironment())
