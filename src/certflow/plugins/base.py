"""Capability interface implemented by every plugin factory.

A factory is the piece of a plugin the resolver talks to: it reports
whether the plugin can run on this host at all (``disabled``) and
whether it fits the certificate currently being configured
(``can_validate``, ``can_process``, ``can_install``).  The defaults are
permissive so that a factory only overrides the checks relevant to its
own step.
"""
from __future__ import annotations

from abc import ABC
from collections.abc import Iterable
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from certflow.core.target import Target
    from certflow.plugins.context import PluginScope


class PluginFactory(ABC):
    """Base class for plugin factories.

    Parameters
    ----------
    scope:
        The lifetime scope the factory was created in.  Factories pull
        host services (e.g. ``HostEnvironment``) from it.
    """

    #: Ordering weight used by the default menu sort (ascending).
    order: ClassVar[int] = 100

    def __init__(self, scope: "PluginScope") -> None:
        self.scope = scope

    def disabled(self) -> tuple[bool, str | None]:
        """Return ``(True, reason)`` when the plugin cannot run on this host."""
        return False, None

    def can_validate(self, target: "Target") -> bool:
        return True

    def can_process(self, target: "Target") -> bool:
        return True

    def can_install(
        self,
        store_runners: Iterable[str],
        installation_runners: Iterable[str],
    ) -> tuple[bool, str | None]:
        """Return whether this installation step fits the chosen chain.

        Parameters
        ----------
        store_runners:
            Runners of the store plugins already selected.
        installation_runners:
            Runners of the installation plugins already selected.
        """
        return True, None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(order={self.order})"


class NullPluginFactory(PluginFactory):
    """Marker base for the catalog's "do nothing" sentinel plugins.

    Null plugins are dropped from menus by the default filter and end a
    store/installation chain when selected.
    """

    order: ClassVar[int] = 1000
