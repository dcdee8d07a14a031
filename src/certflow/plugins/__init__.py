"""Plugin subsystem for certflow.

The catalog module provides the registration and lookup surface.
Third-party plugins register by exposing a ``PluginDescriptor`` through
``importlib.metadata`` entry-points in the "certflow.plugins" group.

Example
-------
Declare a plugin in pyproject.toml:

.. code-block:: toml

    [project.entry-points."certflow.plugins"]
    acmedns = "my_package.acmedns:DESCRIPTOR"
"""
from __future__ import annotations

from certflow.plugins.base import NullPluginFactory, PluginFactory
from certflow.plugins.catalog import (
    PluginAlreadyRegisteredError,
    PluginCatalog,
    PluginNotFoundError,
)
from certflow.plugins.context import (
    FactoryContext,
    HostEnvironment,
    PluginScope,
    ServiceNotFoundError,
    UsabilityVerdict,
)
from certflow.plugins.descriptor import PluginDescriptor

__all__ = [
    "FactoryContext",
    "HostEnvironment",
    "NullPluginFactory",
    "PluginAlreadyRegisteredError",
    "PluginCatalog",
    "PluginDescriptor",
    "PluginFactory",
    "PluginNotFoundError",
    "PluginScope",
    "ServiceNotFoundError",
    "UsabilityVerdict",
]
