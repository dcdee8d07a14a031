"""certflow — staged plugin resolution for a certificate issuance pipeline.

For each pipeline step (target, validation, order, csr, store,
installation) certflow selects the plugin that will do the work,
reconciling compiled-in defaults, configured overrides and runtime
usability, and asking the operator only when no safe automatic choice
exists.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import certflow

    catalog = certflow.PluginCatalog()
    resolver = certflow.InteractiveResolver(
        catalog,
        certflow.load_settings("settings.yaml"),
        input_service=certflow.RichInputService(),
        run_level=certflow.RunLevel.INTERACTIVE,
    )
    scope = certflow.PluginScope(certflow.HostEnvironment(admin=True))
    target = certflow.Target.from_hosts(["example.com", "www.example.com"])
    plan = certflow.resolve_plan(resolver, scope, target)
"""
from __future__ import annotations

from certflow.config import MainArguments, Settings, load_settings
from certflow.console import Choice, InputService, RichInputService
from certflow.core import CertflowError, Identifier, RunLevel, Step, Target, TargetPart
from certflow.pipeline import ResolutionPlan, resolve_plan, resolve_target
from certflow.plugins import (
    FactoryContext,
    HostEnvironment,
    PluginCatalog,
    PluginDescriptor,
    PluginFactory,
    PluginScope,
)
from certflow.resolvers import InteractiveResolver, UnattendedResolver

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    "CertflowError",
    "Choice",
    "FactoryContext",
    "HostEnvironment",
    "Identifier",
    "InputService",
    "InteractiveResolver",
    "MainArguments",
    "PluginCatalog",
    "PluginDescriptor",
    "PluginFactory",
    "PluginScope",
    "ResolutionPlan",
    "RichInputService",
    "RunLevel",
    "Settings",
    "Step",
    "Target",
    "TargetPart",
    "UnattendedResolver",
    "load_settings",
    "resolve_plan",
    "resolve_target",
]
