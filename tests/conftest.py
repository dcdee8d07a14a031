"""Shared test fixtures for certflow.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from certflow.core.target import Target
from certflow.plugins.catalog import PluginCatalog
from certflow.plugins.context import HostEnvironment, PluginScope


@pytest.fixture()
def empty_catalog() -> PluginCatalog:
    """A catalog without the built-in plugins."""
    return PluginCatalog(auto_load_builtins=False)


@pytest.fixture()
def builtin_catalog() -> PluginCatalog:
    return PluginCatalog()


@pytest.fixture()
def scope() -> PluginScope:
    """Scope for an unprivileged host without IIS."""
    return PluginScope(HostEnvironment(admin=False, iis_version=0))


@pytest.fixture()
def admin_scope() -> PluginScope:
    """Scope for an elevated host running IIS 10."""
    return PluginScope(HostEnvironment(admin=True, iis_version=10))


@pytest.fixture()
def single_target() -> Target:
    return Target.from_hosts(["example.com"])


@pytest.fixture()
def multi_target() -> Target:
    return Target.from_hosts(["example.com", "www.example.com"])


@pytest.fixture()
def wildcard_target() -> Target:
    return Target.from_hosts(["*.example.com", "example.com"])


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "certflow"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"
