"""Unit tests for certflow.resolvers.unattended.UnattendedResolver."""
from __future__ import annotations

import logging

import pytest

from certflow.config.arguments import MainArguments
from certflow.config.settings import Settings
from certflow.core.target import Target
from certflow.plugins import builtin
from certflow.plugins.catalog import PluginCatalog
from certflow.plugins.context import PluginScope
from certflow.resolvers.unattended import UnattendedResolver

LOGGER = "certflow.resolvers.unattended"


def _runner(meta) -> str | None:
    return None if meta is None else meta.runner


class TestDefaults:
    def test_target_defaults_to_manual(
        self, builtin_catalog: PluginCatalog, scope: PluginScope
    ) -> None:
        assert _runner(UnattendedResolver(builtin_catalog).get_target_plugin(scope)) == (
            builtin.TARGET_MANUAL
        )

    def test_validation_default_needs_admin(
        self,
        builtin_catalog: PluginCatalog,
        scope: PluginScope,
        admin_scope: PluginScope,
        single_target: Target,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        resolver = UnattendedResolver(builtin_catalog)
        assert _runner(resolver.get_validation_plugin(admin_scope, single_target)) == (
            builtin.VALIDATION_SELFHOSTING
        )
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            assert resolver.get_validation_plugin(scope, single_target) is None
        assert "Validation plugin selfhosting not available" in caplog.text

    def test_order_and_csr_defaults(
        self, builtin_catalog: PluginCatalog, scope: PluginScope, multi_target: Target
    ) -> None:
        resolver = UnattendedResolver(builtin_catalog)
        assert _runner(resolver.get_order_plugin(scope, multi_target)) == builtin.ORDER_SINGLE
        assert _runner(resolver.get_csr_plugin(scope)) == builtin.CSR_RSA

    def test_store_chain_defaults_to_certificate_store_only(
        self, builtin_catalog: PluginCatalog, admin_scope: PluginScope
    ) -> None:
        resolver = UnattendedResolver(builtin_catalog)
        first = resolver.get_store_plugin(admin_scope, [])
        assert _runner(first) == builtin.STORE_CERTIFICATESTORE
        assert resolver.get_store_plugin(admin_scope, [first]) is None

    def test_installation_defaults_to_none(
        self, builtin_catalog: PluginCatalog, scope: PluginScope
    ) -> None:
        meta = UnattendedResolver(builtin_catalog).get_installation_plugin(scope, [], [])
        assert meta is not None and meta.is_null


class TestOverrides:
    def test_arguments_take_precedence(
        self, builtin_catalog: PluginCatalog, scope: PluginScope
    ) -> None:
        settings = Settings.from_dict({"csr": {"default_csr": "rsa"}})
        resolver = UnattendedResolver(builtin_catalog, settings, MainArguments(csr="ec"))
        assert _runner(resolver.get_csr_plugin(scope)) == builtin.CSR_EC

    def test_blank_arguments_fall_back_to_settings(
        self, builtin_catalog: PluginCatalog, scope: PluginScope, single_target: Target
    ) -> None:
        settings = Settings.from_dict(
            {
                "validation": {"default_validation": "sftp"},
                "csr": {"default_csr": "ec"},
                "store": {"default_store": "pfxfile"},
            }
        )
        arguments = MainArguments(validation="   ", csr="  ", store=" ", validation_mode=" ")
        resolver = UnattendedResolver(builtin_catalog, settings, arguments)
        assert _runner(resolver.get_validation_plugin(scope, single_target)) == (
            builtin.VALIDATION_SFTP
        )
        assert _runner(resolver.get_csr_plugin(scope)) == builtin.CSR_EC
        assert _runner(resolver.get_store_plugin(scope, [])) == builtin.STORE_PFXFILE

    def test_blank_arguments_without_settings_use_defaults(
        self,
        builtin_catalog: PluginCatalog,
        scope: PluginScope,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        arguments = MainArguments(source=" ", order="\t", csr="  ")
        resolver = UnattendedResolver(builtin_catalog, arguments=arguments)
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            assert _runner(resolver.get_target_plugin(scope)) == builtin.TARGET_MANUAL
            assert _runner(resolver.get_csr_plugin(scope)) == builtin.CSR_RSA
            assert _runner(
                resolver.get_order_plugin(scope, Target.from_hosts(["a.test", "b.test"]))
            ) == builtin.ORDER_SINGLE
        assert caplog.text == ""

    def test_validation_mode_from_settings(
        self, builtin_catalog: PluginCatalog, scope: PluginScope, wildcard_target: Target
    ) -> None:
        settings = Settings.from_dict(
            {"validation": {"default_validation": "manual", "default_validation_mode": "dns-01"}}
        )
        meta = UnattendedResolver(builtin_catalog, settings).get_validation_plugin(
            scope, wildcard_target
        )
        assert _runner(meta) == builtin.VALIDATION_MANUAL_DNS

    def test_unknown_plugin_is_logged_and_skipped(
        self,
        builtin_catalog: PluginCatalog,
        scope: PluginScope,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        resolver = UnattendedResolver(builtin_catalog, arguments=MainArguments(csr="dsa"))
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            assert resolver.get_csr_plugin(scope) is None
        assert "Unable to find csr plugin dsa" in caplog.text
        assert "--csr" in caplog.text

    def test_unusable_override_is_skipped(
        self, builtin_catalog: PluginCatalog, scope: PluginScope, single_target: Target
    ) -> None:
        resolver = UnattendedResolver(builtin_catalog, arguments=MainArguments(order="host"))
        assert resolver.get_order_plugin(scope, single_target) is None

    def test_missing_default_is_logged(
        self, empty_catalog: PluginCatalog, scope: PluginScope, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            assert UnattendedResolver(empty_catalog).get_csr_plugin(scope) is None
        assert "Unable to find default csr plugin csr.rsa" in caplog.text


class TestChains:
    def test_store_csv_walks_positions(
        self, builtin_catalog: PluginCatalog, scope: PluginScope
    ) -> None:
        resolver = UnattendedResolver(
            builtin_catalog, arguments=MainArguments(store="pemfiles, PFXFile")
        )
        first = resolver.get_store_plugin(scope, [])
        second = resolver.get_store_plugin(scope, [first])
        assert [_runner(first), _runner(second)] == [builtin.STORE_PEMFILES, builtin.STORE_PFXFILE]
        assert resolver.get_store_plugin(scope, [first, second]) is None

    def test_installation_csv_checks_stores(
        self, builtin_catalog: PluginCatalog, admin_scope: PluginScope
    ) -> None:
        pemfiles = builtin_catalog.get_by_runner(builtin.STORE_PEMFILES)
        resolver = UnattendedResolver(
            builtin_catalog, arguments=MainArguments(installation="iis")
        )
        assert resolver.get_installation_plugin(admin_scope, [pemfiles], []) is None

    def test_installation_csv_from_settings(
        self, builtin_catalog: PluginCatalog, admin_scope: PluginScope
    ) -> None:
        store = builtin_catalog.get_by_runner(builtin.STORE_CERTIFICATESTORE)
        settings = Settings.from_dict({"installation": {"default_installation": ["iis", "script"]}})
        resolver = UnattendedResolver(builtin_catalog, settings)
        first = resolver.get_installation_plugin(admin_scope, [store], [])
        second = resolver.get_installation_plugin(admin_scope, [store], [first])
        assert [_runner(first), _runner(second)] == [
            builtin.INSTALLATION_IIS,
            builtin.INSTALLATION_SCRIPT,
        ]
