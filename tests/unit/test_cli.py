"""Unit tests for certflow.cli.main — version, plugins and resolve commands."""
from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from certflow.cli.main import cli


def _make_runner() -> CliRunner:
    return CliRunner()


class TestVersionCommand:
    def test_shows_version(self, expected_version: str) -> None:
        result = _make_runner().invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "certflow" in result.output
        assert expected_version in result.output


class TestPluginsCommand:
    def test_lists_all_steps(self) -> None:
        result = _make_runner().invoke(cli, ["plugins"])
        assert result.exit_code == 0
        for name in ("manual", "selfhosting", "single", "rsa", "pemfiles", "script"):
            assert name in result.output

    def test_filters_by_step(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--step", "csr"])
        assert result.exit_code == 0
        assert "rsa" in result.output
        assert "pemfiles" not in result.output

    def test_reports_disabled_plugins(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--step", "store", "--no-admin"])
        assert "disabled" in result.output

    def test_admin_enables_certificate_store(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--step", "store", "--admin"])
        assert result.exit_code == 0
        assert "disabled" not in result.output

    def test_rejects_unknown_step(self) -> None:
        result = _make_runner().invoke(cli, ["plugins", "--step", "deploy"])
        assert result.exit_code != 0


class TestResolveCommand:
    def test_unattended_admin_plan(self) -> None:
        result = _make_runner().invoke(
            cli,
            ["resolve", "--host", "example.com", "--unattended", "--admin", "--iis-version", "10"],
        )
        assert result.exit_code == 0
        assert "selfhosting (http-01)" in result.output
        assert "certificatestore" in result.output

    def test_unattended_without_validation_fails(self) -> None:
        result = _make_runner().invoke(cli, ["resolve", "--host", "example.com", "--unattended"])
        assert result.exit_code == 1
        assert "no validation plugin selected" in result.output

    def test_unattended_with_overrides(self) -> None:
        result = _make_runner().invoke(
            cli,
            [
                "resolve", "--host", "*.example.com", "--unattended",
                "--validation", "script", "--validation-mode", "dns-01",
                "--store", "pemfiles,pfxfile", "--csr", "ec",
            ],
        )
        assert result.exit_code == 0
        assert "script (dns-01)" in result.output
        assert "pemfiles, pfxfile" in result.output
        assert "ec" in result.output

    def test_interactive_accepts_defaults(self) -> None:
        # target, validation, store and installation menus, each answered with Enter
        result = _make_runner().invoke(
            cli, ["resolve", "--host", "example.com"], input="\n\n\n\n"
        )
        assert result.exit_code == 0
        assert "filesystem (http-01)" in result.output
        assert "pemfiles" in result.output

    def test_interactive_admin_asks_nothing(self) -> None:
        result = _make_runner().invoke(
            cli, ["resolve", "--host", "example.com", "--admin", "--iis-version", "10"]
        )
        assert result.exit_code == 0
        assert "iis" in result.output

    def test_settings_file_is_used(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "validation:\n  default_validation: filesystem\n"
            "store:\n  default_store: [pemfiles, pfxfile]\n",
            encoding="utf-8",
        )
        result = _make_runner().invoke(
            cli, ["resolve", "-s", str(settings), "--host", "example.com", "--unattended"]
        )
        assert result.exit_code == 0
        assert "filesystem (http-01)" in result.output
        assert "pemfiles, pfxfile" in result.output

    def test_missing_settings_file(self, tmp_path: Path) -> None:
        result = _make_runner().invoke(
            cli,
            ["resolve", "-s", str(tmp_path / "nope.yaml"), "--host", "example.com"],
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unattended_and_advanced_conflict(self) -> None:
        result = _make_runner().invoke(
            cli, ["resolve", "--host", "example.com", "--unattended", "--advanced"]
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_blank_host_rejected(self) -> None:
        result = _make_runner().invoke(cli, ["resolve", "--host", " "])
        assert result.exit_code == 1

    def test_help_describes_interactive_overrides(self) -> None:
        result = _make_runner().invoke(cli, ["resolve", "--help"])
        assert result.exit_code == 0
        assert "ignored by interactive" in result.output
        assert "honour" in result.output

    def test_host_is_required(self) -> None:
        result = _make_runner().invoke(cli, ["resolve"])
        assert result.exit_code == 2
