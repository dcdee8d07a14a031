"""Read-only settings snapshot.

Settings carry the operator's persisted per-step defaults.  They are
loaded once (from YAML) and passed to the resolver; the resolver reads
them and never writes them back.

Usage
-----
::

    from certflow.config import load_settings

    settings = load_settings("settings.yaml")
    settings.store.default_store   # e.g. "pemfiles,pfxfile"

File format::

    source:
      default_source: manual
    validation:
      default_validation: filesystem
      default_validation_mode: http-01
    order:
      default_plugin: single
    csr:
      default_csr: rsa
    store:
      default_store: certificatestore,pemfiles
    installation:
      default_installation: iis

Every key is optional; an empty string means "no configured default".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from certflow.config.errors import SettingsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceSettings:
    default_source: str = ""


@dataclass(frozen=True)
class ValidationSettings:
    default_validation: str = ""
    default_validation_mode: str = ""


@dataclass(frozen=True)
class OrderSettings:
    default_plugin: str = ""


@dataclass(frozen=True)
class CsrSettings:
    default_csr: str = ""


@dataclass(frozen=True)
class StoreSettings:
    default_store: str = ""


@dataclass(frozen=True)
class InstallationSettings:
    default_installation: str = ""


@dataclass(frozen=True)
class Settings:
    """Per-step default plugin selections.

    Parameters
    ----------
    source:
        Default target plugin.
    validation:
        Default validation plugin and challenge type.
    order:
        Default order plugin.
    csr:
        Default CSR plugin.
    store:
        Comma-separated default store chain.
    installation:
        Comma-separated default installation chain.
    """

    source: SourceSettings = field(default_factory=SourceSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    order: OrderSettings = field(default_factory=OrderSettings)
    csr: CsrSettings = field(default_factory=CsrSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    installation: InstallationSettings = field(default_factory=InstallationSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> "Settings":
        """Build settings from a plain mapping, e.g. parsed YAML.

        Unknown sections and keys are ignored with a debug log entry.
        ``None`` values are read as empty strings.

        Raises
        ------
        SettingsError
            If a section is not a mapping or a value is not a scalar.
        """
        sections: dict[str, Any] = {}
        known = {f.name: f for f in fields(cls)}
        for section_name, raw in data.items():
            section_field = known.get(section_name)
            if section_field is None:
                logger.debug("Ignoring unknown settings section %r", section_name)
                continue
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raise SettingsError(
                    f"Section {section_name!r} must be a mapping, "
                    f"got {type(raw).__name__}.",
                    path,
                )
            section_type = section_field.default_factory  # type: ignore[misc]
            sections[section_name] = section_type(
                **_section_values(section_type, section_name, raw, path)
            )
        return cls(**sections)


def _section_values(
    section_type: type, section_name: str, raw: dict[str, Any], path: Path | None
) -> dict[str, str]:
    allowed = {f.name for f in fields(section_type)}
    values: dict[str, str] = {}
    for key, value in raw.items():
        if key not in allowed:
            logger.debug("Ignoring unknown settings key %s.%s", section_name, key)
            continue
        if value is None:
            values[key] = ""
        elif isinstance(value, (str, int, float, bool)):
            values[key] = str(value).strip()
        elif isinstance(value, list):
            # Chains may be written as YAML lists instead of CSV strings
            values[key] = ",".join(str(item).strip() for item in value)
        else:
            raise SettingsError(
                f"Setting {section_name}.{key} must be a string, "
                f"got {type(value).__name__}.",
                path,
            )
    return values


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file.

    Parameters
    ----------
    path:
        The settings file.  ``None`` returns empty settings, leaving every
        step to its compiled-in default.

    Returns
    -------
    Settings
        The parsed, immutable snapshot.

    Raises
    ------
    SettingsError
        If the file is missing, is not valid YAML, or its root is not a
        mapping.
    """
    if path is None:
        return Settings()
    settings_path = Path(path)
    try:
        text = settings_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SettingsError("Settings file not found.", settings_path) from None
    except OSError as exc:
        raise SettingsError(f"Cannot read settings file: {exc}", settings_path) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML: {exc}", settings_path) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(
            f"Settings root must be a mapping, got {type(data).__name__}.",
            settings_path,
        )
    logger.debug("Loaded settings from %s", settings_path)
    return Settings.from_dict(data, settings_path)
