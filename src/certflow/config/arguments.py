"""Command-line overrides for the per-step defaults."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MainArguments:
    """Plugin names supplied on the command line.

    Empty strings mean "not supplied".  ``store`` and ``installation``
    accept comma-separated chains, e.g. ``"pemfiles,pfxfile"``.
    """

    source: str = ""
    validation: str = ""
    validation_mode: str = ""
    order: str = ""
    csr: str = ""
    store: str = ""
    installation: str = ""
