"""Exception base shared by every certflow subsystem."""
from __future__ import annotations


class CertflowError(Exception):
    """Base class for errors raised by certflow.

    Outcomes of plugin resolution (a missing override, an unusable
    plugin, a user abort) are *not* exceptions; they are logged and
    reported as a ``None`` selection. Subclasses of this error signal
    misuse of the catalog or unreadable configuration.
    """
