"""Operator interaction: menu options and input services."""
from __future__ import annotations

from certflow.console.choice import Choice
from certflow.console.input import InputService, RichInputService

__all__ = ["Choice", "InputService", "RichInputService"]
