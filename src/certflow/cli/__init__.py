"""Command-line interface for certflow."""
from __future__ import annotations
