"""Plugin resolvers.

``UnattendedResolver`` resolves every step from arguments, settings and
compiled-in defaults without asking.  ``InteractiveResolver`` extends it
with menus for the cases where no safe automatic decision exists.
"""
from __future__ import annotations

from certflow.resolvers.interactive import InteractiveResolver
from certflow.resolvers.unattended import UnattendedResolver

__all__ = ["InteractiveResolver", "UnattendedResolver"]
