"""Core domain types.

Pipeline steps, run levels, certificate targets and the shared exception
base live here. Submodules in core/ should not import from plugins/,
resolvers/ or cli/.
"""
from __future__ import annotations

from certflow.core.errors import CertflowError
from certflow.core.steps import (
    DNS01_CHALLENGE_TYPE,
    HTTP01_CHALLENGE_TYPE,
    TLSALPN01_CHALLENGE_TYPE,
    RunLevel,
    Step,
)
from certflow.core.target import Identifier, Target, TargetPart

__all__ = [
    "CertflowError",
    "DNS01_CHALLENGE_TYPE",
    "HTTP01_CHALLENGE_TYPE",
    "TLSALPN01_CHALLENGE_TYPE",
    "Identifier",
    "RunLevel",
    "Step",
    "Target",
    "TargetPart",
]
