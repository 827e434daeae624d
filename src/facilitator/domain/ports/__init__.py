"""Domain port definitions for adapters."""

from __future__ import annotations

from .handlers import ContractEntityHandler
from .persistence import Repository, StakeRequestRepository

__all__ = [
    "ContractEntityHandler",
    "Repository",
    "StakeRequestRepository",
]
