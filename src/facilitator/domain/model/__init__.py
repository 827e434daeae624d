"""Public domain model surface."""

from __future__ import annotations

from facilitator.domain.model.primitives import Address, Bytes32, Uint
from facilitator.domain.model.stake_request import StakeRequest

__all__ = [
    "Address",
    "Bytes32",
    "StakeRequest",
    "Uint",
]
