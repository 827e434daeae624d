"""Handlers turning observed contract transactions into persisted domain entities."""

from __future__ import annotations

from .payloads import StakeRequestPayload, parse_stake_request_payloads
from .stake_request import (
    DuplicateKeyPolicy,
    ResolutionDecision,
    StakeRequestHandler,
    StakeRequestResolution,
    resolve_stake_request,
)

__all__ = [
    "DuplicateKeyPolicy",
    "ResolutionDecision",
    "StakeRequestHandler",
    "StakeRequestPayload",
    "StakeRequestResolution",
    "parse_stake_request_payloads",
    "resolve_stake_request",
]
