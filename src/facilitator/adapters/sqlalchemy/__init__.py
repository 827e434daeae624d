"""SQLAlchemy adapter package for the facilitator."""

from __future__ import annotations

from .engine import (
    StartupError,
    configured_engine,
    is_started,
    session_factory,
    shutdown,
    stake_request_repository,
    startup,
)
from .mappings import mapper_registry, stake_request_table, start_mappers
from .repositories import SqlAlchemyStakeRequestRepository, UnsupportedDialectError

__all__ = [
    "SqlAlchemyStakeRequestRepository",
    "StartupError",
    "UnsupportedDialectError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "session_factory",
    "shutdown",
    "stake_request_repository",
    "stake_request_table",
    "start_mappers",
    "startup",
]
