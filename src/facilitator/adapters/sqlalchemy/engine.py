"""Lifecycle of the SQLAlchemy async engine shared by the repositories."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from facilitator.adapters.sqlalchemy.mappings import start_mappers
from facilitator.adapters.sqlalchemy.migrations import upgrade_head
from facilitator.adapters.sqlalchemy.repositories import SqlAlchemyStakeRequestRepository
from facilitator.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before (or twice) initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @engine.setter
    def engine(self, value: AsyncEngine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call facilitator.adapters.sqlalchemy."
                "engine.startup() before requesting a session."
            )
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
            )
        return self._session_factory


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> AsyncEngine:
    """Initialise the async engine, mappers and schema."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        echo = False
        if database_uri is None:
            config = get_database_config()
            database_uri, echo = config.uri, config.echo
        engine = create_async_engine(database_uri, echo=echo)
    start_mappers()
    await upgrade_head(engine=engine)

    if _STATE.engine is not None and _STATE.engine is not engine:
        await _STATE.engine.dispose()
    _STATE.engine = engine
    log.info("SQLAlchemy adapter started on %s", engine.url.render_as_string(hide_password=True))
    return engine


def configured_engine() -> AsyncEngine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def session_factory() -> async_sessionmaker[AsyncSession]:
    return _STATE.session_factory


def stake_request_repository() -> SqlAlchemyStakeRequestRepository:
    """Return a repository bound to the managed engine."""

    return SqlAlchemyStakeRequestRepository(_STATE.session_factory)


async def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None
