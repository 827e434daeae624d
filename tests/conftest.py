from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from facilitator.adapters.sqlalchemy import shutdown, stake_request_repository, startup

from tests.helpers.stake_requests import InMemoryStakeRequestRepository

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from pathlib import Path

    from facilitator.adapters.sqlalchemy import SqlAlchemyStakeRequestRepository

    type RepositoryScenario[T] = Callable[[SqlAlchemyStakeRequestRepository], Awaitable[T]]


@pytest.fixture(autouse=True)
def _default_database_uri(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the environment-configured adapter at a per-test SQLite file."""

    monkeypatch.setenv("DATABASE_URI", f"sqlite+aiosqlite:///{tmp_path / 'default.db'}")


@pytest.fixture
def memory_repository() -> InMemoryStakeRequestRepository:
    return InMemoryStakeRequestRepository()


@pytest.fixture
def sqlite_database_uri(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'facilitator.db'}"


@pytest.fixture
def run_with_sqlite_repository[T](
    sqlite_database_uri: str,
) -> Callable[[RepositoryScenario[T]], T]:
    """Run an async scenario against a freshly migrated file-backed SQLite store.

    Engine creation, the scenario and disposal share one event loop.
    """

    def runner(scenario: RepositoryScenario[T]) -> T:
        async def run() -> T:
            engine = create_async_engine(sqlite_database_uri)
            await startup(engine=engine, force=True)
            try:
                return await scenario(stake_request_repository())
            finally:
                await shutdown()

        return asyncio.run(run())

    return runner
