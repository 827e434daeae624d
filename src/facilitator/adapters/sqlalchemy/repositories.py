"""Repository implementations backed by SQLAlchemy async sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy.dialects import postgresql, sqlite

from facilitator.adapters.sqlalchemy.mappings import STAKE_REQUEST_COLUMNS, stake_request_table
from facilitator.domain.model import StakeRequest

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from facilitator.domain.model import Bytes32

log = getLogger(__name__)

_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class UnsupportedDialectError(RuntimeError):
    """Raised when the configured database cannot perform an upsert."""


class SqlAlchemyStakeRequestRepository:
    """Stake request store with one short-lived session per operation.

    Operations never share a session, so they can run concurrently from the same
    event loop. Every ``save`` commits on its own.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: Bytes32) -> StakeRequest | None:
        async with self.session_factory() as session:
            return await session.get(StakeRequest, key)

    async def save(self, entity: StakeRequest) -> StakeRequest:
        now = datetime.now(tz=UTC)
        values = {name: getattr(entity, name) for name in STAKE_REQUEST_COLUMNS}

        async with self.session_factory() as session, session.begin():
            insert = _insert_for(session.get_bind().dialect.name)
            stmt = insert(stake_request_table).values(**values, created_at=now, updated_at=now)
            excluded = stmt.excluded
            updates = {name: excluded[name] for name in STAKE_REQUEST_COLUMNS[1:]}
            updates["updated_at"] = excluded["updated_at"]
            stmt = stmt.on_conflict_do_update(
                index_elements=[stake_request_table.c.stake_request_hash],
                set_=updates,
            ).returning(stake_request_table.c.created_at, stake_request_table.c.updated_at)
            row = (await session.execute(stmt)).one()

        entity.created_at = cast("datetime", row.created_at)
        entity.updated_at = cast("datetime", row.updated_at)
        log.debug(
            "Saved stake request %s at block %s (message hash %s)",
            entity.stake_request_hash,
            entity.block_number,
            entity.message_hash,
        )
        return entity


def _insert_for(dialect_name: str) -> Callable[..., Any]:
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError as exc:
        raise UnsupportedDialectError(
            f"Stake request upserts are not supported on {dialect_name!r}"
        ) from exc


if TYPE_CHECKING:
    from facilitator.domain.ports.persistence import StakeRequestRepository

    _session_factory_stub = cast("async_sessionmaker[AsyncSession]", object())
    _repo_check: StakeRequestRepository = SqlAlchemyStakeRequestRepository(_session_factory_stub)
