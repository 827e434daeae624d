"""SQLAlchemy mapping metadata for the facilitator domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import Column, DateTime, Dialect, String, Table, Text, TypeDecorator, orm

from facilitator.domain.model import StakeRequest

log = logging.getLogger(__name__)

ADDRESS_LENGTH: Final[int] = 42


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class BigUnsignedInteger(TypeDecorator[int]):
    """Arbitrary-precision unsigned integer stored as an unbounded decimal string."""

    impl = Text()
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"Expected a non-negative integer, got {value!r}")
        return str(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> int | None:
        _ = dialect
        if value is None:
            return None
        return int(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

stake_request_table = Table(
    "stake_request",
    mapper_registry.metadata,
    Column("stake_request_hash", Text, primary_key=True),
    Column("amount", BigUnsignedInteger, nullable=False),
    Column("beneficiary", String(ADDRESS_LENGTH), nullable=False),
    Column("gas_price", BigUnsignedInteger, nullable=False),
    Column("gas_limit", BigUnsignedInteger, nullable=False),
    Column("nonce", BigUnsignedInteger, nullable=False),
    Column("gateway", String(ADDRESS_LENGTH), nullable=False),
    Column("staker", String(ADDRESS_LENGTH), nullable=False),
    Column("staker_proxy", String(ADDRESS_LENGTH), nullable=False),
    Column("block_number", BigUnsignedInteger, nullable=False),
    Column("message_hash", Text, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

# columns written on every save; created_at is only set on first insert
STAKE_REQUEST_COLUMNS: Final[tuple[str, ...]] = (
    "stake_request_hash",
    "amount",
    "beneficiary",
    "gas_price",
    "gas_limit",
    "nonce",
    "gateway",
    "staker",
    "staker_proxy",
    "block_number",
    "message_hash",
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(StakeRequest, stake_request_table)

    orm.configure_mappers()
    return mapper_registry

