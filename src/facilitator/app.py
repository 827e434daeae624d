"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from facilitator.adapters.sqlalchemy import is_started, stake_request_repository, startup
from facilitator.config import HandlerConfig, get_handler_config
from facilitator.domain.handlers import StakeRequestHandler

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from facilitator.domain.model import StakeRequest
    from facilitator.domain.ports import StakeRequestRepository


log = getLogger(__name__)


def build_stake_request_handler(
    repository: StakeRequestRepository,
    config: HandlerConfig | None = None,
) -> StakeRequestHandler:
    effective_config = config or get_handler_config()
    return StakeRequestHandler(
        repository,
        duplicate_key_policy=effective_config.duplicate_key_policy,
    )


async def persist_stake_requests(
    transactions: Sequence[Mapping[str, object]],
    *,
    repository: StakeRequestRepository | None = None,
    handler_config: HandlerConfig | None = None,
) -> list[StakeRequest]:
    """Persist observed stake request transactions using the configured adapters."""

    if repository is None:
        if not is_started():
            await startup()
        repository = stake_request_repository()

    handler = build_stake_request_handler(repository, handler_config)
    log.info(
        "Persisting stake requests: count=%s, duplicate_key_policy=%s",
        len(transactions),
        handler.duplicate_key_policy,
    )
    stake_requests = await handler.persist(transactions)
    log.info("Finished persisting stake requests: stored=%s", len(stake_requests))
    return stake_requests
