"""Reconcile observed stake request transactions with stored stake requests.

A chain reorganisation can deliver the same ``StakeRequested`` transaction more
than once, at a different block height. The merge policy per transaction:

- no stored record -> create a fresh record (``CREATED``)
- stored record at a lower block -> keep the stored terms, move it to the new
  block and clear the message hash so acceptance is retried (``REARMED``)
- stored record at the same or a higher block -> replace it with a fresh record
  built from the transaction (``REPLACED``); a stored message hash is dropped

Resolution of different transactions in one batch runs concurrently. With the
default ``DuplicateKeyPolicy.CONCURRENT`` two transactions sharing a hash both
resolve against the same stored state and the last save to commit wins.
``DuplicateKeyPolicy.SERIALIZED`` resolves them in input order instead.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, cast

from .payloads import StakeRequestPayload, parse_stake_request_payloads

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping, Sequence

    from facilitator.domain.model import StakeRequest
    from facilitator.domain.ports import ContractEntityHandler, StakeRequestRepository


log = getLogger(__name__)


class ResolutionDecision(StrEnum):
    """How one transaction was merged into the stored record set."""

    CREATED = "created"
    REARMED = "rearmed"
    REPLACED = "replaced"


class DuplicateKeyPolicy(StrEnum):
    """How transactions sharing a stake request hash within one batch are resolved."""

    CONCURRENT = "concurrent"
    SERIALIZED = "serialized"


@dataclass(slots=True, kw_only=True)
class StakeRequestResolution:
    decision: ResolutionDecision
    stake_request: StakeRequest
    previous_block_number: int | None = None


def resolve_stake_request(
    payload: StakeRequestPayload,
    existing: StakeRequest | None,
) -> StakeRequestResolution:
    """Apply the reorg-aware merge policy to one transaction.

    ``existing`` is mutated in place when it is rearmed.
    """

    if existing is None:
        return StakeRequestResolution(
            decision=ResolutionDecision.CREATED,
            stake_request=payload.to_stake_request(),
        )

    previous_block_number = existing.block_number
    if payload.block_number > previous_block_number:
        existing.rearm(payload.block_number)
        return StakeRequestResolution(
            decision=ResolutionDecision.REARMED,
            stake_request=existing,
            previous_block_number=previous_block_number,
        )

    return StakeRequestResolution(
        decision=ResolutionDecision.REPLACED,
        stake_request=payload.to_stake_request(),
        previous_block_number=previous_block_number,
    )


@dataclass(slots=True)
class StakeRequestHandler:
    """Persist ``StakeRequested`` transactions as ``StakeRequest`` records."""

    repository: StakeRequestRepository
    duplicate_key_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.CONCURRENT

    async def persist(self, transactions: Sequence[Mapping[str, object]]) -> list[StakeRequest]:
        """Resolve and save ``transactions``; returns one record per transaction, in order.

        The whole batch is validated before the repository is touched, so a malformed
        transaction never leads to a partial write. Read and save failures propagate once
        every sibling operation has settled; saves that already committed are kept.
        """

        log.debug("Persisting %s stake request records", len(transactions))
        payloads = parse_stake_request_payloads(transactions)

        if self.duplicate_key_policy is DuplicateKeyPolicy.SERIALIZED:
            resolutions = await self._resolve_serialized(payloads)
        else:
            resolutions = await _gather_settled(*(self._resolve(payload) for payload in payloads))

        stake_requests = [resolution.stake_request for resolution in resolutions]
        await self._save(stake_requests)

        decisions = Counter(resolution.decision for resolution in resolutions)
        log.info(
            "Stake requests saved: created=%s, rearmed=%s, replaced=%s",
            decisions[ResolutionDecision.CREATED],
            decisions[ResolutionDecision.REARMED],
            decisions[ResolutionDecision.REPLACED],
        )
        return stake_requests

    async def _resolve(self, payload: StakeRequestPayload) -> StakeRequestResolution:
        existing = await self.repository.get(payload.stake_request_hash)
        resolution = resolve_stake_request(payload, existing)
        _log_resolution(payload, resolution)
        return resolution

    async def _resolve_serialized(
        self,
        payloads: list[StakeRequestPayload],
    ) -> list[StakeRequestResolution]:
        resolutions: dict[int, StakeRequestResolution] = {}

        async def resolve_group(stake_request_hash: str, indices: list[int]) -> None:
            existing = await self.repository.get(stake_request_hash)
            for index in indices:
                payload = payloads[index]
                # later transactions see the previous one's outcome, not the shared object
                prior = replace(existing) if existing is not None else None
                resolution = resolve_stake_request(payload, prior)
                _log_resolution(payload, resolution)
                resolutions[index] = resolution
                existing = resolution.stake_request

        groups = _group_indices_by_hash(payloads)
        await _gather_settled(*(resolve_group(key, indices) for key, indices in groups.items()))
        return [resolutions[index] for index in range(len(payloads))]

    async def _save(self, stake_requests: list[StakeRequest]) -> None:
        if self.duplicate_key_policy is DuplicateKeyPolicy.SERIALIZED:
            groups: dict[str, list[StakeRequest]] = {}
            for stake_request in stake_requests:
                groups.setdefault(stake_request.stake_request_hash, []).append(stake_request)
            await _gather_settled(*(self._save_in_order(group) for group in groups.values()))
            return

        await _gather_settled(*(self._save_one(stake_request) for stake_request in stake_requests))

    async def _save_in_order(self, stake_requests: list[StakeRequest]) -> None:
        for stake_request in stake_requests:
            await self._save_one(stake_request)

    async def _save_one(self, stake_request: StakeRequest) -> StakeRequest:
        log.debug("Saving stake request for hash %s", stake_request.stake_request_hash)
        return await self.repository.save(stake_request)


async def _gather_settled[T](*awaitables: Awaitable[T]) -> list[T]:
    """Run \`\`awaitables\`\` concurrently and re-raise the first failure once all have settled."""

    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return cast("list[T]", results)


def _group_indices_by_hash(payloads: list[StakeRequestPayload]) -> dict[str, list[int]]:
    groups: dict[str, list[int]] = {}
    for index, payload in enumerate(payloads):
        groups.setdefault(payload.stake_request_hash, []).append(index)
    return groups


def _log_resolution(payload: StakeRequestPayload, resolution: StakeRequestResolution) -> None:
    log.debug(
        "Stake request %s %s: block %s -> %s",
        payload.stake_request_hash,
        resolution.decision,
        resolution.previous_block_number,
        payload.block_number,
    )


if TYPE_CHECKING:
    _handler_check: ContractEntityHandler[StakeRequest] = StakeRequestHandler(
        cast("StakeRequestRepository", object())
    )
