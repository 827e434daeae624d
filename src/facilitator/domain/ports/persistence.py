"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from facilitator.domain.model import Bytes32, StakeRequest


@runtime_checkable
class Repository[TEntity, TKey](Protocol):
    """Minimal keyed repository contract for a persistent aggregate store."""

    async def get(self, key: TKey) -> TEntity | None: ...

    async def save(self, entity: TEntity) -> TEntity: ...


@runtime_checkable
class StakeRequestRepository(Repository[StakeRequest, Bytes32], Protocol):
    """Persistence contract for stake requests, keyed by stake request hash.

    ``save`` is an upsert that writes every field, including a cleared message hash.
    """
