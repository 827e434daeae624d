"""Ports for turning observed contract transactions into domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class ContractEntityHandler[TEntity](Protocol):
    """Persist a batch of raw contract transactions as domain entities.

    Implementations return one entity per transaction, in input order.
    """

    async def persist(self, transactions: Sequence[Mapping[str, object]]) -> list[TEntity]: ...


__all__ = ["ContractEntityHandler"]
