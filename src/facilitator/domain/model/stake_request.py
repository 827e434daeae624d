"""Stake request entity tracked by the facilitator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from facilitator.domain.model.primitives import Address, Bytes32, Uint


@dataclass(kw_only=True)
class StakeRequest:
    """A stake request observed on the origin chain.

    ``message_hash`` stays ``None`` until the accept-stake-request message has been
    linked downstream. A record without one is still waiting to be processed.
    """

    stake_request_hash: Bytes32
    amount: Uint
    beneficiary: Address
    gas_price: Uint
    gas_limit: Uint
    nonce: Uint
    gateway: Address
    staker: Address
    staker_proxy: Address
    block_number: Uint
    message_hash: Bytes32 | None = None

    # maintained by the storage adapter
    created_at: datetime | None = field(default=None, compare=False)
    updated_at: datetime | None = field(default=None, compare=False)

    @property
    def awaiting_message(self) -> bool:
        return self.message_hash is None

    def rearm(self, block_number: Uint) -> None:
        """Move the request to a later block and require downstream linkage again."""

        self.block_number = block_number
        self.message_hash = None
