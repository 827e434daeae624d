"""Pydantic models describing raw stake-request transaction payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from facilitator.domain.model import StakeRequest
from facilitator.domain.normalization import (
    MalformedEventError,
    parse_uint,
    to_checksum_address,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pydantic import ValidationInfo
    from pydantic_core import ErrorDetails


class TransactionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class StakeRequestPayload(TransactionPayload):
    """One ``StakeRequested`` transaction as produced by the event ingestion layer."""

    stake_request_hash: str = Field(
        validation_alias=AliasChoices("requestHash", "stakeRequestHash", "stake_request_hash")
    )
    amount: int
    beneficiary: str
    gas_price: int = Field(validation_alias=AliasChoices("gasPrice", "gas_price"))
    gas_limit: int = Field(validation_alias=AliasChoices("gasLimit", "gas_limit"))
    nonce: int
    gateway: str
    staker: str
    staker_proxy: str = Field(validation_alias=AliasChoices("stakerProxy", "staker_proxy"))
    block_number: int = Field(validation_alias=AliasChoices("blockNumber", "block_number"))

    @field_validator("stake_request_hash", mode="before")
    @classmethod
    def _require_hash(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            raise MalformedEventError(
                f"Invalid stake request hash: {value!r}", field="stake_request_hash"
            )
        return value.strip()

    @field_validator("amount", "gas_price", "gas_limit", "nonce", "block_number", mode="before")
    @classmethod
    def _parse_uint(cls, value: object, info: ValidationInfo) -> int:
        return parse_uint(value, field=info.field_name)

    @field_validator("beneficiary", "gateway", "staker", "staker_proxy", mode="before")
    @classmethod
    def _checksum(cls, value: object, info: ValidationInfo) -> str:
        return to_checksum_address(value, field=info.field_name)

    def to_stake_request(self) -> StakeRequest:
        return StakeRequest(
            stake_request_hash=self.stake_request_hash,
            amount=self.amount,
            beneficiary=self.beneficiary,
            gas_price=self.gas_price,
            gas_limit=self.gas_limit,
            nonce=self.nonce,
            gateway=self.gateway,
            staker=self.staker,
            staker_proxy=self.staker_proxy,
            block_number=self.block_number,
        )


def parse_stake_request_payloads(
    transactions: Sequence[Mapping[str, object]],
) -> list[StakeRequestPayload]:
    """Validate a whole batch, failing on the first malformed transaction."""

    payloads: list[StakeRequestPayload] = []
    for index, transaction in enumerate(transactions):
        try:
            payloads.append(StakeRequestPayload.model_validate(transaction))
        except ValidationError as exc:
            errors = exc.errors()
            field = _failing_field(errors[0]) if errors else None
            message = errors[0]["msg"] if errors else str(exc)
            raise MalformedEventError(
                f"Malformed stake request at index {index}: {field}: {message}",
                field=field,
            ) from exc
    return payloads


def _failing_field(error: ErrorDetails) -> str | None:
    """Report the model field name, whichever alias the transaction used."""

    cause = error.get("ctx", {}).get("error")
    if isinstance(cause, MalformedEventError) and cause.field:
        return cause.field
    if not error["loc"]:
        return None
    location = str(error["loc"][0])
    return _FIELD_BY_ALIAS.get(location, location)


_FIELD_BY_ALIAS: dict[str, str] = {
    str(alias): name
    for name, info in StakeRequestPayload.model_fields.items()
    if isinstance(info.validation_alias, AliasChoices)
    for alias in info.validation_alias.choices
}
