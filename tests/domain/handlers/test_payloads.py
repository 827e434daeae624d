from __future__ import annotations

import pytest

from facilitator.domain.handlers import StakeRequestPayload, parse_stake_request_payloads
from facilitator.domain.normalization import MalformedEventError
from tests.helpers.stake_requests import (
    BENEFICIARY,
    GATEWAY,
    REQUEST_HASH_A,
    STAKER,
    STAKER_PROXY,
    make_raw_transaction,
    make_stake_request,
)


def test_payload_normalizes_addresses_and_numbers() -> None:
    payload = StakeRequestPayload.model_validate(make_raw_transaction(amount=str(2**200)))

    assert payload.stake_request_hash == REQUEST_HASH_A
    assert payload.amount == 2**200
    assert payload.block_number == 100
    assert payload.beneficiary == BENEFICIARY[1]
    assert payload.gateway == GATEWAY[1]
    assert payload.staker == STAKER[1]
    assert payload.staker_proxy == STAKER_PROXY[1]


def test_payload_accepts_request_hash_alias_and_ignores_unknown_fields() -> None:
    raw = make_raw_transaction()
    del raw["stakeRequestHash"]
    raw["requestHash"] = REQUEST_HASH_A
    raw["transactionHash"] = "0x" + "11" * 32

    payload = StakeRequestPayload.model_validate(raw)

    assert payload.stake_request_hash == REQUEST_HASH_A


def test_payload_builds_stake_request_without_message_hash() -> None:
    payload = StakeRequestPayload.model_validate(make_raw_transaction())

    stake_request = payload.to_stake_request()

    assert stake_request == make_stake_request()
    assert stake_request.message_hash is None
    assert stake_request.awaiting_message


def test_parse_payloads_reports_index_and_field_of_first_failure() -> None:
    transactions = [
        make_raw_transaction(),
        make_raw_transaction(amount="ten"),
    ]

    with pytest.raises(MalformedEventError) as exc:
        parse_stake_request_payloads(transactions)

    assert exc.value.field == "amount"
    assert "index 1" in str(exc.value)


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("stakeRequestHash", "   "),
        ("beneficiary", "0x1234"),
        ("blockNumber", "-5"),
        ("gasPrice", 1.5),
    ],
)
def test_parse_payloads_rejects_malformed_fields(field: str, value: object) -> None:
    with pytest.raises(MalformedEventError):
        parse_stake_request_payloads([make_raw_transaction(**{field: value})])


def test_parse_payloads_rejects_missing_fields() -> None:
    raw = make_raw_transaction()
    del raw["staker"]

    with pytest.raises(MalformedEventError) as exc:
        parse_stake_request_payloads([raw])

    assert exc.value.field == "staker"


@pytest.mark.parametrize(
    ("alias", "value", "field"),
    [
        ("gasPrice", "cheap", "gas_price"),
        ("stakerProxy", "0x1234", "staker_proxy"),
        ("blockNumber", "-1", "block_number"),
        ("stakeRequestHash", "", "stake_request_hash"),
    ],
)
def test_parse_payloads_reports_model_field_for_aliased_input(
    alias: str, value: object, field: str
) -> None:
    with pytest.raises(MalformedEventError) as exc:
        parse_stake_request_payloads([make_raw_transaction(**{alias: value})])

    assert exc.value.field == field


def test_parse_payloads_reports_model_field_for_missing_aliased_input() -> None:
    raw = make_raw_transaction()
    del raw["gasLimit"]

    with pytest.raises(MalformedEventError) as exc:
        parse_stake_request_payloads([raw])

    assert exc.value.field == "gas_limit"


def test_parse_payloads_accepts_values_wider_than_uint256() -> None:
    long_hash = "0x" + "ab" * 40

    [payload] = parse_stake_request_payloads(
        [make_raw_transaction(long_hash, amount=str(2**260))]
    )

    assert payload.amount == 2**260
    assert payload.stake_request_hash == long_hash
