from __future__ import annotations

import pytest

from facilitator.domain.normalization import MalformedEventError, parse_uint, to_checksum_address
from tests.helpers.stake_requests import BENEFICIARY, GATEWAY


def test_to_checksum_address_normalizes_lowercase_input() -> None:
    assert to_checksum_address(BENEFICIARY[0]) == BENEFICIARY[1]


def test_to_checksum_address_accepts_uppercase_and_unprefixed_input() -> None:
    upper = "0x" + GATEWAY[0][2:].upper()

    assert to_checksum_address(upper) == GATEWAY[1]
    assert to_checksum_address(GATEWAY[0][2:]) == GATEWAY[1]


def test_to_checksum_address_is_idempotent() -> None:
    assert to_checksum_address(BENEFICIARY[1]) == BENEFICIARY[1]


@pytest.mark.parametrize(
    "value",
    ["", "0x1234", "0x" + "zz" * 20, BENEFICIARY[0] + "00", None, 42],
)
def test_to_checksum_address_rejects_malformed_values(value: object) -> None:
    with pytest.raises(MalformedEventError) as exc:
        to_checksum_address(value, field="beneficiary")

    assert exc.value.field == "beneficiary"


def test_parse_uint_keeps_precision_beyond_float_range() -> None:
    uint256_max = 2**256 - 1

    assert parse_uint(str(uint256_max)) == uint256_max
    assert parse_uint("9007199254740993") == 9007199254740993


def test_parse_uint_accepts_ints_hex_and_padded_strings() -> None:
    assert parse_uint(0) == 0
    assert parse_uint(7) == 7
    assert parse_uint("0x10") == 16
    assert parse_uint(" 42 ") == 42


@pytest.mark.parametrize("value", ["", "-1", "1.5", "1e3", "abc", -1, 1.0, True, None])
def test_parse_uint_rejects_malformed_values(value: object) -> None:
    with pytest.raises(MalformedEventError) as exc:
        parse_uint(value, field="amount")

    assert exc.value.field == "amount"


def test_malformed_event_error_is_a_value_error() -> None:
    assert issubclass(MalformedEventError, ValueError)
