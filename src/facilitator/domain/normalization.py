"""Normalization helpers for raw chain payload values."""

from __future__ import annotations

import re
from typing import Final

from eth_utils import is_hex_address
from eth_utils import to_checksum_address as _eth_to_checksum_address

_DECIMAL_PATTERN: Final = re.compile(r"[0-9]+")
_HEX_PATTERN: Final = re.compile(r"0[xX][0-9a-fA-F]+")


class MalformedEventError(ValueError):
    """Raised when a raw event carries a value that cannot be normalized."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def to_checksum_address(address: object, *, field: str | None = None) -> str:
    """Return the EIP-55 checksummed form of a hex address in any case."""

    if not isinstance(address, str) or not is_hex_address(address.strip()):
        raise MalformedEventError(f"Invalid address: {address!r}", field=field)
    return _eth_to_checksum_address(address.strip())


def parse_uint(value: object, *, field: str | None = None) -> int:
    """Parse an arbitrary-precision unsigned integer.

    Accepts ints, decimal digit strings and ``0x``-prefixed hex strings. Floats are
    rejected outright so precision can never be lost silently.
    """

    if isinstance(value, bool):
        raise MalformedEventError(f"Invalid unsigned integer: {value!r}", field=field)
    if isinstance(value, int):
        if value < 0:
            raise MalformedEventError(f"Negative value not allowed: {value}", field=field)
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if _DECIMAL_PATTERN.fullmatch(text):
                return int(text)
            if _HEX_PATTERN.fullmatch(text):
                return int(text, 16)
        except ValueError as exc:  # exceeds the interpreter's digit limit
            message = f"Unsigned integer too long: {text[:16]}..."
            raise MalformedEventError(message, field=field) from exc
    raise MalformedEventError(f"Invalid unsigned integer: {value!r}", field=field)
