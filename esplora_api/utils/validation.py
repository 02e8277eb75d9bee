"""Lexical validation of identifiers sent to the Esplora API.

Each validator returns the value as it must appear in the request path and
raises ``ValueError`` when the value does not have the expected form.
"""

import re
from typing import Any

import base58

HEX_HASH_PATTERN = re.compile(r'^[0-9a-fA-F]{64}$')
HEX_PATTERN = re.compile(r'^(?:[0-9a-fA-F]{2})+$')

BASE58_PATTERN = re.compile(r'^[1-9A-HJ-NP-Za-km-z]{25,35}$')
BECH32_PATTERN = re.compile(r'^(bc|tb|bcrt)1[ac-hj-np-z02-9]{8,87}$')
PREFIX_PATTERN = re.compile(r'^[0-9A-Za-z]{1,90}$')

# Electrs pages block transactions by 25
BLOCK_TXS_PAGE_SIZE = 25


def validate_hex_hash(value: Any) -> str:
    """Transaction id, block hash or script hash: 64 hex characters."""
    if not isinstance(value, str) or not HEX_HASH_PATTERN.match(value):
        raise ValueError("expected a 64 character hex string")
    return value


def validate_address(value: Any) -> str:
    """Bitcoin address in base58check or bech32/bech32m form."""
    if not isinstance(value, str) or not value:
        raise ValueError("expected a non-empty address string")

    if BASE58_PATTERN.match(value):
        try:
            payload = base58.b58decode_check(value)
        except ValueError:
            raise ValueError("bad base58 checksum") from None
        if len(payload) != 21:
            raise ValueError("unexpected base58 payload length")
        return value

    # bech32 is case insensitive but must not mix cases
    if value != value.lower() and value != value.upper():
        raise ValueError("mixed case bech32 address")
    if BECH32_PATTERN.match(value.lower()):
        return value

    raise ValueError("not a base58 or bech32 address")


def validate_address_prefix(value: Any) -> str:
    if not isinstance(value, str) or not PREFIX_PATTERN.match(value):
        raise ValueError("expected 1 to 90 alphanumeric address characters")
    return value


def validate_non_negative_int(value: Any) -> str:
    """Heights and indexes. Bools are rejected even though they are ints."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an integer")
    if value < 0:
        raise ValueError("must not be negative")
    return str(value)


def validate_page_start(value: Any) -> str:
    """Start index of a block transactions page."""
    text = validate_non_negative_int(value)
    if value % BLOCK_TXS_PAGE_SIZE != 0:
        raise ValueError(f"must be a multiple of {BLOCK_TXS_PAGE_SIZE}")
    return text


def validate_raw_transaction(value: Any) -> str:
    """Serialized transaction to broadcast, hex encoded."""
    if not isinstance(value, str) or not HEX_PATTERN.match(value.strip()):
        raise ValueError("expected a non-empty even length hex string")
    return value.strip()


def is_hex_hash(value: str) -> bool:
    return bool(HEX_HASH_PATTERN.match(value))
