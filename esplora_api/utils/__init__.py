"""Utility functions and helpers."""

from esplora_api.utils.logging import setup_logging
from esplora_api.utils.validation import (
    validate_address,
    validate_address_prefix,
    validate_hex_hash,
    validate_non_negative_int,
    validate_page_start,
    validate_raw_transaction,
)

__all__ = [
    "setup_logging",
    "validate_address",
    "validate_address_prefix",
    "validate_hex_hash",
    "validate_non_negative_int",
    "validate_page_start",
    "validate_raw_transaction",
]
