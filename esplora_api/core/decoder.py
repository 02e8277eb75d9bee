"""
Response decoding for the Esplora REST API.

Esplora answers with JSON on success and with plain text bodies on failure,
so structured decoding is only attempted for 2xx responses.
"""

import re
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from esplora_api.core.router import Endpoint
from esplora_api.errors import ApiError, DecodeError, SchemaViolation
from esplora_api.utils.validation import is_hex_hash

INTEGER_PATTERN = re.compile(r'^-?[0-9]+$')


def body_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def json_body(target: Any) -> Callable[[bytes], Any]:
    """Decoder parsing a JSON body into ``target`` (a model or a typing construct)."""
    adapter = TypeAdapter(target)

    def decode(body: bytes) -> Any:
        try:
            return adapter.validate_json(body)
        except ValidationError as e:
            errors = e.errors()
            if any(error["type"] == "json_invalid" for error in errors):
                raise DecodeError(f"Malformed JSON: {errors[0]['msg']}", body_text(body)) from e
            raise SchemaViolation(f"Schema violation: {e}", body_text(body)) from e

    return decode


def text_body(body: bytes) -> str:
    """Plain text payloads such as hex serializations."""
    return body_text(body).strip()


def hash_body(body: bytes) -> str:
    """Plain text block hash or txid."""
    text = text_body(body)
    if not is_hex_hash(text):
        raise SchemaViolation(f"Expected a 64 character hex hash, got {text[:80]!r}", text)
    return text


def height_body(body: bytes) -> int:
    """Plain text non-negative integer, e.g. the tip height."""
    text = text_body(body)
    if not INTEGER_PATTERN.match(text):
        raise DecodeError(f"Expected an integer, got {text[:80]!r}", text)
    value = int(text)
    if value < 0:
        raise SchemaViolation(f"Expected a non-negative integer, got {value}", text)
    return value


def raw_body(body: bytes) -> bytes:
    return body


def decode_response(endpoint: Endpoint, status_code: int, body: bytes) -> Any:
    """
    Turn a response into a value or an error.

    Args:
        endpoint: Endpoint the request was built for
        status_code: HTTP status code
        body: Raw response body

    Raises:
        ApiError: Non-2xx status, carrying the body verbatim
        DecodeError: Success status but undecodable body
    """
    if not 200 <= status_code < 300:
        raise ApiError(status_code, body_text(body))
    return endpoint.decode(body)
