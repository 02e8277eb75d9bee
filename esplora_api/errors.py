"""Error types raised by the Esplora API clients."""

from typing import Any, Optional


class EsploraError(Exception):
    """Base class for all Esplora client errors."""
    pass


class ConfigError(EsploraError):
    """Invalid client configuration, raised when the client is built."""
    pass


class InvalidParameter(EsploraError, ValueError):
    """A caller supplied identifier failed lexical validation.

    Raised before any request is sent.
    """

    def __init__(self, operation: str, parameter: str, value: Any, reason: str):
        self.operation = operation
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"{operation}: invalid {parameter} {value!r}: {reason}")


class TransportError(EsploraError):
    """Network level failure (DNS, refused connection, timeout...)."""
    pass


class ApiError(EsploraError):
    """The server answered with a non-2xx status.

    Esplora error bodies are plain text, kept verbatim in ``body``.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class DecodeError(EsploraError):
    """A successful response body could not be decoded."""

    def __init__(self, detail: str, body: Optional[str] = None):
        self.detail = detail
        self.body = body
        super().__init__(detail)


class SchemaViolation(DecodeError):
    """Well-formed body whose values break a domain invariant."""
    pass
