"""
Esplora API

Typed client for the Blockstream Esplora/Electrs block explorer REST API,
in blocking (requests) and asyncio (httpx) flavours.
"""

__version__ = "0.1.0"
__description__ = "Wrapper for the Blockstream or self hosted Esplora API"

from esplora_api.errors import (
    ApiError,
    ConfigError,
    DecodeError,
    EsploraError,
    InvalidParameter,
    SchemaViolation,
    TransportError,
)
from esplora_api.models.config import ClientOptions, EsploraSettings
from esplora_api.core.async_client import AsyncEsploraClient
from esplora_api.core.blocking_client import EsploraClient
from esplora_api.utils.logging import setup_logging

__all__ = [
    "EsploraClient",
    "AsyncEsploraClient",
    "ClientOptions",
    "EsploraSettings",
    "setup_logging",
    "EsploraError",
    "ConfigError",
    "InvalidParameter",
    "TransportError",
    "ApiError",
    "DecodeError",
    "SchemaViolation",
]
