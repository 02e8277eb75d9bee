"""Request routing, response decoding and the two client flavours."""

from esplora_api.core.router import ENDPOINTS, Endpoint, EsploraRequest, build_request, register_endpoint
from esplora_api.core.decoder import decode_response
from esplora_api.core import endpoints
from esplora_api.core.blocking_client import EsploraClient
from esplora_api.core.async_client import AsyncEsploraClient

__all__ = [
    "ENDPOINTS",
    "Endpoint",
    "EsploraRequest",
    "build_request",
    "register_endpoint",
    "decode_response",
    "endpoints",
    "EsploraClient",
    "AsyncEsploraClient",
]
