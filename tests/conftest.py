"""Pytest configuration and fixtures for Esplora client tests."""

import json
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest
import requests

from esplora_api.core.router import ENDPOINTS

BASE_URL = "https://esplora.test/api"

TXID = "c9ee6eff3d73d6cb92382125c3207f6447922b545d4d4e74c47bfeb56fff7d24"
BLOCK_HASH = "000000000000003aaa3b99e31ed1cac4744b423f9e52ada4971461c81d4192f7"
PREV_BLOCK_HASH = "00000000000000a7b2a6c3fd5e0f1f8b63bbb0e8a1de4bd1df2a3b6d26de2c29"
GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
SCRIPTHASH = "6b86b273ff34fce19d6b804eff5a3f5747ada4eaa22f1d49c01e52ddb7875b4b"

# (method, url, body) -> (status, body)
Responder = Callable[[str, str, Optional[str]], Tuple[int, bytes]]


def routes(table: Dict[str, Tuple[int, bytes]], default: Tuple[int, bytes] = (404, b"Not Found")) -> Responder:
    """Responder answering by URL path relative to BASE_URL."""
    def respond(method: str, url: str, body: Optional[str]) -> Tuple[int, bytes]:
        path = url[len(BASE_URL):]
        return table.get(path, default)
    return respond


class FakeSession:
    """Stand-in for requests.Session recording every request it receives."""

    def __init__(self, responder: Responder):
        self.responder = responder
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict] = []
        self.closed = False

    def request(self, method, url, data=None, headers=None, timeout=None):
        self.calls.append({
            "method": method,
            "url": url,
            "data": data,
            "headers": headers,
            "timeout": timeout,
        })
        status, body = self.responder(method, url, data)

        response = requests.Response()
        response.status_code = status
        response._content = body
        response.url = url
        return response

    def close(self):
        self.closed = True


class RecordingTransport(httpx.MockTransport):
    """httpx mock transport keeping the requests it handled."""

    def __init__(self, responder: Responder):
        self.requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            body = request.content.decode() if request.content else None
            status, content = responder(request.method, str(request.url), body)
            return httpx.Response(status, content=content)

        super().__init__(handler)


def as_json(data) -> bytes:
    return json.dumps(data).encode()


# ============================================================================
# SAMPLE PAYLOADS
# ============================================================================

@pytest.fixture
def block_payload():
    """Block as returned by /block/:hash."""
    return {
        "id": BLOCK_HASH,
        "height": 1580000,
        "version": 536870912,
        "timestamp": 1571234567,
        "mediantime": 1571230000,
        "bits": 436273151,
        "nonce": 2936392811,
        "difficulty": 1.0,
        "merkle_root": "4d4b3a1f2e6c7d8e9f0a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f60",
        "tx_count": 42,
        "size": 12345,
        "weight": 45678,
        "previousblockhash": PREV_BLOCK_HASH,
    }


@pytest.fixture
def genesis_payload(block_payload):
    """Genesis block, without a previous block hash."""
    payload = dict(block_payload, height=0, tx_count=1)
    del payload["previousblockhash"]
    return payload


@pytest.fixture
def transaction_payload():
    """Confirmed transaction as returned by /tx/:txid."""
    return {
        "txid": TXID,
        "version": 2,
        "locktime": 1579999,
        "size": 225,
        "weight": 573,
        "fee": 2820,
        "vin": [
            {
                "txid": "bdbaa506c8903918b407fca86bd3498cd7794000b22cddeb1c87c2d9eb8fab62",
                "vout": 1,
                "is_coinbase": False,
                "scriptsig": "",
                "scriptsig_asm": "",
                "witness": [
                    "3044022047ac8e878352d3ebbde1c94ce3a10d057c24175747116f8288e5d794d12d482f022"
                    "0217f36a485cae903c713331d877c1f64677e3622ad4010726870540656fe9dcb01",
                    "038262a6c6cec93c2d3ecd6c6072efea86d02ff8e3328bbd0242b20af3425990ac",
                ],
                "sequence": 4294967293,
                "prevout": {
                    "scriptpubkey": "0014a3b1b3e1a05a3cfc1a63a3c10c3f8f2a3b8b2e7d",
                    "scriptpubkey_asm": "OP_0 OP_PUSHBYTES_20 a3b1b3e1a05a3cfc1a63a3c10c3f8f2a3b8b2e7d",
                    "scriptpubkey_type": "v0_p2wpkh",
                    "scriptpubkey_address": "tb1q5wcm8cdqtg70cxnr50qsc0u09gachfmaxqmp6z",
                    "value": 1000000,
                },
            }
        ],
        "vout": [
            {
                "scriptpubkey": "76a914e4e5f21e0b5d1a3b8c1a2f3e4d5c6b7a8998877688ac",
                "scriptpubkey_asm": "OP_DUP OP_HASH160 OP_PUSHBYTES_20 e4e5f21e0b5d1a3b8c1a2f3e4d5c6b7a89988776 OP_EQUALVERIFY OP_CHECKSIG",
                "scriptpubkey_type": "p2pkh",
                "scriptpubkey_address": "n1vgV8XmoggmRXzW3hGD8ZNTAgvhcwT4Gk",
                "value": 500000,
            },
            {
                "scriptpubkey": "6a0b68656c6c6f20776f726c64",
                "scriptpubkey_asm": "OP_RETURN OP_PUSHBYTES_11 68656c6c6f20776f726c64",
                "scriptpubkey_type": "op_return",
                "value": 0,
            },
        ],
        "status": {
            "confirmed": True,
            "block_height": 1580000,
            "block_hash": BLOCK_HASH,
            "block_time": 1571234567,
        },
    }


@pytest.fixture
def address_payload():
    """Address statistics as returned by /address/:address."""
    return {
        "address": GENESIS_ADDRESS,
        "chain_stats": {
            "funded_txo_count": 10,
            "funded_txo_sum": 1000000000,
            "spent_txo_count": 5,
            "spent_txo_sum": 500000000,
            "tx_count": 15,
        },
        "mempool_stats": {
            "funded_txo_count": 0,
            "funded_txo_sum": 0,
            "spent_txo_count": 1,
            "spent_txo_sum": 20000,
            "tx_count": 1,
        },
    }


@pytest.fixture
def mempool_payload():
    return {
        "count": 8134,
        "vsize": 3444604,
        "total_fee": 29204625,
        "fee_histogram": [[53.01, 102131], [38.56, 110990], [34.12, 138976], [1.1, 775272]],
    }


@pytest.fixture
def fee_estimates_payload():
    return {"1": 87.882, "2": 87.882, "3": 81.129, "6": 68.285, "144": 1.027, "504": 1.027, "1008": 1.027}


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def make_session():
    """Build a recording fake session from a responder."""
    return FakeSession


@pytest.fixture
def make_async_client():
    """Build an httpx.AsyncClient served by a recording mock transport."""
    def build(responder: Responder):
        transport = RecordingTransport(responder)
        return httpx.AsyncClient(transport=transport), transport
    return build


@pytest.fixture
def temporary_endpoints():
    """Remove endpoints registered by a test once it is done."""
    before = set(ENDPOINTS)
    yield
    for name in set(ENDPOINTS) - before:
        del ENDPOINTS[name]
