"""
Blocking Esplora API client.

Every call occupies the calling thread for one request/response round trip.
The underlying requests.Session may be shared between threads.
"""

from typing import Any, Dict, List, Optional

import requests
import structlog

from esplora_api.core import endpoints  # noqa: F401  registers the operations
from esplora_api.core.decoder import decode_response
from esplora_api.core.router import build_request
from esplora_api.errors import TransportError
from esplora_api.models.blockstream import (
    AddressInfo,
    Block,
    BlockStatus,
    FeeEstimates,
    MempoolStats,
    MempoolTx,
    MerkleProof,
    Outspend,
    Transaction,
    TxStatus,
    Utxo,
)
from esplora_api.models.config import ClientConfig, ClientOptions, EsploraSettings

logger = structlog.get_logger(__name__)


class EsploraClient:
    """
    Esplora/Electrs REST API client.

    Example:
        >>> client = EsploraClient("https://blockstream.info/testnet/api/")
        >>> client.get_blocks_tip_height()
    """

    def __init__(self,
                 base_url: str,
                 options: Optional[ClientOptions] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. https://blockstream.info/api
            options: Headers and timeout; applied on top of ``session`` when both are given
            session: Preconfigured session (proxies, TLS, adapters), never closed by the client

        Raises:
            ConfigError: Invalid base URL or options
        """
        self.config = ClientConfig.create(base_url, options)
        self._owns_session = session is None
        self._headers: Optional[Dict[str, str]] = None

        if session is None:
            session = requests.Session()
            session.headers.update(self.config.options.build_headers())
        elif options is not None:
            self._headers = self.config.options.build_headers()
        self.session = session

        logger.info("Esplora client initialized",
                   base_url=self.config.base_url,
                   mode="blocking",
                   custom_session=not self._owns_session)

    @classmethod
    def from_settings(cls, settings: EsploraSettings,
                      session: Optional[requests.Session] = None) -> "EsploraClient":
        """Build a client from environment based settings."""
        return cls(settings.url, settings.client_options(), session=session)

    def _call(self, operation: str, **params: Any) -> Any:
        request = build_request(self.config.base_url, operation, **params)

        kwargs: Dict[str, Any] = {}
        if self._headers:
            kwargs["headers"] = self._headers
        if self.config.options.timeout is not None:
            kwargs["timeout"] = self.config.options.timeout

        logger.debug("Esplora request",
                    operation=operation,
                    method=request.method,
                    url=request.url)
        try:
            response = self.session.request(request.method, request.url, data=request.body, **kwargs)
            body = response.content
        except requests.RequestException as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug("Esplora response", operation=operation, status=response.status_code)
        return decode_response(request.endpoint, response.status_code, body)

    def close(self):
        """Close the session if the client created it."""
        if self._owns_session:
            self.session.close()
            logger.info("Esplora client session closed")

    def __enter__(self) -> "EsploraClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ==================== Block Methods ====================

    def get_block(self, block_hash: str) -> Block:
        """Get block information by hash."""
        return self._call("get_block", block_hash=block_hash)

    def get_block_status(self, block_hash: str) -> BlockStatus:
        return self._call("get_block_status", block_hash=block_hash)

    def get_block_txs(self, block_hash: str, start_index: Optional[int] = None) -> List[Transaction]:
        """
        Get block transactions, 25 at a time.

        Transactions returned here have no ``status``, all of them share
        the block's confirmation status.

        Args:
            block_hash: Block hash
            start_index: Index of the first transaction, a multiple of 25
        """
        return self._call("get_block_txs", block_hash=block_hash, start_index=start_index)

    def get_block_txids(self, block_hash: str) -> List[str]:
        """Get all transaction IDs in a block."""
        return self._call("get_block_txids", block_hash=block_hash)

    def get_block_txid_at_index(self, block_hash: str, index: int) -> str:
        return self._call("get_block_txid_at_index", block_hash=block_hash, index=index)

    def get_block_raw(self, block_hash: str) -> bytes:
        """Get the raw block serialization."""
        return self._call("get_block_raw", block_hash=block_hash)

    def get_block_hash(self, height: int) -> str:
        """Get block hash at specific height."""
        return self._call("get_block_hash", height=height)

    def get_block_by_height(self, height: int) -> Block:
        """Get block by height (hash lookup, then block)."""
        return self.get_block(self.get_block_hash(height))

    def get_blocks(self, start_height: Optional[int] = None) -> List[Block]:
        """Get latest 10 blocks (or 10 blocks down from a specific height)."""
        return self._call("get_blocks", start_height=start_height)

    def get_blocks_tip_height(self) -> int:
        """Get current block height."""
        return self._call("get_blocks_tip_height")

    def get_blocks_tip_hash(self) -> str:
        return self._call("get_blocks_tip_hash")

    # ==================== Transaction Methods ====================

    def get_transaction(self, txid: str) -> Transaction:
        """Get transaction by ID."""
        return self._call("get_transaction", txid=txid)

    def get_transaction_status(self, txid: str) -> TxStatus:
        """Get transaction confirmation status."""
        return self._call("get_transaction_status", txid=txid)

    def get_transaction_hex(self, txid: str) -> str:
        """Get raw transaction hex."""
        return self._call("get_transaction_hex", txid=txid)

    def get_transaction_raw(self, txid: str) -> bytes:
        return self._call("get_transaction_raw", txid=txid)

    def get_transaction_merkleblock_proof(self, txid: str) -> str:
        """Get a merkle inclusion proof in bitcoind's merkleblock format, hex encoded."""
        return self._call("get_transaction_merkleblock_proof", txid=txid)

    def get_transaction_merkle_proof(self, txid: str) -> MerkleProof:
        """Get a merkle inclusion proof in Electrum's format."""
        return self._call("get_transaction_merkle_proof", txid=txid)

    def get_transaction_outspend(self, txid: str, vout: int) -> Outspend:
        """Get the spending status of one transaction output."""
        return self._call("get_transaction_outspend", txid=txid, vout=vout)

    def get_transaction_outspends(self, txid: str) -> List[Outspend]:
        return self._call("get_transaction_outspends", txid=txid)

    def broadcast_transaction(self, tx_hex: str) -> str:
        """
        Broadcast a raw transaction to the network.

        Returns:
            The txid of the broadcast transaction
        """
        return self._call("broadcast_transaction", tx_hex=tx_hex)

    # ==================== Address Methods ====================

    def get_address(self, address: str) -> AddressInfo:
        """
        Get address information.

        ``chain_stats`` covers confirmed transactions, ``mempool_stats``
        unconfirmed ones.
        """
        return self._call("get_address", address=address)

    def get_address_transactions(self, address: str) -> List[Transaction]:
        """Get address transactions (up to 50 mempool and the first 25 confirmed)."""
        return self._call("get_address_transactions", address=address)

    def get_address_transactions_chain(self, address: str,
                                       last_seen_txid: Optional[str] = None) -> List[Transaction]:
        """Get confirmed address transactions, 25 per page, newest first."""
        return self._call("get_address_transactions_chain", address=address,
                          last_seen_txid=last_seen_txid)

    def get_address_transactions_mempool(self, address: str) -> List[Transaction]:
        return self._call("get_address_transactions_mempool", address=address)

    def get_address_utxo(self, address: str) -> List[Utxo]:
        """Get address UTXOs."""
        return self._call("get_address_utxo", address=address)

    def get_address_prefix(self, prefix: str) -> List[str]:
        """Search addresses by prefix (up to 10 results)."""
        return self._call("get_address_prefix", prefix=prefix)

    def get_scripthash(self, scripthash: str) -> AddressInfo:
        return self._call("get_scripthash", scripthash=scripthash)

    def get_scripthash_transactions(self, scripthash: str) -> List[Transaction]:
        return self._call("get_scripthash_transactions", scripthash=scripthash)

    def get_scripthash_transactions_chain(self, scripthash: str,
                                          last_seen_txid: Optional[str] = None) -> List[Transaction]:
        return self._call("get_scripthash_transactions_chain", scripthash=scripthash,
                          last_seen_txid=last_seen_txid)

    def get_scripthash_transactions_mempool(self, scripthash: str) -> List[Transaction]:
        return self._call("get_scripthash_transactions_mempool", scripthash=scripthash)

    def get_scripthash_utxo(self, scripthash: str) -> List[Utxo]:
        return self._call("get_scripthash_utxo", scripthash=scripthash)

    # ==================== Mempool Methods ====================

    def get_mempool(self) -> MempoolStats:
        """Get mempool backlog statistics."""
        return self._call("get_mempool")

    def get_mempool_txids(self) -> List[str]:
        """Get all transaction IDs in mempool."""
        return self._call("get_mempool_txids")

    def get_mempool_recent(self) -> List[MempoolTx]:
        """Get 10 most recent mempool transactions."""
        return self._call("get_mempool_recent")

    # ==================== Fee Estimation ====================

    def get_fee_estimates(self) -> FeeEstimates:
        """Get feerate estimates (sat/vB) by confirmation target."""
        return self._call("get_fee_estimates")
