"""
Asynchronous Esplora API client.

Calls suspend at network I/O instead of blocking the thread. The underlying
httpx.AsyncClient connection pool is shared by concurrent tasks.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from esplora_api.core import endpoints  # noqa: F401  registers the operations
from esplora_api.core.decoder import decode_response
from esplora_api.core.router import build_request
from esplora_api.errors import ConfigError, TransportError
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


class AsyncEsploraClient:
    """
    Esplora/Electrs REST API client for asyncio.

    Same methods and results as ``EsploraClient``, awaited.

    Example:
        >>> async with AsyncEsploraClient("https://blockstream.info/api") as client:
        ...     height = await client.get_blocks_tip_height()
    """

    def __init__(self,
                 base_url: str,
                 options: Optional[ClientOptions] = None,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. https://blockstream.info/api
            options: Headers and timeout; applied on top of ``client`` when both are given
            client: Preconfigured httpx client (proxies, TLS, transport), never closed here

        Raises:
            ConfigError: Invalid base URL, options or transport
        """
        self.config = ClientConfig.create(base_url, options)
        self._owns_client = client is None
        self._headers: Optional[Dict[str, str]] = None

        if client is None:
            try:
                # No timeout unless one is configured
                client = httpx.AsyncClient(
                    headers=self.config.options.build_headers(),
                    timeout=self.config.options.timeout,
                )
            except (httpx.HTTPError, ValueError) as e:
                raise ConfigError(f"Could not build HTTP client: {e}") from e
        elif options is not None:
            self._headers = self.config.options.build_headers()
        self.client = client

        logger.info("Esplora client initialized",
                   base_url=self.config.base_url,
                   mode="async",
                   custom_client=not self._owns_client)

    @classmethod
    def from_settings(cls, settings: EsploraSettings,
                      client: Optional[httpx.AsyncClient] = None) -> "AsyncEsploraClient":
        """Build a client from environment based settings."""
        return cls(settings.url, settings.client_options(), client=client)

    async def _call(self, operation: str, **params: Any) -> Any:
        request = build_request(self.config.base_url, operation, **params)

        kwargs: Dict[str, Any] = {}
        if self._headers:
            kwargs["headers"] = self._headers
        if not self._owns_client and self.config.options.timeout is not None:
            kwargs["timeout"] = self.config.options.timeout

        logger.debug("Esplora request",
                    operation=operation,
                    method=request.method,
                    url=request.url)
        try:
            response = await self.client.request(request.method, request.url,
                                                 content=request.body, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug("Esplora response", operation=operation, status=response.status_code)
        return decode_response(request.endpoint, response.status_code, response.content)

    async def aclose(self):
        """Close the HTTP client if this client created it."""
        if self._owns_client:
            await self.client.aclose()
            logger.info("Esplora client session closed")

    async def __aenter__(self) -> "AsyncEsploraClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # ==================== Block Methods ====================

    async def get_block(self, block_hash: str) -> Block:
        """Get block information by hash."""
        return await self._call("get_block", block_hash=block_hash)

    async def get_block_status(self, block_hash: str) -> BlockStatus:
        return await self._call("get_block_status", block_hash=block_hash)

    async def get_block_txs(self, block_hash: str, start_index: Optional[int] = None) -> List[Transaction]:
        """
        Get block transactions, 25 at a time.

        Transactions returned here have no ``status``, all of them share
        the block's confirmation status.

        Args:
            block_hash: Block hash
            start_index: Index of the first transaction, a multiple of 25
        """
        return await self._call("get_block_txs", block_hash=block_hash, start_index=start_index)

    async def get_block_txids(self, block_hash: str) -> List[str]:
        """Get all transaction IDs in a block."""
        return await self._call("get_block_txids", block_hash=block_hash)

    async def get_block_txid_at_index(self, block_hash: str, index: int) -> str:
        return await self._call("get_block_txid_at_index", block_hash=block_hash, index=index)

    async def get_block_raw(self, block_hash: str) -> bytes:
        """Get the raw block serialization."""
        return await self._call("get_block_raw", block_hash=block_hash)

    async def get_block_hash(self, height: int) -> str:
        """Get block hash at specific height."""
        return await self._call("get_block_hash", height=height)

    async def get_block_by_height(self, height: int) -> Block:
        """Get block by height (hash lookup, then block)."""
        return await self.get_block(await self.get_block_hash(height))

    async def get_blocks(self, start_height: Optional[int] = None) -> List[Block]:
        """Get latest 10 blocks (or 10 blocks down from a specific height)."""
        return await self._call("get_blocks", start_height=start_height)

    async def get_blocks_tip_height(self) -> int:
        """Get current block height."""
        return await self._call("get_blocks_tip_height")

    async def get_blocks_tip_hash(self) -> str:
        return await self._call("get_blocks_tip_hash")

    # ==================== Transaction Methods ====================

    async def get_transaction(self, txid: str) -> Transaction:
        """Get transaction by ID."""
        return await self._call("get_transaction", txid=txid)

    async def get_transaction_status(self, txid: str) -> TxStatus:
        """Get transaction confirmation status."""
        return await self._call("get_transaction_status", txid=txid)

    async def get_transaction_hex(self, txid: str) -> str:
        """Get raw transaction hex."""
        return await self._call("get_transaction_hex", txid=txid)

    async def get_transaction_raw(self, txid: str) -> bytes:
        return await self._call("get_transaction_raw", txid=txid)

    async def get_transaction_merkleblock_proof(self, txid: str) -> str:
        """Get a merkle inclusion proof in bitcoind's merkleblock format, hex encoded."""
        return await self._call("get_transaction_merkleblock_proof", txid=txid)

    async def get_transaction_merkle_proof(self, txid: str) -> MerkleProof:
        """Get a merkle inclusion proof in Electrum's format."""
        return await self._call("get_transaction_merkle_proof", txid=txid)

    async def get_transaction_outspend(self, txid: str, vout: int) -> Outspend:
        """Get the spending status of one transaction output."""
        return await self._call("get_transaction_outspend", txid=txid, vout=vout)

    async def get_transaction_outspends(self, txid: str) -> List[Outspend]:
        return await self._call("get_transaction_outspends", txid=txid)

    async def broadcast_transaction(self, tx_hex: str) -> str:
        """
        Broadcast a raw transaction to the network.

        Returns:
            The txid of the broadcast transaction
        """
        return await self._call("broadcast_transaction", tx_hex=tx_hex)

    # ==================== Address Methods ====================

    async def get_address(self, address: str) -> AddressInfo:
        """
        Get address information.

        ``chain_stats`` covers confirmed transactions, ``mempool_stats``
        unconfirmed ones.
        """
        return await self._call("get_address", address=address)

    async def get_address_transactions(self, address: str) -> List[Transaction]:
        """Get address transactions (up to 50 mempool and the first 25 confirmed)."""
        return await self._call("get_address_transactions", address=address)

    async def get_address_transactions_chain(self, address: str,
                                             last_seen_txid: Optional[str] = None) -> List[Transaction]:
        """Get confirmed address transactions, 25 per page, newest first."""
        return await self._call("get_address_transactions_chain", address=address,
                                last_seen_txid=last_seen_txid)

    async def get_address_transactions_mempool(self, address: str) -> List[Transaction]:
        return await self._call("get_address_transactions_mempool", address=address)

    async def get_address_utxo(self, address: str) -> List[Utxo]:
        """Get address UTXOs."""
        return await self._call("get_address_utxo", address=address)

    async def get_address_prefix(self, prefix: str) -> List[str]:
        """Search addresses by prefix (up to 10 results)."""
        return await self._call("get_address_prefix", prefix=prefix)

    async def get_scripthash(self, scripthash: str) -> AddressInfo:
        return await self._call("get_scripthash", scripthash=scripthash)

    async def get_scripthash_transactions(self, scripthash: str) -> List[Transaction]:
        return await self._call("get_scripthash_transactions", scripthash=scripthash)

    async def get_scripthash_transactions_chain(self, scripthash: str,
                                                last_seen_txid: Optional[str] = None) -> List[Transaction]:
        return await self._call("get_scripthash_transactions_chain", scripthash=scripthash,
                                last_seen_txid=last_seen_txid)

    async def get_scripthash_transactions_mempool(self, scripthash: str) -> List[Transaction]:
        return await self._call("get_scripthash_transactions_mempool", scripthash=scripthash)

    async def get_scripthash_utxo(self, scripthash: str) -> List[Utxo]:
        return await self._call("get_scripthash_utxo", scripthash=scripthash)

    # ==================== Mempool Methods ====================

    async def get_mempool(self) -> MempoolStats:
        """Get mempool backlog statistics."""
        return await self._call("get_mempool")

    async def get_mempool_txids(self) -> List[str]:
        """Get all transaction IDs in mempool."""
        return await self._call("get_mempool_txids")

    async def get_mempool_recent(self) -> List[MempoolTx]:
        """Get 10 most recent mempool transactions."""
        return await self._call("get_mempool_recent")

    # ==================== Fee Estimation ====================

    async def get_fee_estimates(self) -> FeeEstimates:
        """Get feerate estimates (sat/vB) by confirmation target."""
        return await self._call("get_fee_estimates")
