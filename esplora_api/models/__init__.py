"""Data models and configuration."""

from esplora_api.models.config import ClientConfig, ClientOptions, EsploraSettings
from esplora_api.models.blockstream import (
    AddressInfo,
    Block,
    BlockStatus,
    ChainStats,
    FeeEstimates,
    MempoolStats,
    MempoolTx,
    MerkleProof,
    Outspend,
    Transaction,
    TxStatus,
    Utxo,
    Vin,
    Vout,
)

__all__ = [
    "ClientConfig",
    "ClientOptions",
    "EsploraSettings",
    "AddressInfo",
    "Block",
    "BlockStatus",
    "ChainStats",
    "FeeEstimates",
    "MempoolStats",
    "MempoolTx",
    "MerkleProof",
    "Outspend",
    "Transaction",
    "TxStatus",
    "Utxo",
    "Vin",
    "Vout",
]
