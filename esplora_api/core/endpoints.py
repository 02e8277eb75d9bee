"""
Esplora REST API operations.

API documentation: https://github.com/Blockstream/esplora/blob/master/API.md
Liquid-only endpoints (assets, peg-ins) are not registered.
"""

from typing import List

from esplora_api.core.decoder import hash_body, height_body, json_body, raw_body, text_body
from esplora_api.core.router import Endpoint, register_endpoint
from esplora_api.models.blockstream import (
    AddressInfo,
    Block,
    BlockStatus,
    FeeEstimates,
    HexHash,
    MempoolStats,
    MempoolTx,
    MerkleProof,
    Outspend,
    Transaction,
    TxStatus,
    Utxo,
)
from esplora_api.utils.validation import (
    validate_address,
    validate_address_prefix,
    validate_hex_hash,
    validate_non_negative_int,
    validate_page_start,
    validate_raw_transaction,
)

BLOCK_HASH = {"block_hash": validate_hex_hash}
TXID = {"txid": validate_hex_hash}
ADDRESS = {"address": validate_address}
SCRIPTHASH = {"scripthash": validate_hex_hash}

TRANSACTIONS = json_body(List[Transaction])
TXIDS = json_body(List[HexHash])


# ==================== Blocks ====================

# Available fields: id, height, version, timestamp, bits, nonce, merkle_root,
# tx_count, size, weight and previousblockhash
register_endpoint(Endpoint(
    name="get_block", method="GET", path="/block/{block_hash}",
    decode=json_body(Block), validators=BLOCK_HASH,
))

# in_best_chain is false for orphaned blocks, next_best only set in the best chain
register_endpoint(Endpoint(
    name="get_block_status", method="GET", path="/block/{block_hash}/status",
    decode=json_body(BlockStatus), validators=BLOCK_HASH,
))

# 25 transactions per page, without status
register_endpoint(Endpoint(
    name="get_block_txs", method="GET", path="/block/{block_hash}/txs",
    decode=TRANSACTIONS,
    validators={**BLOCK_HASH, "start_index": validate_page_start},
    optional_segments=("start_index",),
))

register_endpoint(Endpoint(
    name="get_block_txids", method="GET", path="/block/{block_hash}/txids",
    decode=TXIDS, validators=BLOCK_HASH,
))

register_endpoint(Endpoint(
    name="get_block_txid_at_index", method="GET", path="/block/{block_hash}/txid/{index}",
    decode=hash_body,
    validators={**BLOCK_HASH, "index": validate_non_negative_int},
))

# Raw block serialization
register_endpoint(Endpoint(
    name="get_block_raw", method="GET", path="/block/{block_hash}/raw",
    decode=raw_body, validators=BLOCK_HASH,
))

# Hash of the best chain block at a height
register_endpoint(Endpoint(
    name="get_block_hash", method="GET", path="/block-height/{height}",
    decode=hash_body, validators={"height": validate_non_negative_int},
))

# 10 newest blocks, or 10 blocks down from start_height
register_endpoint(Endpoint(
    name="get_blocks", method="GET", path="/blocks",
    decode=json_body(List[Block]),
    validators={"start_height": validate_non_negative_int},
    optional_segments=("start_height",),
))

register_endpoint(Endpoint(
    name="get_blocks_tip_height", method="GET", path="/blocks/tip/height",
    decode=height_body,
))

register_endpoint(Endpoint(
    name="get_blocks_tip_hash", method="GET", path="/blocks/tip/hash",
    decode=hash_body,
))


# ==================== Transactions ====================

register_endpoint(Endpoint(
    name="get_transaction", method="GET", path="/tx/{txid}",
    decode=json_body(Transaction), validators=TXID,
))

register_endpoint(Endpoint(
    name="get_transaction_status", method="GET", path="/tx/{txid}/status",
    decode=json_body(TxStatus), validators=TXID,
))

register_endpoint(Endpoint(
    name="get_transaction_hex", method="GET", path="/tx/{txid}/hex",
    decode=text_body, validators=TXID,
))

register_endpoint(Endpoint(
    name="get_transaction_raw", method="GET", path="/tx/{txid}/raw",
    decode=raw_body, validators=TXID,
))

# Hex encoded merkle inclusion proof in bitcoind's merkleblock format
register_endpoint(Endpoint(
    name="get_transaction_merkleblock_proof", method="GET", path="/tx/{txid}/merkleblock-proof",
    decode=text_body, validators=TXID,
))

# Electrum blockchain.transaction.get_merkle format
register_endpoint(Endpoint(
    name="get_transaction_merkle_proof", method="GET", path="/tx/{txid}/merkle-proof",
    decode=json_body(MerkleProof), validators=TXID,
))

register_endpoint(Endpoint(
    name="get_transaction_outspend", method="GET", path="/tx/{txid}/outspend/{vout}",
    decode=json_body(Outspend),
    validators={**TXID, "vout": validate_non_negative_int},
))

register_endpoint(Endpoint(
    name="get_transaction_outspends", method="GET", path="/tx/{txid}/outspends",
    decode=json_body(List[Outspend]), validators=TXID,
))

# Hex transaction in the body, txid returned on success
register_endpoint(Endpoint(
    name="broadcast_transaction", method="POST", path="/tx",
    decode=hash_body, validators={"tx_hex": validate_raw_transaction},
    body="tx_hex",
))


# ==================== Addresses and script hashes ====================

def _register_history_endpoints(kind: str, validators: dict) -> None:
    """The address and scripthash families share the same routes."""
    param = next(iter(validators))
    root = f"/{kind}/{{{param}}}"
    prefix = "get_address" if kind == "address" else "get_scripthash"

    register_endpoint(Endpoint(
        name=prefix, method="GET", path=root,
        decode=json_body(AddressInfo), validators=validators,
    ))
    # Up to 50 mempool transactions plus the first 25 confirmed ones
    register_endpoint(Endpoint(
        name=f"{prefix}_transactions", method="GET", path=f"{root}/txs",
        decode=TRANSACTIONS, validators=validators,
    ))
    # 25 confirmed transactions per page, paging by the last seen txid
    register_endpoint(Endpoint(
        name=f"{prefix}_transactions_chain", method="GET", path=f"{root}/txs/chain",
        decode=TRANSACTIONS,
        validators={**validators, "last_seen_txid": validate_hex_hash},
        optional_segments=("last_seen_txid",),
    ))
    register_endpoint(Endpoint(
        name=f"{prefix}_transactions_mempool", method="GET", path=f"{root}/txs/mempool",
        decode=TRANSACTIONS, validators=validators,
    ))
    register_endpoint(Endpoint(
        name=f"{prefix}_utxo", method="GET", path=f"{root}/utxo",
        decode=json_body(List[Utxo]), validators=validators,
    ))


_register_history_endpoints("address", ADDRESS)
_register_history_endpoints("scripthash", SCRIPTHASH)

# Up to 10 addresses starting with the prefix
register_endpoint(Endpoint(
    name="get_address_prefix", method="GET", path="/address-prefix/{prefix}",
    decode=json_body(List[str]), validators={"prefix": validate_address_prefix},
))


# ==================== Mempool and fees ====================

register_endpoint(Endpoint(
    name="get_mempool", method="GET", path="/mempool",
    decode=json_body(MempoolStats),
))

# Arbitrary order, unlike bitcoind
register_endpoint(Endpoint(
    name="get_mempool_txids", method="GET", path="/mempool/txids",
    decode=TXIDS,
))

# Last 10 transactions to enter the mempool
register_endpoint(Endpoint(
    name="get_mempool_recent", method="GET", path="/mempool/recent",
    decode=json_body(List[MempoolTx]),
))

# Targets 1-25, 144, 504 and 1008 blocks
register_endpoint(Endpoint(
    name="get_fee_estimates", method="GET", path="/fee-estimates",
    decode=json_body(FeeEstimates),
))
