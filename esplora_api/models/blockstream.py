"""Data structures returned by the Esplora/Electrs REST API.

Field names follow the JSON documented at
https://github.com/Blockstream/esplora/blob/master/API.md
Amounts are always represented in satoshis.
"""

from typing import Annotated, Dict, Iterator, List, Optional, Tuple

from pydantic import (
    BaseModel,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    RootModel,
    StringConstraints,
    model_validator,
)

# Transaction id, block hash or script hash
HexHash = Annotated[str, StringConstraints(pattern=r'^[0-9a-fA-F]{64}$')]


class EsploraModel(BaseModel):
    """Immutable snapshot of an API object."""

    class Config:
        frozen = True
        extra = "ignore"


class Block(EsploraModel):
    """Block header and summary."""
    id: HexHash
    height: int = Field(..., ge=0)
    version: int
    timestamp: int = Field(..., ge=0)
    mediantime: Optional[int] = Field(None, ge=0)
    bits: int = Field(..., ge=0)
    nonce: int = Field(..., ge=0)
    difficulty: Optional[float] = Field(None, ge=0)
    merkle_root: HexHash
    tx_count: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    weight: int = Field(..., ge=0)
    # None only for the genesis block
    previousblockhash: Optional[HexHash] = None


class BlockStatus(EsploraModel):
    in_best_chain: bool
    height: Optional[int] = Field(None, ge=0)
    next_best: Optional[HexHash] = None


class Vout(EsploraModel):
    scriptpubkey: str
    scriptpubkey_asm: Optional[str] = None
    scriptpubkey_type: Optional[str] = None
    scriptpubkey_address: Optional[str] = None
    value: int = Field(..., ge=0)


class Vin(EsploraModel):
    """Transaction input, pointing at a previous output by txid and index."""
    txid: HexHash
    vout: int = Field(..., ge=0)
    is_coinbase: bool
    scriptsig: str
    scriptsig_asm: Optional[str] = None
    witness: Optional[List[str]] = None
    inner_redeemscript_asm: Optional[str] = None
    inner_witnessscript_asm: Optional[str] = None
    sequence: int = Field(..., ge=0)
    prevout: Optional[Vout] = None


class TxStatus(EsploraModel):
    """Confirmation status; block fields are only set once confirmed."""
    confirmed: bool
    block_height: Optional[int] = Field(None, ge=0)
    block_hash: Optional[HexHash] = None
    block_time: Optional[int] = Field(None, ge=0)


class Transaction(EsploraModel):
    txid: HexHash
    version: int
    locktime: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    weight: int = Field(..., ge=0)
    fee: int = Field(..., ge=0)
    vin: List[Vin]
    vout: List[Vout]
    # Omitted by /block/:hash/txs, every tx there shares the block status
    status: Optional[TxStatus] = None

    @property
    def vsize(self) -> int:
        """Virtual size in vbytes."""
        return (self.weight + 3) // 4


class Utxo(EsploraModel):
    txid: HexHash
    vout: int = Field(..., ge=0)
    status: TxStatus
    value: int = Field(..., ge=0)


class MerkleProof(EsploraModel):
    block_height: int = Field(..., ge=0)
    merkle: List[HexHash]
    pos: int = Field(..., ge=0)


class Outspend(EsploraModel):
    """Spending status of a transaction output."""
    spent: bool
    txid: Optional[HexHash] = None
    vin: Optional[int] = Field(None, ge=0)
    status: Optional[TxStatus] = None


class ChainStats(EsploraModel):
    funded_txo_count: int = Field(..., ge=0)
    funded_txo_sum: int = Field(..., ge=0)
    spent_txo_count: int = Field(..., ge=0)
    spent_txo_sum: int = Field(..., ge=0)
    tx_count: int = Field(..., ge=0)


class AddressInfo(EsploraModel):
    """
    Address or script hash statistics.

    ``chain_stats`` covers confirmed transactions, ``mempool_stats`` the
    unconfirmed ones.
    """
    address: Optional[str] = None
    scripthash: Optional[HexHash] = None
    chain_stats: ChainStats
    mempool_stats: ChainStats

    @model_validator(mode="after")
    def check_confirmed_balance(self):
        if self.chain_stats.spent_txo_sum > self.chain_stats.funded_txo_sum:
            raise ValueError("confirmed spent sum exceeds funded sum")
        return self

    @property
    def confirmed_balance(self) -> int:
        return self.chain_stats.funded_txo_sum - self.chain_stats.spent_txo_sum

    @property
    def unconfirmed_balance(self) -> int:
        """Signed mempool delta, negative while confirmed coins are being spent."""
        return self.mempool_stats.funded_txo_sum - self.mempool_stats.spent_txo_sum

    @property
    def tx_count(self) -> int:
        return self.chain_stats.tx_count + self.mempool_stats.tx_count


class MempoolStats(EsploraModel):
    """
    Mempool backlog statistics.

    ``fee_histogram`` is a list of (feerate, vsize) pairs in server order,
    each vsize being the total of transactions paying more than feerate but
    less than the previous entry's feerate.
    """
    count: int = Field(..., ge=0)
    vsize: int = Field(..., ge=0)
    total_fee: int = Field(..., ge=0)
    fee_histogram: List[Tuple[NonNegativeFloat, NonNegativeInt]]


class MempoolTx(EsploraModel):
    """Overview of a transaction recently added to the mempool."""
    txid: HexHash
    fee: int = Field(..., ge=0)
    vsize: int = Field(..., ge=0)
    value: int = Field(..., ge=0)


class FeeEstimates(RootModel[Dict[PositiveInt, PositiveFloat]]):
    """Confirmation target in blocks -> estimated feerate in sat/vB."""

    class Config:
        frozen = True

    def targets(self) -> List[int]:
        return sorted(self.root)

    def get(self, target: int, default: Optional[float] = None) -> Optional[float]:
        return self.root.get(target, default)

    def __getitem__(self, target: int) -> float:
        return self.root[target]

    def __iter__(self) -> Iterator[int]:
        return iter(self.targets())

    def __len__(self) -> int:
        return len(self.root)
