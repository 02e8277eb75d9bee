"""
Unit tests for the Esplora data models.

Tests optional fields, non-negative constraints and derived values.
"""

import pytest
from pydantic import ValidationError

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

from conftest import BLOCK_HASH, PREV_BLOCK_HASH


class TestBlock:

    def test_valid_block(self, block_payload):
        block = Block(**block_payload)

        assert block.previousblockhash == PREV_BLOCK_HASH
        assert block.tx_count == 42

    def test_genesis_has_no_previous_block(self, genesis_payload):
        block = Block(**genesis_payload)

        assert block.height == 0
        assert block.previousblockhash is None

    def test_unknown_fields_ignored(self, block_payload):
        block = Block(**block_payload, extras={"pool": "unknown"})
        assert not hasattr(block, "extras")

    @pytest.mark.parametrize("field", ["height", "tx_count", "size", "weight", "timestamp"])
    def test_negative_values_rejected(self, block_payload, field):
        block_payload[field] = -1

        with pytest.raises(ValidationError):
            Block(**block_payload)

    @pytest.mark.parametrize("field, value", [
        ("id", "nope"),
        ("id", BLOCK_HASH[:-1]),
        ("previousblockhash", "not-a-hash"),
        ("merkle_root", BLOCK_HASH + "00"),
    ])
    def test_non_hex_hashes_rejected(self, block_payload, field, value):
        block_payload[field] = value

        with pytest.raises(ValidationError):
            Block(**block_payload)

    def test_block_status_next_best(self):
        with pytest.raises(ValidationError):
            BlockStatus(in_best_chain=True, height=1, next_best="tip")

    def test_blocks_are_immutable(self, block_payload):
        block = Block(**block_payload)

        with pytest.raises(ValidationError):
            block.height = 1


class TestTransaction:

    def test_confirmed_transaction(self, transaction_payload):
        tx = Transaction(**transaction_payload)

        assert tx.status.confirmed is True
        assert tx.status.block_hash == BLOCK_HASH
        assert tx.vin[0].prevout.value == 1000000
        assert tx.vout[1].scriptpubkey_address is None
        assert tx.vsize == 144

    def test_block_transactions_have_no_status(self, transaction_payload):
        del transaction_payload["status"]

        assert Transaction(**transaction_payload).status is None

    def test_coinbase_input_without_prevout(self, transaction_payload):
        transaction_payload["vin"][0].update(is_coinbase=True, prevout=None)

        tx = Transaction(**transaction_payload)

        assert tx.vin[0].is_coinbase is True
        assert tx.vin[0].prevout is None

    def test_negative_output_value(self, transaction_payload):
        transaction_payload["vout"][0]["value"] = -5

        with pytest.raises(ValidationError):
            Transaction(**transaction_payload)

    def test_non_hex_txid_rejected(self, transaction_payload):
        transaction_payload["txid"] = "zz"

        with pytest.raises(ValidationError):
            Transaction(**transaction_payload)

    def test_non_hex_status_block_hash_rejected(self, transaction_payload):
        transaction_payload["status"]["block_hash"] = "not-a-hash"

        with pytest.raises(ValidationError):
            Transaction(**transaction_payload)

    def test_non_hex_input_txid_rejected(self, transaction_payload):
        transaction_payload["vin"][0]["txid"] = "prev"

        with pytest.raises(ValidationError):
            Transaction(**transaction_payload)

    @pytest.mark.parametrize("model, payload", [
        (Utxo, {"txid": "x", "vout": 0, "status": {"confirmed": False}, "value": 1}),
        (Outspend, {"spent": True, "txid": "x", "vin": 0}),
        (MempoolTx, {"txid": "x", "fee": 1, "vsize": 1, "value": 1}),
        (MerkleProof, {"block_height": 1, "merkle": ["x"], "pos": 0}),
    ])
    def test_other_models_reject_non_hex_ids(self, model, payload):
        with pytest.raises(ValidationError):
            model(**payload)

    def test_unconfirmed_status(self):
        status = TxStatus(confirmed=False)

        assert status.block_height is None
        assert status.block_hash is None
        assert status.block_time is None


class TestAddressInfo:

    def test_balances(self, address_payload):
        info = AddressInfo(**address_payload)

        assert info.confirmed_balance == 500000000
        assert info.unconfirmed_balance == -20000
        assert info.tx_count == 16

    def test_scripthash_response_has_no_address(self, address_payload):
        del address_payload["address"]
        address_payload["scripthash"] = BLOCK_HASH

        info = AddressInfo(**address_payload)

        assert info.address is None
        assert info.scripthash == BLOCK_HASH

    def test_negative_confirmed_balance_rejected(self, address_payload):
        address_payload["chain_stats"]["spent_txo_sum"] = 2000000000

        with pytest.raises(ValidationError, match="spent sum exceeds funded sum"):
            AddressInfo(**address_payload)

    def test_negative_count_rejected(self, address_payload):
        address_payload["mempool_stats"]["tx_count"] = -1

        with pytest.raises(ValidationError):
            AddressInfo(**address_payload)


class TestMempoolAndFees:

    def test_histogram_order_preserved(self, mempool_payload):
        stats = MempoolStats(**mempool_payload)

        assert stats.fee_histogram[0] == (53.01, 102131)
        assert [rate for rate, _ in stats.fee_histogram] == [53.01, 38.56, 34.12, 1.1]

    def test_fee_estimates(self, fee_estimates_payload):
        estimates = FeeEstimates.model_validate(fee_estimates_payload)

        assert estimates.targets() == [1, 2, 3, 6, 144, 504, 1008]
        assert list(estimates) == estimates.targets()
        assert len(estimates) == 7
        assert estimates[6] == pytest.approx(68.285)
        assert estimates.get(25) is None

    def test_fee_target_must_be_positive(self):
        with pytest.raises(ValidationError):
            FeeEstimates.model_validate({"0": 1.0})

    def test_unspent_output(self):
        outspend = Outspend(spent=False)

        assert outspend.txid is None
        assert outspend.vin is None
        assert outspend.status is None
