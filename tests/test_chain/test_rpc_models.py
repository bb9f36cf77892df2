"""Tests for Solana RPC data models."""

from __future__ import annotations

from sol_sender.chain.rpc.models import (
    BlockhashWithExpiryBlockHeight,
    Commitment,
    ConfirmationStatus,
    SignatureResult,
    SignatureStatus,
    TransactionRecord,
)


class TestConfirmationStatus:
    def test_from_string(self):
        assert ConfirmationStatus.from_string("confirmed") is ConfirmationStatus.CONFIRMED
        assert ConfirmationStatus.from_string(None) is ConfirmationStatus.NONE
        assert ConfirmationStatus.from_string("weird") is ConfirmationStatus.NONE

    def test_reaches(self):
        assert ConfirmationStatus.FINALIZED.reaches(Commitment.CONFIRMED)
        assert ConfirmationStatus.CONFIRMED.reaches(Commitment.CONFIRMED)
        assert not ConfirmationStatus.PROCESSED.reaches(Commitment.CONFIRMED)
        assert not ConfirmationStatus.NONE.reaches(Commitment.PROCESSED)

    def test_expired_is_not_a_node_status(self):
        assert ConfirmationStatus.from_string("expired") is ConfirmationStatus.NONE


class TestBlockhashWindow:
    def test_from_dict(self):
        window = BlockhashWithExpiryBlockHeight.from_dict(
            {"blockhash": "abc", "lastValidBlockHeight": 1000}
        )
        assert window == BlockhashWithExpiryBlockHeight("abc", 1000)

    def test_tightened_leaves_original(self):
        window = BlockhashWithExpiryBlockHeight("abc", 1000)
        tightened = window.tightened(150)

        assert tightened.last_valid_block_height == 850
        assert tightened.blockhash == "abc"
        assert window.last_valid_block_height == 1000


class TestSignatureStatus:
    def test_from_dict(self):
        status = SignatureStatus.from_dict(
            {"slot": 5, "confirmations": None, "err": None, "confirmationStatus": "finalized"}
        )
        assert status.slot == 5
        assert status.status is ConfirmationStatus.FINALIZED
        assert status.is_confirmed

    def test_missing_confirmation_status(self):
        status = SignatureStatus.from_dict({"slot": 5, "confirmationStatus": None})
        assert status.status is ConfirmationStatus.NONE
        assert not status.is_confirmed


class TestSignatureResult:
    def test_is_error(self):
        assert not SignatureResult().is_error
        assert SignatureResult(err={"InstructionError": [0, "Custom"]}).is_error


class TestTransactionRecord:
    def test_from_dict_keeps_raw(self):
        raw = {"slot": 9, "blockTime": 17, "meta": {"err": None, "fee": 5000}, "version": "legacy"}
        record = TransactionRecord.from_dict(raw)

        assert record.slot == 9
        assert record.block_time == 17
        assert record.version == "legacy"
        assert record.data is raw
        assert record.succeeded

    def test_failed_transaction(self):
        record = TransactionRecord.from_dict({"slot": 1, "meta": {"err": {"X": 1}}})
        assert record.err == {"X": 1}
        assert not record.succeeded
