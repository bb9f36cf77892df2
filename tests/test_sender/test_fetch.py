"""Tests for the post-confirmation record fetch."""

from __future__ import annotations

import pytest

from sol_sender.errors.chain_errors import RPCError
from sol_sender.sender.fetch import fetch_confirmed_transaction
from tests.test_sender.fakes import SIGNATURE, FakeConnection, make_record


class TestFetchConfirmedTransaction:
    async def test_found_first_try(self):
        record = make_record()
        conn = FakeConnection(records=[record])

        assert await fetch_confirmed_transaction(conn, SIGNATURE, min_backoff=0) is record
        assert len(conn.transaction_calls) == 1

    async def test_found_on_last_attempt(self):
        record = make_record()
        conn = FakeConnection(records=[None, None, None, None, record])

        assert await fetch_confirmed_transaction(conn, SIGNATURE, min_backoff=0) is record
        assert len(conn.transaction_calls) == 5

    async def test_exhausted_returns_none(self):
        conn = FakeConnection(records=[None])

        assert await fetch_confirmed_transaction(conn, SIGNATURE, min_backoff=0) is None
        assert len(conn.transaction_calls) == 5

    async def test_attempts_configurable(self):
        conn = FakeConnection(records=[None])

        await fetch_confirmed_transaction(conn, SIGNATURE, attempts=2, min_backoff=0)
        assert len(conn.transaction_calls) == 2

    async def test_passes_commitment_and_version(self):
        conn = FakeConnection(records=[make_record()])

        await fetch_confirmed_transaction(conn, SIGNATURE, min_backoff=0)
        call = conn.transaction_calls[0]
        assert call["commitment"] == "confirmed"
        assert call["max_supported_transaction_version"] == 0

    async def test_errors_propagate(self):
        class _Broken(FakeConnection):
            async def get_transaction(self, signature, **kwargs):
                raise RPCError("boom")

        with pytest.raises(RPCError, match="boom"):
            await fetch_confirmed_transaction(_Broken(), SIGNATURE, min_backoff=0)
