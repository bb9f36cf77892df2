"""Tests for the Solana JSON-RPC service — uses httpx mock transport."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from sol_sender.chain.rpc.models import Commitment
from sol_sender.chain.rpc.service import SolanaRPCService
from sol_sender.config.settings import RPCConfig
from sol_sender.errors.chain_errors import RPCError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _rpc_config(**overrides) -> RPCConfig:
    defaults = {"url": "https://rpc.test.com"}
    defaults.update(overrides)
    return RPCConfig(**defaults)


def _rpc_with(handler) -> SolanaRPCService:
    rpc = SolanaRPCService(_rpc_config())
    rpc._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return rpc


def _result(request: httpx.Request, result) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


# ---------------------------------------------------------------------------
# Connection lifecycle
# ---------------------------------------------------------------------------


class TestRPCServiceLifecycle:
    async def test_not_connected_by_default(self):
        rpc = SolanaRPCService(_rpc_config())
        assert rpc.is_connected is False

    async def test_connect_and_close(self):
        rpc = SolanaRPCService(_rpc_config())
        await rpc.connect()
        assert rpc.is_connected is True
        await rpc.close()
        assert rpc.is_connected is False

    async def test_close_idempotent(self):
        rpc = SolanaRPCService(_rpc_config())
        await rpc.close()  # Should not raise
        assert rpc.is_connected is False

    async def test_not_connected_raises(self):
        rpc = SolanaRPCService(_rpc_config())
        with pytest.raises(RPCError, match="not connected"):
            await rpc.get_block_height()


# ---------------------------------------------------------------------------
# sendTransaction
# ---------------------------------------------------------------------------


class TestSendRawTransaction:
    async def test_send_success(self):
        seen = {}

        def handler(request: httpx.Request):
            body = json.loads(request.content)
            seen.update(body)
            return _result(request, "sig123")

        rpc = _rpc_with(handler)
        assert await rpc.send_raw_transaction(b"\x01\x02\x03") == "sig123"

        assert seen["method"] == "sendTransaction"
        encoded, options = seen["params"]
        assert base64.b64decode(encoded) == b"\x01\x02\x03"
        assert options == {"encoding": "base64", "skipPreflight": True}

    async def test_send_with_max_retries(self):
        seen = {}

        def handler(request: httpx.Request):
            seen.update(json.loads(request.content))
            return _result(request, "sig")

        rpc = _rpc_with(handler)
        await rpc.send_raw_transaction(b"\x00", skip_preflight=False, max_retries=0)

        assert seen["params"][1] == {"encoding": "base64", "skipPreflight": False, "maxRetries": 0}

    async def test_request_ids_increase(self):
        ids = []

        def handler(request: httpx.Request):
            ids.append(json.loads(request.content)["id"])
            return _result(request, "sig")

        rpc = _rpc_with(handler)
        await rpc.send_raw_transaction(b"\x00")
        await rpc.send_raw_transaction(b"\x00")
        assert ids == [1, 2]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    async def test_get_signature_status(self):
        seen = {}

        def handler(request: httpx.Request):
            seen.update(json.loads(request.content))
            return _result(
                request,
                {
                    "context": {"slot": 100},
                    "value": [
                        {
                            "slot": 99,
                            "confirmations": 3,
                            "err": None,
                            "confirmationStatus": "confirmed",
                        }
                    ],
                },
            )

        rpc = _rpc_with(handler)
        status = await rpc.get_signature_status("sig")

        assert status.slot == 99
        assert status.is_confirmed
        assert seen["params"] == [["sig"], {"searchTransactionHistory": False}]

    async def test_get_signature_status_unknown(self):
        rpc = _rpc_with(lambda r: _result(r, {"context": {"slot": 1}, "value": [None]}))
        assert await rpc.get_signature_status("sig") is None

    async def test_get_transaction(self):
        seen = {}

        def handler(request: httpx.Request):
            seen.update(json.loads(request.content))
            return _result(
                request,
                {"slot": 55, "blockTime": 1700000000, "meta": {"err": None}, "version": 0},
            )

        rpc = _rpc_with(handler)
        record = await rpc.get_transaction("sig")

        assert record.slot == 55
        assert record.succeeded
        assert seen["params"][1] == {
            "encoding": "json",
            "commitment": "confirmed",
            "maxSupportedTransactionVersion": 0,
        }

    async def test_get_transaction_not_found(self):
        rpc = _rpc_with(lambda r: _result(r, None))
        assert await rpc.get_transaction("sig", commitment=Commitment.FINALIZED) is None

    async def test_get_block_height(self):
        rpc = _rpc_with(lambda r: _result(r, 12345))
        assert await rpc.get_block_height() == 12345

    async def test_get_latest_blockhash(self):
        rpc = _rpc_with(
            lambda r: _result(
                r,
                {
                    "context": {"slot": 1},
                    "value": {"blockhash": "abc", "lastValidBlockHeight": 2000},
                },
            )
        )
        window = await rpc.get_latest_blockhash()
        assert window.blockhash == "abc"
        assert window.last_valid_block_height == 2000

    async def test_get_health(self):
        rpc = _rpc_with(lambda r: _result(r, "ok"))
        assert await rpc.get_health() is True

    async def test_get_health_unhealthy(self):
        rpc = _rpc_with(
            lambda r: httpx.Response(
                200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "behind"}}
            )
        )
        assert await rpc.get_health() is False


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


class TestRPCErrors:
    async def test_json_rpc_error(self):
        def handler(request: httpx.Request):
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": 1,
                    "error": {"code": -32002, "message": "Blockhash not found"},
                },
            )

        rpc = _rpc_with(handler)
        with pytest.raises(RPCError, match="Blockhash not found") as exc_info:
            await rpc.send_raw_transaction(b"\x00")
        assert exc_info.value.rpc_code == -32002

    async def test_rate_limited(self):
        rpc = _rpc_with(lambda r: httpx.Response(429, text="slow down"))
        with pytest.raises(RPCError, match="rate limit") as exc_info:
            await rpc.get_block_height()
        assert exc_info.value.status_code == 429

    async def test_server_error(self):
        rpc = _rpc_with(lambda r: httpx.Response(502, text="bad gateway"))
        with pytest.raises(RPCError, match="502"):
            await rpc.get_block_height()

    async def test_invalid_json(self):
        rpc = _rpc_with(lambda r: httpx.Response(200, text="not json"))
        with pytest.raises(RPCError, match="invalid JSON"):
            await rpc.get_block_height()

    async def test_transport_error(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("refused")

        rpc = _rpc_with(handler)
        with pytest.raises(RPCError, match="refused"):
            await rpc.get_block_height()
