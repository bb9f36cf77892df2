"""Solana JSON-RPC HTTP client — send, status, transaction, block height.

Provides an async HTTP client for the subset of the Solana JSON-RPC API the
sender needs:
- sendTransaction — Submit a signed transaction (base64)
- getSignatureStatuses — Query the status of a signature
- getTransaction — Fetch a confirmed transaction
- getBlockHeight / getLatestBlockhash — Track the validity window
- getHealth — Node health
"""

from __future__ import annotations

import base64
import itertools
from typing import TYPE_CHECKING, Any

import httpx

from sol_sender.chain.rpc.models import (
    BlockhashWithExpiryBlockHeight,
    Commitment,
    SignatureStatus,
    TransactionRecord,
)
from sol_sender.errors.chain_errors import RPCError

if TYPE_CHECKING:
    from sol_sender.config.settings import RPCConfig


class SolanaRPCService:
    """Async HTTP client for the Solana JSON-RPC API.

    Usage::

        rpc = SolanaRPCService(config)
        await rpc.connect()
        try:
            signature = await rpc.send_raw_transaction(payload)
        finally:
            await rpc.close()
    """

    def __init__(self, config: RPCConfig) -> None:
        """Initialize the RPC service.

        Args:
            config: RPC configuration (url, timeout, etc.).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def url(self) -> str:
        return self._config.url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def send_raw_transaction(
        self,
        payload: bytes,
        *,
        skip_preflight: bool = True,
        max_retries: int | None = None,
    ) -> str:
        """Submit a serialized, signed transaction.

        Args:
            payload: Wire-format transaction bytes.
            skip_preflight: Skip the node's simulation before forwarding.
            max_retries: Node-side rebroadcast count (None leaves the node default).

        Returns:
            The transaction signature (base58).

        Raises:
            RPCError: On HTTP or JSON-RPC errors.
        """
        options: dict[str, Any] = {
            "encoding": "base64",
            "skipPreflight": skip_preflight,
        }
        if max_retries is not None:
            options["maxRetries"] = max_retries
        encoded = base64.b64encode(payload).decode("ascii")
        return await self._call("sendTransaction", [encoded, options])

    async def get_signature_status(
        self,
        signature: str,
        *,
        search_transaction_history: bool = False,
    ) -> SignatureStatus | None:
        """Query the status of a single signature.

        Returns:
            SignatureStatus, or None if the node has not seen the signature.
        """
        result = await self._call(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": search_transaction_history}],
        )
        values = (result or {}).get("value") or []
        if not values or values[0] is None:
            return None
        return SignatureStatus.from_dict(values[0])

    async def get_transaction(
        self,
        signature: str,
        *,
        commitment: Commitment = Commitment.CONFIRMED,
        max_supported_transaction_version: int | None = 0,
    ) -> TransactionRecord | None:
        """Fetch a confirmed transaction.

        Returns:
            TransactionRecord, or None if the node does not have it (yet).
        """
        options: dict[str, Any] = {"encoding": "json", "commitment": commitment.value}
        if max_supported_transaction_version is not None:
            options["maxSupportedTransactionVersion"] = max_supported_transaction_version
        result = await self._call("getTransaction", [signature, options])
        if result is None:
            return None
        return TransactionRecord.from_dict(result)

    async def get_block_height(self, *, commitment: Commitment = Commitment.CONFIRMED) -> int:
        """Return the current block height at *commitment*."""
        return int(await self._call("getBlockHeight", [{"commitment": commitment.value}]))

    async def get_latest_blockhash(
        self, *, commitment: Commitment = Commitment.FINALIZED
    ) -> BlockhashWithExpiryBlockHeight:
        """Return a recent blockhash with its last valid block height."""
        result = await self._call("getLatestBlockhash", [{"commitment": commitment.value}])
        return BlockhashWithExpiryBlockHeight.from_dict(result["value"])

    async def get_health(self) -> bool:
        """Check node health; False when the node reports itself unhealthy."""
        try:
            return await self._call("getHealth", []) == "ok"
        except RPCError:
            return False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "RPC service not connected. Call connect() first."
            raise RPCError(msg)
        return self._client

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Issue a JSON-RPC request and return its ``result``."""
        client = self._ensure_connected()
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        try:
            response = await client.post(self._config.url, json=body)
        except httpx.HTTPError as exc:
            raise RPCError(f"RPC {method} failed: {exc}") from exc

        if response.status_code != 200:
            self._raise_for_status(response, method)

        try:
            data = response.json()
        except ValueError as exc:
            raise RPCError(
                f"RPC {method} returned invalid JSON", status_code=response.status_code
            ) from exc

        error = data.get("error")
        if error:
            raise RPCError(
                f"RPC {method} failed: {error.get('message', error)}",
                status_code=response.status_code,
                rpc_code=error.get("code"),
            )
        return data.get("result")

    def _raise_for_status(self, response: httpx.Response, method: str) -> None:
        """Raise an RPCError from a non-200 response."""
        status = response.status_code
        error_map = {
            401: "RPC authentication failed",
            403: "RPC access forbidden",
            413: "RPC request too large",
            429: "RPC rate limit exceeded",
        }
        message = error_map.get(status, f"RPC {method} failed ({status}): {response.text}")
        raise RPCError(message, status_code=status)
