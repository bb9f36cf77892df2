"""Combined RPC + websocket chain service.

Composes the JSON-RPC client (submission, status, records) and the websocket
signature subscriber into the single connection handle the sender consumes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sol_sender.chain.rpc.models import Commitment, SignatureResult
from sol_sender.chain.rpc.service import SolanaRPCService
from sol_sender.chain.ws.service import SignatureSubscriber
from sol_sender.errors.chain_errors import (
    BlockHeightExceededError,
    RPCError,
    SubscriptionClosedError,
)
from sol_sender.utils.aio import CancelToken, first_completed

if TYPE_CHECKING:
    from collections.abc import Callable

    from sol_sender.chain.rpc.models import (
        BlockhashWithExpiryBlockHeight,
        SignatureStatus,
        TransactionRecord,
    )
    from sol_sender.config.settings import AppConfig

logger = logging.getLogger(__name__)


class ChainService:
    """Unified chain service composing JSON-RPC + websocket subscriptions.

    Usage::

        chain = ChainService(config)
        await chain.connect()
        try:
            signature = await chain.send_raw_transaction(payload)
            result = await chain.confirm_transaction(signature, window)
        finally:
            await chain.close()
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        ws_connect: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the chain service with app config.

        Args:
            config: Application configuration containing rpc settings.
            ws_connect: Optional websocket connect factory override.
        """
        self._config = config
        self._rpc = SolanaRPCService(config.rpc)
        if ws_connect is None:
            self._ws = SignatureSubscriber(config.rpc)
        else:
            self._ws = SignatureSubscriber(config.rpc, connect=ws_connect)

    async def connect(self) -> None:
        """Connect the RPC HTTP client."""
        await self._rpc.connect()

    async def close(self) -> None:
        """Close the RPC HTTP client."""
        await self._rpc.close()

    @property
    def is_connected(self) -> bool:
        return self._rpc.is_connected

    @property
    def rpc(self) -> SolanaRPCService:
        """Direct access to the RPC service."""
        return self._rpc

    @property
    def ws(self) -> SignatureSubscriber:
        """Direct access to the websocket subscriber."""
        return self._ws

    # ------------------------------------------------------------------
    # RPC delegation
    # ------------------------------------------------------------------

    async def send_raw_transaction(
        self,
        payload: bytes,
        *,
        skip_preflight: bool = True,
        max_retries: int | None = None,
    ) -> str:
        """Submit signed transaction bytes; returns the signature."""
        return await self._rpc.send_raw_transaction(
            payload, skip_preflight=skip_preflight, max_retries=max_retries
        )

    async def get_signature_status(
        self,
        signature: str,
        *,
        search_transaction_history: bool = False,
    ) -> SignatureStatus | None:
        """Query a signature's status via RPC."""
        return await self._rpc.get_signature_status(
            signature, search_transaction_history=search_transaction_history
        )

    async def get_transaction(
        self,
        signature: str,
        *,
        commitment: Commitment = Commitment.CONFIRMED,
        max_supported_transaction_version: int | None = 0,
    ) -> TransactionRecord | None:
        """Fetch a confirmed transaction via RPC."""
        return await self._rpc.get_transaction(
            signature,
            commitment=commitment,
            max_supported_transaction_version=max_supported_transaction_version,
        )

    async def get_block_height(self, *, commitment: Commitment = Commitment.CONFIRMED) -> int:
        """Current block height via RPC."""
        return await self._rpc.get_block_height(commitment=commitment)

    async def get_latest_blockhash(
        self, *, commitment: Commitment = Commitment.FINALIZED
    ) -> BlockhashWithExpiryBlockHeight:
        """Recent blockhash and its validity window via RPC."""
        return await self._rpc.get_latest_blockhash(commitment=commitment)

    # ------------------------------------------------------------------
    # Push confirmation
    # ------------------------------------------------------------------

    async def confirm_transaction(
        self,
        signature: str,
        window: BlockhashWithExpiryBlockHeight,
        commitment: Commitment = Commitment.CONFIRMED,
        token: CancelToken | None = None,
    ) -> SignatureResult | None:
        """Wait until *signature* reaches *commitment* or its window closes.

        Races the websocket notification against a block height watcher.
        Websocket transport failures and transient block height errors are
        logged and retried until *token* is set; the status poll running
        alongside in the sender covers the gap.

        Returns:
            SignatureResult once confirmed, or None if *token* was set first.

        Raises:
            BlockHeightExceededError: The block height passed
                ``window.last_valid_block_height``.
            SubscriptionError: The node rejected the subscription.
        """
        token = token if token is not None else CancelToken()
        if token.cancelled:
            return None

        try:
            status = await self._rpc.get_signature_status(signature)
        except RPCError as exc:
            if exc.rpc_code is not None:
                raise
            logger.warning("Status check for %s failed: %s", signature, exc)
        else:
            if status is not None and status.status.reaches(commitment):
                return SignatureResult(err=status.err, slot=status.slot)

        return await first_completed(
            self._subscribe(signature, commitment, token),
            self._watch_block_height(signature, window, commitment, token),
            _until_cancelled(token),
        )

    async def _subscribe(
        self,
        signature: str,
        commitment: Commitment,
        token: CancelToken,
    ) -> SignatureResult | None:
        interval = self._config.rpc.resubscribe_interval
        while True:
            try:
                return await self._ws.wait_for_signature(signature, commitment=commitment)
            except SubscriptionClosedError as exc:
                logger.warning("Signature subscription for %s lost: %s", signature, exc)
            if await token.sleep(interval):
                return None

    async def _watch_block_height(
        self,
        signature: str,
        window: BlockhashWithExpiryBlockHeight,
        commitment: Commitment,
        token: CancelToken,
    ) -> None:
        interval = self._config.rpc.block_height_poll_interval
        while True:
            try:
                height = await self._rpc.get_block_height(commitment=commitment)
            except RPCError as exc:
                if exc.rpc_code is not None:
                    raise
                logger.warning("Block height check for %s failed: %s", signature, exc)
            else:
                if height > window.last_valid_block_height:
                    raise BlockHeightExceededError(signature, window.last_valid_block_height)
            if await token.sleep(interval):
                return

    async def healthcheck(self) -> dict[str, str]:
        """Check RPC node health.

        Returns:
            Dict with an 'rpc' status string.
        """
        if not self._rpc.is_connected:
            return {"rpc": "not_connected"}
        healthy = await self._rpc.get_health()
        return {"rpc": "ok" if healthy else "error"}


async def _until_cancelled(token: CancelToken) -> None:
    await token.wait()
