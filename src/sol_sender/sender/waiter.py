"""Send a signed transaction and wait for it to be confirmed.

Flow for one submission:

1. submit the signed bytes once to learn the signature;
2. inside a :class:`CancelScope`, start the resend loop and race push
   against poll confirmation under a per-submission token derived from the
   caller's; leaving the scope sets that token exactly once
   and reaps every task, whatever the exit path;
3. an expired window yields None, any other error propagates;
4. once confirmed, fetch the full record with bounded retries.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

from sol_sender.config.settings import SenderConfig
from sol_sender.sender.confirmation import Confirmed, Expired, race_confirmation
from sol_sender.sender.fetch import fetch_confirmed_transaction
from sol_sender.sender.resender import Resender
from sol_sender.utils.aio import CancelScope
from sol_sender.utils.signature import get_signature

if TYPE_CHECKING:
    from sol_sender.chain.rpc.models import BlockhashWithExpiryBlockHeight, TransactionRecord
    from sol_sender.metrics.collector import SenderMetrics
    from sol_sender.sender.protocols import Connection
    from sol_sender.utils.aio import CancelToken

logger = logging.getLogger(__name__)


async def send_and_confirm_transaction(
    connection: Connection,
    serialized_transaction: bytes,
    blockhash_with_expiry_block_height: BlockhashWithExpiryBlockHeight,
    *,
    config: SenderConfig | None = None,
    token: CancelToken | None = None,
    metrics: SenderMetrics | None = None,
) -> TransactionRecord | None:
    """Submit *serialized_transaction* and wait until it is confirmed.

    Args:
        connection: RPC connection handle.
        serialized_transaction: Signed wire-format transaction bytes.
        blockhash_with_expiry_block_height: Validity window of the
            transaction's blockhash.
        config: Sender settings (intervals, margin, retry budget).
        token: Optional caller-owned token; setting it aborts the wait. It is
            never set by this function and may be shared by many sends.
        metrics: Optional metrics sink.

    Returns:
        The confirmed transaction record, or None if the window expired,
        the record could not be fetched, or *token* was set by the caller.

    Raises:
        Whatever the initial submission or the confirmation race raised,
        except block height expiry.
    """
    config = config if config is not None else SenderConfig()
    payload = bytes(serialized_transaction)

    signature = await connection.send_raw_transaction(
        payload, skip_preflight=config.skip_preflight
    )
    logger.info("Sent transaction %s", signature)

    track = metrics.track_confirmation() if metrics else contextlib.nullcontext()
    try:
        with track:
            async with CancelScope(token) as scope:
                resender = Resender(
                    connection,
                    payload,
                    scope.token,
                    interval=config.resend_interval,
                    skip_preflight=config.skip_preflight,
                    warn_limit=config.resend_warn_limit,
                    metrics=metrics,
                )
                scope.spawn(resender.run(), name=f"resend-{signature[:8]}")
                outcome = await race_confirmation(
                    connection,
                    signature,
                    blockhash_with_expiry_block_height,
                    scope.token,
                    margin=config.block_height_margin,
                    poll_interval=config.poll_interval,
                    commitment=config.commitment,
                )
    except Exception:
        _record_outcome(metrics, "error")
        raise

    if isinstance(outcome, Expired):
        _record_outcome(metrics, "expired")
        return None
    if not isinstance(outcome, Confirmed):
        logger.info("Confirmation of %s cancelled by caller", signature)
        _record_outcome(metrics, "cancelled")
        return None

    logger.info("Transaction %s confirmed via %s", signature, outcome.via)
    if metrics:
        metrics.record_confirmation(outcome.via)

    record = await fetch_confirmed_transaction(
        connection,
        signature,
        attempts=config.fetch_attempts,
        min_backoff=config.fetch_min_backoff,
        factor=config.fetch_backoff_factor,
        commitment=config.commitment,
        max_supported_transaction_version=config.max_supported_transaction_version,
    )
    _record_outcome(metrics, "confirmed" if record is not None else "not_found")
    return record


def _record_outcome(metrics: SenderMetrics | None, outcome: str) -> None:
    if metrics:
        metrics.record_outcome(outcome)


class TransactionSender:
    """Sends signed transactions over one connection with shared settings.

    Usage::

        sender = TransactionSender(chain, config.sender)
        record = await sender.send_transaction(signed_tx, window)
    """

    def __init__(
        self,
        connection: Connection,
        config: SenderConfig | None = None,
        *,
        metrics: SenderMetrics | None = None,
    ) -> None:
        self._connection = connection
        self._config = config if config is not None else SenderConfig()
        self._metrics = metrics

    @property
    def config(self) -> SenderConfig:
        return self._config

    async def send_and_confirm(
        self,
        serialized_transaction: bytes,
        window: BlockhashWithExpiryBlockHeight,
        *,
        token: CancelToken | None = None,
    ) -> TransactionRecord | None:
        """Send pre-serialized bytes; see :func:`send_and_confirm_transaction`."""
        return await send_and_confirm_transaction(
            self._connection,
            serialized_transaction,
            window,
            config=self._config,
            token=token,
            metrics=self._metrics,
        )

    async def send_transaction(
        self,
        transaction: Any,
        window: BlockhashWithExpiryBlockHeight,
        *,
        token: CancelToken | None = None,
    ) -> TransactionRecord | None:
        """Serialize a signed transaction object and send it.

        Raises:
            MissingSignatureError: If *transaction* is unsigned; nothing is sent.
        """
        signature = get_signature(transaction)
        logger.info("Submitting transaction %s", signature)
        return await self.send_and_confirm(bytes(transaction), window, token=token)
