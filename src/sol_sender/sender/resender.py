"""Resend loop — rebroadcast the same signed bytes until cancelled.

The network deduplicates identical transactions, so resending is harmless
and raises the odds a leader actually receives it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sol_sender.metrics.collector import SenderMetrics
    from sol_sender.sender.protocols import Connection
    from sol_sender.utils.aio import CancelToken

logger = logging.getLogger(__name__)

RESEND_INTERVAL = 2.0  # seconds
RESEND_WARN_LIMIT = 10


class Resender:
    """Resends a signed transaction every *interval* seconds until *token* is set.

    Resend failures are counted and logged, never raised: only the token
    stops the loop. After *warn_limit* failures further ones are logged at
    DEBUG so a long network partition does not flood the log.
    """

    def __init__(
        self,
        connection: Connection,
        payload: bytes,
        token: CancelToken,
        *,
        interval: float = RESEND_INTERVAL,
        skip_preflight: bool = True,
        warn_limit: int = RESEND_WARN_LIMIT,
        metrics: SenderMetrics | None = None,
    ) -> None:
        self._connection = connection
        self._payload = bytes(payload)
        self._token = token
        self._interval = interval
        self._skip_preflight = skip_preflight
        self._warn_limit = warn_limit
        self._metrics = metrics
        self.attempts = 0
        self.failures = 0

    async def run(self) -> None:
        """Resend until the token is set."""
        while not await self._token.sleep(self._interval):
            self.attempts += 1
            try:
                await self._connection.send_raw_transaction(
                    self._payload, skip_preflight=self._skip_preflight
                )
            except Exception as exc:
                self.failures += 1
                self._log_failure(exc)
                if self._metrics:
                    self._metrics.record_resend(failed=True)
            else:
                if self._metrics:
                    self._metrics.record_resend()
        logger.debug("Resend loop stopped after %d attempts", self.attempts)

    def _log_failure(self, exc: Exception) -> None:
        if self.failures <= self._warn_limit:
            logger.warning("Failed to resend transaction: %s", exc)
            if self.failures == self._warn_limit:
                logger.warning(
                    "Resend failed %d times; further failures are logged at DEBUG",
                    self.failures,
                )
        else:
            logger.debug("Failed to resend transaction (%d): %s", self.failures, exc)
