"""Post-confirmation record fetch.

The RPC node answering ``getTransaction`` may lag behind the node that
delivered the confirmation, so an empty answer is retried a few times.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sol_sender.chain.rpc.models import Commitment
from sol_sender.utils.retry import Found, retry_until_found

if TYPE_CHECKING:
    from sol_sender.chain.rpc.models import TransactionRecord
    from sol_sender.sender.protocols import Connection

logger = logging.getLogger(__name__)

FETCH_ATTEMPTS = 5
FETCH_MIN_BACKOFF = 1.0  # seconds


async def fetch_confirmed_transaction(
    connection: Connection,
    signature: str,
    *,
    attempts: int = FETCH_ATTEMPTS,
    min_backoff: float = FETCH_MIN_BACKOFF,
    factor: float = 1.0,
    commitment: Commitment = Commitment.CONFIRMED,
    max_supported_transaction_version: int | None = 0,
) -> TransactionRecord | None:
    """Fetch the transaction record, retrying while the node returns nothing.

    Returns:
        The record, or None if every attempt came back empty.
    """

    async def _fetch() -> TransactionRecord | None:
        return await connection.get_transaction(
            signature,
            commitment=commitment,
            max_supported_transaction_version=max_supported_transaction_version,
        )

    result = await retry_until_found(
        _fetch, attempts=attempts, min_backoff=min_backoff, factor=factor
    )
    if isinstance(result, Found):
        return result.value
    logger.warning("Transaction %s not found after %d attempts", signature, result.attempts)
    return None
