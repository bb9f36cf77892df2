"""Confirmation race — push notification vs. status polling.

Both strategies watch the same signature. The push strategy relies on the
connection's websocket confirmation and turns a block-height expiry into an
:class:`Expired` outcome. The poll strategy queries the signature status
directly, in case the websocket silently died. Whichever settles first wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sol_sender.chain.rpc.models import Commitment
from sol_sender.errors.chain_errors import BlockHeightExceededError
from sol_sender.utils.aio import first_completed

if TYPE_CHECKING:
    from sol_sender.chain.rpc.models import BlockhashWithExpiryBlockHeight
    from sol_sender.sender.protocols import Connection
    from sol_sender.utils.aio import CancelToken

logger = logging.getLogger(__name__)

PUSH = "push"
POLL = "poll"

BLOCK_HEIGHT_MARGIN = 150
POLL_INTERVAL = 2.0  # seconds


@dataclass(frozen=True)
class Confirmed:
    """The signature reached the requested commitment."""

    via: str
    slot: int = 0
    err: Any = None


@dataclass(frozen=True)
class Expired:
    """The (tightened) block height window closed before confirmation."""

    last_valid_block_height: int


ConfirmationOutcome = Confirmed | Expired


async def push_confirmation(
    connection: Connection,
    signature: str,
    window: BlockhashWithExpiryBlockHeight,
    token: CancelToken,
    *,
    margin: int = BLOCK_HEIGHT_MARGIN,
    commitment: Commitment = Commitment.CONFIRMED,
) -> ConfirmationOutcome | None:
    """Wait on the connection's confirmation with a window *margin* blocks shorter.

    Returns None if the token was set before an outcome.
    """
    tightened = window.tightened(margin)
    try:
        result = await connection.confirm_transaction(signature, tightened, commitment, token)
    except BlockHeightExceededError:
        logger.warning(
            "Transaction %s expired at block height %d",
            signature,
            tightened.last_valid_block_height,
        )
        return Expired(last_valid_block_height=tightened.last_valid_block_height)
    if result is None:
        return None
    return Confirmed(via=PUSH, slot=result.slot, err=result.err)


async def poll_confirmation(
    connection: Connection,
    signature: str,
    token: CancelToken,
    *,
    interval: float = POLL_INTERVAL,
    commitment: Commitment = Commitment.CONFIRMED,
) -> Confirmed | None:
    """Poll the signature status every *interval* seconds until it reaches *commitment*.

    Returns None once the token is set. RPC errors propagate.
    """
    while not await token.sleep(interval):
        status = await connection.get_signature_status(
            signature, search_transaction_history=False
        )
        logger.debug("Polled %s: %s", signature, status.confirmation_status if status else None)
        if status is not None and status.status.reaches(commitment):
            return Confirmed(via=POLL, slot=status.slot, err=status.err)
    return None


async def race_confirmation(
    connection: Connection,
    signature: str,
    window: BlockhashWithExpiryBlockHeight,
    token: CancelToken,
    *,
    margin: int = BLOCK_HEIGHT_MARGIN,
    poll_interval: float = POLL_INTERVAL,
    commitment: Commitment = Commitment.CONFIRMED,
) -> ConfirmationOutcome | None:
    """Race push against poll confirmation; the loser is cancelled.

    Returns:
        Confirmed or Expired, or None when the token was set externally
        before either strategy settled.

    Raises:
        Any error other than block height expiry, from either strategy.
    """
    return await first_completed(
        push_confirmation(
            connection, signature, window, token, margin=margin, commitment=commitment
        ),
        poll_confirmation(
            connection, signature, token, interval=poll_interval, commitment=commitment
        ),
        accept=lambda outcome: outcome is not None,
    )
