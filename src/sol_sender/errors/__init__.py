"""Errors — sender, RPC and subscription failures."""

from sol_sender.errors.chain_errors import (
    BlockHeightExceededError,
    RPCError,
    SubscriptionClosedError,
    SubscriptionError,
)
from sol_sender.errors.sender_errors import ConfirmationError, MissingSignatureError, SenderError

__all__ = [
    "BlockHeightExceededError",
    "ConfirmationError",
    "MissingSignatureError",
    "RPCError",
    "SenderError",
    "SubscriptionClosedError",
    "SubscriptionError",
]
