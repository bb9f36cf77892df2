"""Sender — resend loop, confirmation race, record fetch."""

from sol_sender.sender.confirmation import (
    ConfirmationOutcome,
    Confirmed,
    Expired,
    poll_confirmation,
    push_confirmation,
    race_confirmation,
)
from sol_sender.sender.fetch import fetch_confirmed_transaction
from sol_sender.sender.protocols import Connection
from sol_sender.sender.resender import Resender
from sol_sender.sender.waiter import TransactionSender, send_and_confirm_transaction

__all__ = [
    "ConfirmationOutcome",
    "Confirmed",
    "Connection",
    "Expired",
    "Resender",
    "TransactionSender",
    "fetch_confirmed_transaction",
    "poll_confirmation",
    "push_confirmation",
    "race_confirmation",
    "send_and_confirm_transaction",
]
