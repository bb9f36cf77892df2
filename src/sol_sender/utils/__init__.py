"""Utilities — asyncio helpers, retry, signature extraction."""

from sol_sender.utils.aio import CancelScope, CancelToken, first_completed, wait
from sol_sender.utils.retry import Exhausted, Found, retry_until_found
from sol_sender.utils.signature import get_signature

__all__ = [
    "CancelScope",
    "CancelToken",
    "Exhausted",
    "Found",
    "first_completed",
    "get_signature",
    "retry_until_found",
    "wait",
]
