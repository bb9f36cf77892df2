"""SenderError — base exception class for all sol-sender errors."""

from __future__ import annotations


class SenderError(Exception):
    """Base error for all transaction sending operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "sender-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class MissingSignatureError(SenderError):
    """The transaction carries no fee payer signature."""

    def __init__(
        self,
        message: str = (
            "Missing transaction signature, the transaction was not signed by the fee payer"
        ),
    ) -> None:
        super().__init__(message, code="missing-signature")


class ConfirmationError(SenderError):
    """A confirmation notification could not be interpreted."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="confirmation-error")
