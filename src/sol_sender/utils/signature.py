"""Transaction signature extraction — the base58 transaction id."""

from __future__ import annotations

from typing import Any

import base58

from sol_sender.errors.sender_errors import MissingSignatureError


def _first_signature(transaction: Any) -> Any:
    """Pick the fee payer signature from either transaction shape."""
    if hasattr(transaction, "signature") and not callable(transaction.signature):
        return transaction.signature
    signatures = getattr(transaction, "signatures", None)
    if not signatures:
        return None
    return signatures[0]


def signature_bytes(signature: Any) -> bytes:
    """Convert a signature value (bytes or ``solders`` Signature) to raw bytes."""
    if isinstance(signature, bytes | bytearray | memoryview):
        return bytes(signature)
    if hasattr(signature, "__bytes__"):
        return bytes(signature)
    msg = f"Unsupported signature type: {type(signature).__name__}"
    raise TypeError(msg)


def get_signature(transaction: Any) -> str:
    """Return the base58 id of a signed transaction.

    Accepts either an object with a single ``signature`` field (legacy shape)
    or one with an ordered ``signatures`` sequence, such as ``solders``
    ``Transaction`` and ``VersionedTransaction``; the first entry is the fee
    payer's.

    Raises:
        MissingSignatureError: If the transaction has not been signed. An
            all-zero signature, the placeholder for an unsigned slot, counts
            as missing.
    """
    signature = _first_signature(transaction)
    if signature is None:
        raise MissingSignatureError
    raw = signature_bytes(signature)
    if not any(raw):
        raise MissingSignatureError
    return base58.b58encode(raw).decode("ascii")
