"""Solana RPC data models — commitment levels, statuses, transaction records.

Data classes representing JSON-RPC response values used while sending and
confirming a transaction.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any

# ---------------------------------------------------------------------------
# Commitment / confirmation status enums
# ---------------------------------------------------------------------------


class Commitment(enum.StrEnum):
    """Durability threshold requested from the RPC node."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


class ConfirmationStatus(enum.StrEnum):
    """Observed confirmation status of a signature.

    Lifecycle: NONE → PROCESSED → CONFIRMED → FINALIZED. Expiry is not a
    status the node reports; the sender surfaces it as an ``Expired`` outcome.
    """

    NONE = "none"
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @classmethod
    def from_string(cls, value: str | None) -> ConfirmationStatus:
        """Parse a status string, returning NONE for missing or unknown values."""
        if not value:
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

    def reaches(self, threshold: Commitment | ConfirmationStatus) -> bool:
        """Whether this status is at or above *threshold*."""
        return _RANK[self] >= _RANK[ConfirmationStatus(threshold.value)]


_RANK = {
    ConfirmationStatus.NONE: 0,
    ConfirmationStatus.PROCESSED: 1,
    ConfirmationStatus.CONFIRMED: 2,
    ConfirmationStatus.FINALIZED: 3,
}


# ---------------------------------------------------------------------------
# Blockhash validity window
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlockhashWithExpiryBlockHeight:
    """Recent blockhash and the last block height at which it is accepted."""

    blockhash: str
    last_valid_block_height: int

    def tightened(self, margin: int) -> BlockhashWithExpiryBlockHeight:
        """Return a copy whose last valid block height is *margin* blocks earlier."""
        return replace(self, last_valid_block_height=self.last_valid_block_height - margin)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BlockhashWithExpiryBlockHeight:
        """Create from a ``getLatestBlockhash`` value dict."""
        return cls(
            blockhash=data["blockhash"],
            last_valid_block_height=data["lastValidBlockHeight"],
        )


# ---------------------------------------------------------------------------
# Signature status / notification result
# ---------------------------------------------------------------------------


@dataclass
class SignatureStatus:
    """A single entry of a ``getSignatureStatuses`` response.

    Attributes:
        slot: Slot the transaction was processed in.
        confirmations: Blocks since confirmation, None once rooted.
        err: Transaction error, None on success.
        confirmation_status: Cluster confirmation status string.
    """

    slot: int = 0
    confirmations: int | None = None
    err: Any = None
    confirmation_status: str = ""

    @property
    def status(self) -> ConfirmationStatus:
        """Parse confirmation_status into ConfirmationStatus."""
        return ConfirmationStatus.from_string(self.confirmation_status)

    @property
    def is_confirmed(self) -> bool:
        """Whether the signature reached at least ``confirmed``."""
        return self.status.reaches(Commitment.CONFIRMED)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignatureStatus:
        """Create from a JSON status dict."""
        return cls(
            slot=data.get("slot", 0),
            confirmations=data.get("confirmations"),
            err=data.get("err"),
            confirmation_status=data.get("confirmationStatus") or "",
        )


@dataclass(frozen=True)
class SignatureResult:
    """Value of a ``signatureNotification``: the transaction error, if any."""

    err: Any = None
    slot: int = 0

    @property
    def is_error(self) -> bool:
        return self.err is not None


# ---------------------------------------------------------------------------
# Transaction record
# ---------------------------------------------------------------------------


@dataclass
class TransactionRecord:
    """Confirmed transaction as returned by ``getTransaction``.

    The record is passed through to callers mostly as-is; ``data`` keeps the
    raw JSON value.
    """

    slot: int = 0
    block_time: int | None = None
    meta: dict[str, Any] | None = None
    transaction: Any = None
    version: int | str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def err(self) -> Any:
        """Transaction error from ``meta.err`` (None when it succeeded)."""
        return (self.meta or {}).get("err")

    @property
    def succeeded(self) -> bool:
        return self.meta is not None and self.err is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransactionRecord:
        """Create from a ``getTransaction`` result dict."""
        return cls(
            slot=data.get("slot", 0),
            block_time=data.get("blockTime"),
            meta=data.get("meta"),
            transaction=data.get("transaction"),
            version=data.get("version"),
            data=data,
        )
