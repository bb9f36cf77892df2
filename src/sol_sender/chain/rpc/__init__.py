"""RPC — JSON-RPC transaction submission and status queries."""

from sol_sender.chain.rpc.models import (
    BlockhashWithExpiryBlockHeight,
    Commitment,
    ConfirmationStatus,
    SignatureResult,
    SignatureStatus,
    TransactionRecord,
)
from sol_sender.chain.rpc.service import SolanaRPCService

__all__ = [
    "BlockhashWithExpiryBlockHeight",
    "Commitment",
    "ConfirmationStatus",
    "SignatureResult",
    "SignatureStatus",
    "SolanaRPCService",
    "TransactionRecord",
]
