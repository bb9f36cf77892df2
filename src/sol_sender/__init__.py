"""sol-sender — send signed Solana transactions and wait for confirmation."""

from sol_sender.chain import ChainService, is_valid_amm
from sol_sender.chain.rpc.models import (
    BlockhashWithExpiryBlockHeight,
    Commitment,
    ConfirmationStatus,
    TransactionRecord,
)
from sol_sender.config.settings import AppConfig, RPCConfig, SenderConfig
from sol_sender.errors import (
    BlockHeightExceededError,
    MissingSignatureError,
    RPCError,
    SenderError,
)
from sol_sender.sender import TransactionSender, send_and_confirm_transaction
from sol_sender.utils import CancelToken, get_signature, wait

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "BlockHeightExceededError",
    "BlockhashWithExpiryBlockHeight",
    "CancelToken",
    "ChainService",
    "Commitment",
    "ConfirmationStatus",
    "MissingSignatureError",
    "RPCConfig",
    "RPCError",
    "SenderConfig",
    "SenderError",
    "TransactionRecord",
    "TransactionSender",
    "__version__",
    "get_signature",
    "is_valid_amm",
    "send_and_confirm_transaction",
    "wait",
]
