"""Chain service — Solana JSON-RPC + websocket integration."""

from sol_sender.chain.programs import is_valid_amm
from sol_sender.chain.service import ChainService

__all__ = ["ChainService", "is_valid_amm"]
