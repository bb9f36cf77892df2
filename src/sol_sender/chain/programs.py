"""Known Raydium liquidity pool program ids."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solders.pubkey import Pubkey

# Mainnet
AMM_V4 = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"
AMM_STABLE = "5quBtoiQqxF9Jv6KYKctB59NT3gtJD2Y65kdnB1Uev3h"

# Devnet
DEVNET_AMM_V4 = "HWy1jotHpo6UqeQxx49dpYYdQB8wj9Qk9MdxwjLvDHB8"
DEVNET_AMM_STABLE = "DDg4VmQaJV9ogWce7LpcjBA9bv22wRp5uaTPa5pGjijF"

VALID_AMM_PROGRAM_IDS = frozenset(
    {
        AMM_V4,
        AMM_STABLE,
        DEVNET_AMM_V4,
        DEVNET_AMM_STABLE,
    }
)


def is_valid_amm(program_id: str | Pubkey) -> bool:
    """Whether *program_id* is one of the known AMM program ids."""
    return str(program_id) in VALID_AMM_PROGRAM_IDS
