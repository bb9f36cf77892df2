"""Connection protocol consumed by the sender."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sol_sender.chain.rpc.models import (
        BlockhashWithExpiryBlockHeight,
        Commitment,
        SignatureResult,
        SignatureStatus,
        TransactionRecord,
    )
    from sol_sender.utils.aio import CancelToken


class Connection(Protocol):
    """The RPC calls a send-and-confirm run needs.

    :class:`sol_sender.chain.ChainService` implements it; tests use fakes.
    All calls are safe to issue concurrently.
    """

    async def send_raw_transaction(
        self,
        payload: bytes,
        *,
        skip_preflight: bool = True,
        max_retries: int | None = None,
    ) -> str: ...

    async def confirm_transaction(
        self,
        signature: str,
        window: BlockhashWithExpiryBlockHeight,
        commitment: Commitment = ...,
        token: CancelToken | None = None,
    ) -> SignatureResult | None: ...

    async def get_signature_status(
        self,
        signature: str,
        *,
        search_transaction_history: bool = False,
    ) -> SignatureStatus | None: ...

    async def get_transaction(
        self,
        signature: str,
        *,
        commitment: Commitment = ...,
        max_supported_transaction_version: int | None = 0,
    ) -> TransactionRecord | None: ...
