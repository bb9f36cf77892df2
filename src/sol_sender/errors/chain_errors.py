"""RPC & websocket chain-related errors."""

from __future__ import annotations

from sol_sender.errors.sender_errors import SenderError


class RPCError(SenderError):
    """Error from the Solana JSON-RPC endpoint.

    ``status_code`` is the HTTP status (0 when the request never got a
    response), ``rpc_code`` the JSON-RPC error code when the node returned one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        rpc_code: int | None = None,
        code: str = "rpc-error",
    ) -> None:
        super().__init__(message, code=code)
        self.status_code = status_code
        self.rpc_code = rpc_code


class SubscriptionError(RPCError):
    """Error from the websocket signature subscription."""

    def __init__(
        self,
        message: str,
        *,
        rpc_code: int | None = None,
        code: str = "subscription-error",
    ) -> None:
        super().__init__(message, rpc_code=rpc_code, code=code)


class SubscriptionClosedError(SubscriptionError):
    """The websocket could not be opened or dropped before a notification.

    Unlike a rejected subscription this is a transport failure; subscribing
    again may succeed.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="subscription-closed")


class BlockHeightExceededError(SenderError):
    """The block height passed the transaction's last valid block height."""

    def __init__(self, signature: str, last_valid_block_height: int) -> None:
        super().__init__(
            f"Signature {signature} has expired: block height exceeded",
            code="block-height-exceeded",
        )
        self.signature = signature
        self.last_valid_block_height = last_valid_block_height
