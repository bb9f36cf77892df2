"""Websocket signature subscription — push notification of confirmation.

Opens a websocket to the RPC node, sends ``signatureSubscribe`` and waits
for the matching ``signatureNotification``. The node drops the
subscription after the notification, so each wait uses its own socket.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import websockets
from websockets.exceptions import WebSocketException

from sol_sender.chain.rpc.models import Commitment, SignatureResult
from sol_sender.errors.chain_errors import SubscriptionClosedError, SubscriptionError
from sol_sender.errors.sender_errors import ConfirmationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sol_sender.config.settings import RPCConfig

logger = logging.getLogger(__name__)

_SUBSCRIBE_ID = 1


class SignatureSubscriber:
    """Waits for a signature notification over a websocket.

    Usage::

        subscriber = SignatureSubscriber(config)
        result = await subscriber.wait_for_signature(signature)
        if result.is_error:
            ...
    """

    def __init__(
        self,
        config: RPCConfig,
        *,
        connect: Callable[..., Any] = websockets.connect,
    ) -> None:
        """Initialize the subscriber.

        Args:
            config: RPC configuration; ``ws_url`` is the websocket endpoint.
            connect: Websocket connect factory (``websockets.connect``).
        """
        self._config = config
        self._connect = connect

    @property
    def url(self) -> str:
        return self._config.ws_url

    async def wait_for_signature(
        self,
        signature: str,
        *,
        commitment: Commitment = Commitment.CONFIRMED,
    ) -> SignatureResult:
        """Block until the node reports *signature* at *commitment*.

        Raises:
            SubscriptionClosedError: If the socket cannot be opened or drops.
            SubscriptionError: If the node rejects the subscription.
            ConfirmationError: If a message cannot be parsed.
        """
        request = {
            "jsonrpc": "2.0",
            "id": _SUBSCRIBE_ID,
            "method": "signatureSubscribe",
            "params": [signature, {"commitment": commitment.value}],
        }
        try:
            async with self._connect(self._config.ws_url, open_timeout=self._config.timeout) as ws:
                await ws.send(json.dumps(request))
                subscription_id: int | None = None
                while True:
                    message = _decode(await ws.recv())
                    if message.get("id") == _SUBSCRIBE_ID:
                        subscription_id = self._handle_subscribe_reply(message)
                        logger.debug("Subscribed to %s (id %s)", signature, subscription_id)
                        continue
                    if message.get("method") != "signatureNotification":
                        continue
                    params = message.get("params") or {}
                    if subscription_id is not None and params.get("subscription") not in (
                        None,
                        subscription_id,
                    ):
                        continue
                    result = _parse_notification(params)
                    if result is not None:
                        return result
        except WebSocketException as exc:
            raise SubscriptionClosedError(f"Signature subscription failed: {exc}") from exc
        except OSError as exc:
            raise SubscriptionClosedError(f"Signature subscription connect failed: {exc}") from exc

    @staticmethod
    def _handle_subscribe_reply(message: dict[str, Any]) -> int:
        error = message.get("error")
        if error:
            raise SubscriptionError(
                f"signatureSubscribe rejected: {error.get('message', error)}",
                rpc_code=error.get("code"),
            )
        return message.get("result")


def _decode(raw: str | bytes) -> dict[str, Any]:
    try:
        message = json.loads(raw)
    except ValueError as exc:
        raise ConfirmationError(f"Invalid websocket message: {raw!r}") from exc
    if not isinstance(message, dict):
        raise ConfirmationError(f"Unexpected websocket message: {message!r}")
    return message


def _parse_notification(params: dict[str, Any]) -> SignatureResult | None:
    """Return the signature result, or None for ``receivedSignature`` pings."""
    result = params.get("result")
    if not isinstance(result, dict):
        raise ConfirmationError(f"Malformed signature notification: {params!r}")
    value = result.get("value")
    if value == "receivedSignature":
        return None
    if not isinstance(value, dict):
        raise ConfirmationError(f"Malformed signature notification value: {value!r}")
    slot = (result.get("context") or {}).get("slot", 0)
    return SignatureResult(err=value.get("err"), slot=slot)
