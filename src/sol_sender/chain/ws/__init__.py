"""WS — websocket signature subscriptions."""

from sol_sender.chain.ws.service import SignatureSubscriber

__all__ = ["SignatureSubscriber"]
