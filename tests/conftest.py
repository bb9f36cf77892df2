"""Shared test fixtures for sol-sender test suite."""

from __future__ import annotations

import pytest


@pytest.fixture
def app_config():
    """Provide a test AppConfig pointing at a local validator."""
    from sol_sender.config.settings import AppConfig, RPCConfig

    return AppConfig(
        debug=True,
        rpc=RPCConfig(
            url="http://rpc.test",
            block_height_poll_interval=0.01,
            resubscribe_interval=0.01,
        ),
    )


@pytest.fixture
def fast_sender_config():
    """SenderConfig with millisecond intervals so tests run quickly."""
    from sol_sender.config.settings import SenderConfig

    return SenderConfig(
        resend_interval=0.01,
        poll_interval=0.01,
        fetch_min_backoff=0.0,
    )
