"""Tests for the bounded retry combinator."""

from __future__ import annotations

import pytest

from sol_sender.utils import retry as retry_mod
from sol_sender.utils.retry import Exhausted, Found, backoff_delay, retry_until_found


def _scripted(values):
    calls = []

    async def fetch():
        calls.append(1)
        return values[min(len(calls), len(values)) - 1]

    return fetch, calls


@pytest.fixture
def delays(monkeypatch):
    """Record backoff delays instead of sleeping."""
    recorded: list[float] = []

    async def fake_wait(seconds: float) -> None:
        recorded.append(seconds)

    monkeypatch.setattr(retry_mod, "wait", fake_wait)
    return recorded


class TestRetryUntilFound:
    async def test_found_immediately(self, delays):
        fetch, calls = _scripted(["value"])
        result = await retry_until_found(fetch)

        assert result == Found("value", attempts=1)
        assert len(calls) == 1
        assert delays == []

    async def test_found_on_fifth(self, delays):
        fetch, calls = _scripted([None, None, None, None, "value"])
        result = await retry_until_found(fetch, attempts=5, min_backoff=1.0)

        assert isinstance(result, Found)
        assert result.value == "value"
        assert result.attempts == 5
        assert delays == [1.0, 1.0, 1.0, 1.0]

    async def test_exhausted(self, delays):
        fetch, calls = _scripted([None])
        result = await retry_until_found(fetch, attempts=5, min_backoff=1.0)

        assert result == Exhausted(attempts=5)
        assert len(calls) == 5
        # No wait after the final attempt.
        assert len(delays) == 4

    async def test_growing_backoff(self, delays):
        fetch, _ = _scripted([None])
        await retry_until_found(fetch, attempts=4, min_backoff=1.0, factor=2.0, max_backoff=3.0)

        assert delays == [1.0, 2.0, 3.0]

    async def test_falsy_values_are_found(self, delays):
        fetch, _ = _scripted([0])
        assert await retry_until_found(fetch) == Found(0, attempts=1)

    async def test_exception_propagates(self, delays):
        async def fetch():
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            await retry_until_found(fetch)

    async def test_invalid_attempts(self):
        fetch, _ = _scripted(["x"])
        with pytest.raises(ValueError, match="attempts"):
            await retry_until_found(fetch, attempts=0)


class TestBackoffDelay:
    def test_fixed(self):
        assert backoff_delay(3, min_backoff=1.0) == 1.0

    def test_factor_and_cap(self):
        assert backoff_delay(2, min_backoff=0.5, factor=2.0) == 2.0
        assert backoff_delay(10, min_backoff=0.5, factor=2.0, max_backoff=5.0) == 5.0
