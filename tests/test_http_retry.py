from __future__ import annotations

import httpx
import pytest

from drivecord.services import http as http_mod


@pytest.mark.asyncio
async def test_wait_before_retry_caps_retry_after_to_default_max_backoff(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    observed_delays: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        observed_delays.append(delay)

    monkeypatch.setattr(http_mod.asyncio, "sleep", _fake_sleep)

    response = httpx.Response(
        http_mod.HTTP_TOO_MANY_REQUESTS,
        headers={"retry-after": "120"},
    )
    await http_mod.wait_before_retry(0, response=response)

    assert observed_delays == [10.0]


@pytest.mark.asyncio
async def test_wait_before_retry_ignores_non_finite_retry_after(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    observed_delays: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        observed_delays.append(delay)

    class _FakeRandom:
        @staticmethod
        def random() -> float:
            return 0.0

    monkeypatch.setattr(http_mod.asyncio, "sleep", _fake_sleep)
    monkeypatch.setattr(http_mod, "_JITTER_RANDOM", _FakeRandom())

    response = httpx.Response(
        http_mod.HTTP_TOO_MANY_REQUESTS,
        headers={"retry-after": "inf"},
    )
    await http_mod.wait_before_retry(
        0,
        response=response,
        max_backoff_seconds=30.0,
    )

    assert observed_delays == [2.0]


@pytest.mark.asyncio
async def test_request_with_retries_returns_last_response_when_exhausted(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _fake_sleep(_delay: float) -> None:
        return None

    monkeypatch.setattr(http_mod.asyncio, "sleep", _fake_sleep)
    calls = 0

    async def _request() -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(502)

    response = await http_mod.request_with_retries(
        _request,
        options=http_mod.RetryOptions(retries=1),
    )

    assert response.status_code == 502
    assert calls == 2


def test_parse_retry_after_http_date_in_the_past_is_zero() -> None:
    assert (
        http_mod._parse_retry_after_seconds("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0
    )
