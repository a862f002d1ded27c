import logging

import pytest

from academy.portal.retry import linear_backoff, retry_async


class Recorder:
    def __init__(self):
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


def flaky(failures: int, result="ok"):
    calls = {"count": 0}

    async def fn():
        calls["count"] += 1
        if calls["count"] <= failures:
            raise ConnectionError(f"attempt {calls['count']}")
        return result

    return fn, calls


def test_linear_backoff():
    delay = linear_backoff(1.0)

    assert [delay(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]
    assert linear_backoff(0.5)(2) == 1.0


@pytest.mark.asyncio
async def test_first_success_is_returned_without_sleeping():
    recorder = Recorder()
    fn, calls = flaky(0)

    assert await retry_async(fn, sleep=recorder.sleep) == "ok"
    assert calls["count"] == 1
    assert recorder.sleeps == []


@pytest.mark.asyncio
async def test_recovers_after_failures_with_growing_delays():
    recorder = Recorder()
    fn, calls = flaky(2)

    assert await retry_async(fn, attempts=3, delay=linear_backoff(1.0), sleep=recorder.sleep) == "ok"
    assert calls["count"] == 3
    assert recorder.sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_exhaustion_returns_none_and_logs(caplog):
    recorder = Recorder()
    fn, calls = flaky(10)

    with caplog.at_level(logging.INFO, logger="academy.portal.retry"):
        result = await retry_async(fn, attempts=3, sleep=recorder.sleep, label="course list")

    assert result is None
    assert calls["count"] == 3
    # No sleep after the final attempt.
    assert recorder.sleeps == [1.0, 2.0]
    assert "course list: all 3 attempts failed" in caplog.text


@pytest.mark.asyncio
async def test_attempts_must_be_positive():
    fn, _ = flaky(0)

    with pytest.raises(ValueError):
        await retry_async(fn, attempts=0)
