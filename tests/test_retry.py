"""Tests for the bounded retry loop (injected sleep, no real waiting)."""

import asyncio

import pytest

from cv_pipeline.errors import MalformedModelOutput, ModelUnavailable, ParseCancelled
from cv_pipeline.retry import CancellationToken, RetryPolicy, run_with_retry

from fakes import RecordingSleep, make_config


class FlakyOperation:
    """Fails with the queued errors, then returns "ok"."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def _transient():
    return ModelUnavailable("timed out", retryable=True)


def test_succeeds_first_time_without_sleeping():
    sleep = RecordingSleep()
    op = FlakyOperation()
    assert asyncio.run(run_with_retry(op, RetryPolicy(), sleep=sleep)) == "ok"
    assert op.calls == 1
    assert sleep.delays == []


def test_two_timeouts_then_success():
    sleep = RecordingSleep()
    op = FlakyOperation(_transient(), _transient())
    assert asyncio.run(run_with_retry(op, RetryPolicy(max_attempts=3, base_delay_seconds=1.0), sleep=sleep)) == "ok"
    assert op.calls == 3
    assert sleep.delays == [1.0, 2.0]


def test_gives_up_after_max_attempts_with_last_error():
    sleep = RecordingSleep()
    last = _transient()
    op = FlakyOperation(_transient(), _transient(), last, _transient())
    with pytest.raises(ModelUnavailable) as exc_info:
        asyncio.run(run_with_retry(op, RetryPolicy(max_attempts=3, base_delay_seconds=0.5), sleep=sleep))
    assert exc_info.value is last
    assert op.calls == 3
    assert sleep.delays == [0.5, 1.0]


def test_permanent_error_is_not_retried():
    sleep = RecordingSleep()
    op = FlakyOperation(MalformedModelOutput())
    with pytest.raises(MalformedModelOutput):
        asyncio.run(run_with_retry(op, RetryPolicy(), sleep=sleep))
    assert op.calls == 1
    assert sleep.delays == []


def test_non_retryable_model_error_is_not_retried():
    op = FlakyOperation(ModelUnavailable("bad request"))
    with pytest.raises(ModelUnavailable):
        asyncio.run(run_with_retry(op, RetryPolicy(), sleep=RecordingSleep()))
    assert op.calls == 1


def test_single_attempt_policy():
    op = FlakyOperation(_transient())
    with pytest.raises(ModelUnavailable):
        asyncio.run(run_with_retry(op, RetryPolicy(max_attempts=1), sleep=RecordingSleep()))
    assert op.calls == 1


def test_policy_from_config():
    policy = RetryPolicy.from_config(make_config(max_attempts=5, retry_base_delay=2.0))
    assert policy.max_attempts == 5
    assert [policy.delay_after(n) for n in (1, 2, 3)] == [2.0, 4.0, 6.0]


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"base_delay_seconds": -1}])
def test_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_cancelled_token_stops_before_first_attempt():
    token = CancellationToken()
    token.cancel()
    op = FlakyOperation()
    with pytest.raises(ParseCancelled):
        asyncio.run(run_with_retry(op, RetryPolicy(), sleep=RecordingSleep(), cancel_token=token))
    assert op.calls == 0


def test_cancel_during_backoff():
    token = CancellationToken()
    op = FlakyOperation(_transient())

    async def cancelling_sleep(seconds):
        token.cancel()
        await asyncio.sleep(60)

    with pytest.raises(ParseCancelled):
        asyncio.run(run_with_retry(op, RetryPolicy(), sleep=cancelling_sleep, cancel_token=token))
    assert op.calls == 1


def test_cancel_aborts_running_attempt():
    token = CancellationToken()
    aborted = []

    async def hanging_operation():
        token.cancel()
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            aborted.append(True)
            raise
        return "late"

    with pytest.raises(ParseCancelled):
        asyncio.run(run_with_retry(hanging_operation, RetryPolicy(), sleep=RecordingSleep(), cancel_token=token))
    assert aborted == [True]
