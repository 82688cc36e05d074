"""Bounded retry with linear-growing backoff and cooperative cancellation."""

import asyncio
from contextlib import suppress
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from config import PipelineConfig
from cv_pipeline.errors import ParseCancelled, ResumeParseError
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must be non-negative")

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "RetryPolicy":
        return cls(max_attempts=config.max_attempts, base_delay_seconds=config.retry_base_delay)

    def delay_after(self, attempt: int) -> float:
        """Wait before the next attempt, after `attempt` (1-based) failed."""
        return self.base_delay_seconds * attempt


class CancellationToken:
    """One-shot cancel signal; cancel() may be called from any thread."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None and self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._event.set)

    async def wait(self) -> None:
        if self._event is None or self._loop is not asyncio.get_running_loop():
            self._loop = asyncio.get_running_loop()
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


async def _race(aw: Awaitable[T], cancel_token: Optional[CancellationToken]) -> T:
    """Await `aw` unless the token fires first; then abort it and raise ParseCancelled."""
    if cancel_token is None:
        return await aw
    task = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(cancel_token.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        if task in done:
            return task.result()
        raise ParseCancelled()
    finally:
        for pending in (task, waiter):
            if not pending.done():
                pending.cancel()
                with suppress(asyncio.CancelledError):
                    await pending


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: SleepFn = asyncio.sleep,
    cancel_token: Optional[CancellationToken] = None,
) -> T:
    """
    Run `operation` up to policy.max_attempts times.
    Only errors flagged retryable are retried; anything else propagates immediately.
    After the last attempt the last error propagates.
    """
    last_error: Optional[ResumeParseError] = None
    for attempt in range(1, policy.max_attempts + 1):
        if cancel_token is not None and cancel_token.cancelled:
            raise ParseCancelled()
        try:
            return await _race(operation(), cancel_token)
        except ResumeParseError as e:
            if not e.retryable:
                raise
            last_error = e
            logger.warning(
                "Attempt %s/%s failed: %s", attempt, policy.max_attempts, e.kind.value
            )
        if attempt < policy.max_attempts:
            await _race(sleep(policy.delay_after(attempt)), cancel_token)

    logger.error("Giving up after %s attempts", policy.max_attempts)
    raise last_error
