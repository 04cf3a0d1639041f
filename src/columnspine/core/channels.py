"""Write channels - where a pipeline's store actions actually run.

A pipeline hands every batch write to a channel as a zero-argument callable.
``InlineWriteChannel`` simply calls it.  ``SerialWriteChannel`` runs all
actions that share a channel name one at a time behind a lock and retries
transient failures, so writes queue up instead of failing while the driver
reconnects to the cluster.

ARCHITECTURE
────────────
::

    pipeline.process(...)
        └── channel.execute("db", action)
              ├── InlineWriteChannel  ─ action()
              └── SerialWriteChannel  ─ lock("db") → RetryContext.run(action)

Example::

    channel = SerialWriteChannel(ExponentialBackoff(max_retries=5))
    channel.execute("db", lambda: session.execute(batch))
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

from columnspine.core.errors import error_fields
from columnspine.core.logging import get_logger
from columnspine.core.retry import NoRetry, RetryContext, RetryStrategy

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_CHANNEL = "db"


@runtime_checkable
class WriteChannel(Protocol):
    """Anything that can run a store action under a channel name."""

    def execute(self, name: str, action: Callable[[], T]) -> T: ...


class InlineWriteChannel:
    """Runs actions directly on the calling thread."""

    def execute(self, name: str, action: Callable[[], T]) -> T:
        return action()


class SerialWriteChannel:
    """Serializes actions per channel name and retries transient failures.

    Thread-safe: one lock per channel name, created lazily.
    """

    def __init__(self, retry: RetryStrategy | None = None):
        self._retry = retry or NoRetry()
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.Lock()
                self._locks[name] = lock
            return lock

    def _on_retry(self, name: str) -> Callable[[int, Exception, float], None]:
        def log_retry(attempt: int, error: Exception, delay: float) -> None:
            logger.warning(
                "write_channel_retry",
                channel=name,
                attempt=attempt,
                delay=round(delay, 3),
                **error_fields(error),
            )

        return log_retry

    def execute(self, name: str, action: Callable[[], T]) -> T:
        with self._lock_for(name):
            ctx = RetryContext(strategy=self._retry, on_retry=self._on_retry(name))
            try:
                return ctx.run(action)
            except Exception as e:
                if ctx.attempt > 1:
                    logger.error(
                        "write_channel_gave_up",
                        channel=name,
                        attempts=ctx.attempt,
                        **error_fields(e),
                    )
                raise


__all__ = [
    "DEFAULT_CHANNEL",
    "WriteChannel",
    "InlineWriteChannel",
    "SerialWriteChannel",
]
