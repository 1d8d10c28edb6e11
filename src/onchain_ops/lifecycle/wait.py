"""Wait coordinator — poll a resolver until a terminal state or a deadline.

The clock and the delay primitive are injected, so tests can drive the loop
with a fake clock and an instant sleep::

    clock = FakeClock()
    waiter = WaitCoordinator(clock=clock, sleep=clock.sleep)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from onchain_ops.errors.chain_errors import OperationTimeout

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from onchain_ops.lifecycle.status import LifecycleState
    from onchain_ops.metrics.collector import OperationMetrics

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 0.2
DEFAULT_TIMEOUT_SECONDS = 10.0


def _validate(interval_seconds: float, timeout_seconds: float) -> None:
    if interval_seconds <= 0:
        raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
    if timeout_seconds < 0:
        raise ValueError(f"timeout_seconds must not be negative, got {timeout_seconds}")


class WaitCoordinator:
    """Blocks until a resolver reports a terminal state.

    Polls are strictly sequential. A resolver error aborts the wait and
    propagates unchanged. The coordinator never touches the operation
    record; callers refresh whatever they derive from the state.
    """

    def __init__(
        self,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        metrics: OperationMetrics | None = None,
    ) -> None:
        _validate(interval_seconds, timeout_seconds)
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._clock = clock
        self._sleep = sleep
        self._metrics = metrics

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def wait(
        self,
        resolve: Callable[[], Awaitable[LifecycleState]],
        *,
        operation_id: str,
        interval_seconds: float | None = None,
        timeout_seconds: float | None = None,
        is_terminal: Callable[[LifecycleState], bool] | None = None,
    ) -> LifecycleState:
        """Poll ``resolve`` until it returns a terminal state.

        Args:
            resolve: Zero-argument coroutine function returning the current state.
            operation_id: Identifies the operation in logs and timeout errors.
            interval_seconds: Delay between polls (defaults to the coordinator's).
            timeout_seconds: Deadline measured from the first poll.
            is_terminal: Terminal-state predicate; defaults to ``state.is_terminal``.

        Returns:
            The first terminal state observed.

        Raises:
            OperationTimeout: If the deadline passes without a terminal state.
            DataSourceError: Propagated from ``resolve``.
        """
        interval = self._interval if interval_seconds is None else interval_seconds
        timeout = self._timeout if timeout_seconds is None else timeout_seconds
        _validate(interval, timeout)
        terminal = is_terminal or (lambda state: state.is_terminal)

        if self._metrics is not None:
            with self._metrics.track_wait():
                return await self._poll(resolve, operation_id, interval, timeout, terminal)
        return await self._poll(resolve, operation_id, interval, timeout, terminal)

    async def _poll(
        self,
        resolve: Callable[[], Awaitable[LifecycleState]],
        operation_id: str,
        interval: float,
        timeout: float,
        terminal: Callable[[LifecycleState], bool],
    ) -> LifecycleState:
        start = self._clock()
        polls = 0
        while self._clock() - start < timeout:
            state = await resolve()
            polls += 1
            logger.debug("operation %s poll %d: %s", operation_id, polls, state)
            if terminal(state):
                logger.info("operation %s reached %s after %d polls", operation_id, state, polls)
                return state
            await self._sleep(interval)

        elapsed = self._clock() - start
        logger.info("operation %s timed out after %.2fs (%d polls)", operation_id, elapsed, polls)
        if self._metrics is not None:
            self._metrics.record_wait_timeout()
        raise OperationTimeout(operation_id, elapsed, timeout)
