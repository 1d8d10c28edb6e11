"""Tests for the wait coordinator, driven by a fake clock and instant sleep."""

from __future__ import annotations

import pytest

from onchain_ops.errors.chain_errors import DataSourceError, OperationTimeout
from onchain_ops.lifecycle.status import LifecycleState
from onchain_ops.lifecycle.wait import WaitCoordinator
from onchain_ops.metrics.collector import OperationMetrics
from tests.helpers import FakeClock


def scripted(*states: LifecycleState | Exception):
    """Resolver returning ``states`` in order, repeating the last one."""
    calls: list[int] = []

    async def resolve() -> LifecycleState:
        index = min(len(calls), len(states) - 1)
        calls.append(index)
        state = states[index]
        if isinstance(state, Exception):
            raise state
        return state

    resolve.calls = calls  # type: ignore[attr-defined]
    return resolve


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_defaults(self) -> None:
        waiter = WaitCoordinator()
        assert waiter.interval_seconds == 0.2
        assert waiter.timeout_seconds == 10.0

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError, match="interval"):
            WaitCoordinator(interval_seconds=0)

    def test_rejects_negative_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout"):
            WaitCoordinator(timeout_seconds=-1)

    async def test_rejects_bad_override(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        with pytest.raises(ValueError):
            await waiter.wait(
                scripted(LifecycleState.COMPLETE), operation_id="op", interval_seconds=-1
            )


# ---------------------------------------------------------------------------
# Terminal states
# ---------------------------------------------------------------------------


class TestTerminal:
    async def test_returns_immediately_when_terminal(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.COMPLETE)
        assert await waiter.wait(resolve, operation_id="op-1") == LifecycleState.COMPLETE
        assert len(resolve.calls) == 1
        assert fake_clock.sleeps == []

    async def test_polls_until_complete(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(
            LifecycleState.PENDING,
            LifecycleState.BROADCAST,
            LifecycleState.BROADCAST,
            LifecycleState.COMPLETE,
        )
        assert await waiter.wait(resolve, operation_id="op-1") == LifecycleState.COMPLETE
        assert len(resolve.calls) == 4
        assert fake_clock.sleeps == [0.2, 0.2, 0.2]

    async def test_returns_failed(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.BROADCAST, LifecycleState.FAILED)
        assert await waiter.wait(resolve, operation_id="op-1") == LifecycleState.FAILED

    async def test_custom_terminal_predicate(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.PENDING, LifecycleState.BROADCAST)
        state = await waiter.wait(
            resolve,
            operation_id="op-1",
            is_terminal=lambda s: s == LifecycleState.BROADCAST,
        )
        assert state == LifecycleState.BROADCAST

    async def test_interval_override(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.PENDING, LifecycleState.COMPLETE)
        await waiter.wait(resolve, operation_id="op-1", interval_seconds=1.5)
        assert fake_clock.sleeps == [1.5]


# ---------------------------------------------------------------------------
# Timeout
# ---------------------------------------------------------------------------


class TestTimeout:
    async def test_times_out_within_one_interval(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(
            interval_seconds=0.25, timeout_seconds=1.0, clock=fake_clock, sleep=fake_clock.sleep
        )
        start = fake_clock()
        with pytest.raises(OperationTimeout) as exc_info:
            await waiter.wait(scripted(LifecycleState.PENDING), operation_id="op-9")
        elapsed = fake_clock() - start
        assert 1.0 <= elapsed < 1.0 + 0.25
        assert exc_info.value.operation_id == "op-9"
        assert exc_info.value.elapsed == pytest.approx(elapsed)
        assert exc_info.value.timeout_seconds == 1.0
        assert "op-9" in str(exc_info.value)

    @pytest.mark.parametrize(
        ("interval", "timeout"), [(0.25, 10.0), (0.75, 2.0), (1.0, 3.0), (0.125, 0.5)]
    )
    async def test_never_early(self, interval: float, timeout: float) -> None:
        clock = FakeClock()
        waiter = WaitCoordinator(interval, timeout, clock=clock, sleep=clock.sleep)
        with pytest.raises(OperationTimeout) as exc_info:
            await waiter.wait(scripted(LifecycleState.BROADCAST), operation_id="op")
        assert timeout <= exc_info.value.elapsed < timeout + interval

    async def test_zero_timeout_never_polls(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(timeout_seconds=0, clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.COMPLETE)
        with pytest.raises(OperationTimeout):
            await waiter.wait(resolve, operation_id="op")
        assert resolve.calls == []

    async def test_timeout_counted(self, fake_clock: FakeClock) -> None:
        metrics = OperationMetrics()
        waiter = WaitCoordinator(
            timeout_seconds=1.0, clock=fake_clock, sleep=fake_clock.sleep, metrics=metrics
        )
        with pytest.raises(OperationTimeout):
            await waiter.wait(scripted(LifecycleState.PENDING), operation_id="op")
        assert metrics.registry.get_sample_value("onchain_ops_wait_timeouts_total") == 1.0
        assert metrics.registry.get_sample_value("onchain_ops_wait_histogram_count") == 1.0


# ---------------------------------------------------------------------------
# Resolver errors
# ---------------------------------------------------------------------------


class TestResolverErrors:
    async def test_error_aborts_wait(self, fake_clock: FakeClock) -> None:
        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        resolve = scripted(LifecycleState.PENDING, DataSourceError("boom"), LifecycleState.COMPLETE)
        with pytest.raises(DataSourceError, match="boom"):
            await waiter.wait(resolve, operation_id="op")
        assert len(resolve.calls) == 2

    async def test_sequential_polls(self, fake_clock: FakeClock) -> None:
        in_flight = 0
        max_in_flight = 0
        states = iter([LifecycleState.PENDING] * 3 + [LifecycleState.COMPLETE])

        async def resolve() -> LifecycleState:
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await fake_clock.sleep(0)
            in_flight -= 1
            return next(states)

        waiter = WaitCoordinator(clock=fake_clock, sleep=fake_clock.sleep)
        assert await waiter.wait(resolve, operation_id="op") == LifecycleState.COMPLETE
        assert max_in_flight == 1
