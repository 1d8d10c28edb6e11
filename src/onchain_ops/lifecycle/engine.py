"""Lifecycle engine — shared collaborators for every operation.

One engine owns the status resolver, the wait coordinator and the amount
normalizer, and hands out :class:`Operation` objects for server snapshots
of any kind.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

from onchain_ops.amounts.normalizer import AmountNormalizer
from onchain_ops.errors.definitions import ErrDataSourceMissing, ErrOperationModelMissing
from onchain_ops.lifecycle.kinds import STAKING_OPERATION, TRADE, TRANSFER
from onchain_ops.lifecycle.operation import Operation
from onchain_ops.lifecycle.record import OperationModel, OperationRecord
from onchain_ops.lifecycle.status import StatusResolver
from onchain_ops.lifecycle.wait import WaitCoordinator

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from decimal import Decimal

    from onchain_ops.config.settings import AppConfig
    from onchain_ops.lifecycle.kinds import OperationKind
    from onchain_ops.lifecycle.status import DataSource, LifecycleState
    from onchain_ops.metrics.collector import OperationMetrics


class LifecycleEngine:
    """Factory and service layer for on-chain operations.

    Usage::

        node = NodeService(config.node)
        await node.connect()
        engine = LifecycleEngine(config, node)
        transfer = engine.transfer(api_response)
        state = await transfer.wait()
    """

    def __init__(
        self,
        config: AppConfig,
        data_source: DataSource,
        *,
        metrics: OperationMetrics | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Application configuration (wait defaults, networks).
            data_source: Blockchain data source shared by all operations.
            metrics: Optional metrics sink.
            clock: Monotonic clock for wait deadlines.
            sleep: Delay primitive between polls.

        Raises:
            InternalError: If ``data_source`` is missing.
        """
        if data_source is None:
            raise ErrDataSourceMissing
        self._config = config
        self._resolver = StatusResolver(data_source, metrics=metrics)
        self._waiter = WaitCoordinator(
            config.wait.interval_seconds,
            config.wait.timeout_seconds,
            clock=clock,
            sleep=sleep,
            metrics=metrics,
        )
        self._normalizer = AmountNormalizer.from_networks(config.networks)

    @property
    def resolver(self) -> StatusResolver:
        return self._resolver

    @property
    def waiter(self) -> WaitCoordinator:
        return self._waiter

    @property
    def normalizer(self) -> AmountNormalizer:
        return self._normalizer

    # ------------------------------------------------------------------
    # Operation factories
    # ------------------------------------------------------------------

    def operation(
        self,
        model: OperationRecord | OperationModel | dict[str, Any],
        kind: OperationKind = TRANSFER,
    ) -> Operation:
        """Wrap a server snapshot in an :class:`Operation`.

        Raises:
            InternalError: If ``model`` is missing.
            pydantic.ValidationError: If the snapshot is invalid.
        """
        if model is None:
            raise ErrOperationModelMissing
        if isinstance(model, OperationRecord):
            record = model
        elif isinstance(model, OperationModel):
            record = OperationRecord(model, kind)
        else:
            record = OperationRecord.from_dict(model, kind)
        return Operation(
            record,
            self._resolver,
            waiter=self._waiter,
            normalizer=self._normalizer,
            network=self._config.network(record.network_id),
        )

    def transfer(self, model: OperationModel | dict[str, Any]) -> Operation:
        return self.operation(model, TRANSFER)

    def trade(self, model: OperationModel | dict[str, Any]) -> Operation:
        return self.operation(model, TRADE)

    def staking_operation(self, model: OperationModel | dict[str, Any]) -> Operation:
        return self.operation(model, STAKING_OPERATION)

    # ------------------------------------------------------------------
    # Record-level API
    # ------------------------------------------------------------------

    async def resolve_status(self, record: OperationRecord) -> LifecycleState:
        """Resolve the lifecycle state of a record.

        Raises:
            DataSourceError: If the data source query fails.
        """
        return await self._resolver.resolve(record.transaction_hash)

    async def wait_for_terminal(
        self,
        record: OperationRecord,
        interval_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ) -> LifecycleState:
        """Block until ``record`` reaches a terminal state.

        Raises:
            OperationTimeout: If the deadline passes first.
            DataSourceError: If a poll fails.
        """
        return await self.operation(record).wait(interval_seconds, timeout_seconds)

    def to_display_amount(self, record: OperationRecord) -> int | Decimal:
        return self._normalizer.to_display_units(record.amount, record.asset_id, record.network_id)
