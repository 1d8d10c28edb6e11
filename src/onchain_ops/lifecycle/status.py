"""Status resolution — derive a lifecycle state from the node's view of a hash.

    no hash ──────────────────────────────► PENDING
    hash, node has no tx ─────────────────► PENDING    (propagation delay)
    tx without block reference ───────────► BROADCAST
    tx in block, receipt status 1 ────────► COMPLETE
    tx in block, receipt status != 1 ─────► FAILED
    tx in block, no receipt yet ──────────► BROADCAST  (logged + counted)

Data source errors are not states; they propagate to the caller.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Protocol

from onchain_ops.errors.definitions import ErrDataSourceMissing

if TYPE_CHECKING:
    from onchain_ops.chain.node.models import OnchainTransaction, TransactionReceipt
    from onchain_ops.metrics.collector import OperationMetrics

logger = logging.getLogger(__name__)


class LifecycleState(enum.StrEnum):
    """Lifecycle state of an on-chain operation."""

    PENDING = "pending"
    BROADCAST = "broadcast"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can happen."""
        return self in (LifecycleState.COMPLETE, LifecycleState.FAILED)


TERMINAL_STATES = frozenset({LifecycleState.COMPLETE, LifecycleState.FAILED})


class DataSource(Protocol):
    """Read-only blockchain data source."""

    async def get_transaction_by_hash(self, transaction_hash: str) -> OnchainTransaction | None: ...

    async def get_transaction_receipt(self, transaction_hash: str) -> TransactionReceipt | None: ...


class StatusResolver:
    """Resolves a transaction hash into a :class:`LifecycleState`.

    Holds no mutable state, so one resolver may serve concurrent waits as
    long as the data source tolerates concurrent queries.
    """

    def __init__(self, data_source: DataSource, *, metrics: OperationMetrics | None = None) -> None:
        if data_source is None:
            raise ErrDataSourceMissing
        self._data_source = data_source
        self._metrics = metrics

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    async def resolve(self, transaction_hash: str | None) -> LifecycleState:
        """Resolve the lifecycle state of ``transaction_hash``.

        Args:
            transaction_hash: Hash of the broadcast transaction, if any.

        Returns:
            The derived lifecycle state.

        Raises:
            DataSourceError: If a data source query fails.
        """
        state = await self._resolve(transaction_hash)
        if self._metrics is not None:
            self._metrics.record_resolution(state.value)
        return state

    async def _resolve(self, transaction_hash: str | None) -> LifecycleState:
        if not transaction_hash:
            return LifecycleState.PENDING

        onchain = await self._data_source.get_transaction_by_hash(transaction_hash)
        if onchain is None:
            logger.debug("tx %s not visible to node yet", transaction_hash)
            return LifecycleState.PENDING
        if not onchain.block_hash:
            return LifecycleState.BROADCAST

        receipt = await self._data_source.get_transaction_receipt(transaction_hash)
        if receipt is None:
            logger.warning(
                "tx %s is in block %s but has no receipt; reporting broadcast",
                transaction_hash,
                onchain.block_hash,
            )
            if self._metrics is not None:
                self._metrics.record_receipt_missing()
            return LifecycleState.BROADCAST

        return LifecycleState.COMPLETE if receipt.success else LifecycleState.FAILED
