"""Operation — the lifecycle facade a caller holds for one operation.

Binds an :class:`OperationRecord` to the shared resolver, wait coordinator
and amount normalizer. The same class serves every operation kind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from onchain_ops.amounts.normalizer import AmountNormalizer, format_amount
from onchain_ops.errors.definitions import ErrOperationModelMissing, ErrResolverMissing
from onchain_ops.lifecycle.wait import WaitCoordinator

if TYPE_CHECKING:
    from decimal import Decimal

    from onchain_ops.codec.payload import SignedTransaction, Signer, StructuredTransaction
    from onchain_ops.config.settings import NetworkConfig
    from onchain_ops.lifecycle.record import OperationRecord
    from onchain_ops.lifecycle.status import LifecycleState, StatusResolver

logger = logging.getLogger(__name__)


class Operation:
    """A transfer, trade or staking operation moving through its lifecycle.

    Usage::

        op = engine.transfer(model_dict)
        op.sign(signer)
        state = await op.wait(timeout_seconds=30)
    """

    def __init__(
        self,
        record: OperationRecord,
        resolver: StatusResolver,
        *,
        waiter: WaitCoordinator | None = None,
        normalizer: AmountNormalizer | None = None,
        network: NetworkConfig | None = None,
    ) -> None:
        """Initialize the operation.

        Args:
            record: The operation record.
            resolver: Status resolver bound to a data source.
            waiter: Wait coordinator; a default one is created if omitted.
            normalizer: Amount normalizer; without one amounts stay atomic.
            network: Network settings used for explorer links.

        Raises:
            InternalError: If ``record`` or ``resolver`` is missing.
        """
        if record is None:
            raise ErrOperationModelMissing
        if resolver is None:
            raise ErrResolverMissing
        self._record = record
        self._resolver = resolver
        self._waiter = waiter or WaitCoordinator()
        self._normalizer = normalizer or AmountNormalizer()
        self._network = network

    @property
    def record(self) -> OperationRecord:
        return self._record

    @property
    def id(self) -> str:
        return self._record.operation_id

    @property
    def transaction_hash(self) -> str | None:
        return self._record.transaction_hash

    # ------------------------------------------------------------------
    # Payload and signing
    # ------------------------------------------------------------------

    def transaction(self) -> StructuredTransaction:
        """Return the decoded unsigned transaction (decoded once, then cached)."""
        return self._record.decoded_transaction

    def sign(self, signer: Signer) -> SignedTransaction:
        """Sign the decoded transaction and attach the result.

        Signer errors propagate unchanged.
        """
        signed = signer.sign(self.transaction())
        self.set_signed_transaction(signed)
        return signed

    def set_signed_transaction(self, signed: SignedTransaction) -> None:
        self._record.attach_signed_transaction(signed)
        logger.debug("operation %s signed", self.id)

    def set_transaction_hash(self, transaction_hash: str) -> None:
        """Attach the hash observed after broadcast."""
        self._record.set_transaction_hash(transaction_hash)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def status(self) -> LifecycleState:
        """Resolve the current lifecycle state from the data source.

        Raises:
            DataSourceError: If the data source query fails.
        """
        return await self._resolver.resolve(self._record.transaction_hash)

    async def wait(
        self,
        interval_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ) -> LifecycleState:
        """Block until the operation completes or fails.

        Raises:
            OperationTimeout: If no terminal state is seen in time.
            DataSourceError: If a poll fails.
        """
        return await self._waiter.wait(
            self.status,
            operation_id=self.id,
            interval_seconds=interval_seconds,
            timeout_seconds=timeout_seconds,
            is_terminal=self._record.kind.is_terminal,
        )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def display_amount(self) -> int | Decimal:
        """Amount in display units (native assets) or atomic units (tokens)."""
        return self._normalizer.to_display_units(
            self._record.amount, self._record.asset_id, self._record.network_id
        )

    def transaction_link(self) -> str | None:
        """Block explorer link for the transaction, if hash and explorer are known."""
        tx_hash = self._record.transaction_hash
        if not tx_hash or self._network is None or not self._network.explorer_url:
            return None
        return f"{self._network.explorer_url.rstrip('/')}/tx/{tx_hash}"

    async def summary(self) -> str:
        """Single-line description including the current status."""
        state = await self.status()
        return self._describe(state.value)

    def _describe(self, status: str | None) -> str:
        record = self._record
        parts = [
            f"{record.kind.id_key}: '{record.operation_id}'",
            f"networkId: '{record.network_id}'",
            f"fromAddressId: '{record.source_address_id}'",
            f"destinationAddressId: '{record.destination_address_id}'",
            f"assetId: '{record.asset_id}'",
            f"amount: '{format_amount(self.display_amount())}'",
            f"transactionHash: '{record.transaction_hash}'",
            f"transactionLink: '{self.transaction_link()}'",
        ]
        if status is not None:
            parts.append(f"status: '{status}'")
        return f"{record.kind.label}{{{', '.join(parts)}}}"

    def __repr__(self) -> str:
        return self._describe(None)
