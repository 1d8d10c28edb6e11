"""Operation record — one lifecycle instance of a transfer, trade or staking op.

Built once from the creation service's snapshot (:class:`OperationModel`).
Afterwards only two things change, each at most once: the signed payload
and the transaction hash.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from onchain_ops.errors.ops_errors import FieldAlreadySetError
from onchain_ops.lifecycle.kinds import TRANSFER
from onchain_ops.utils.memo import ComputeOnce

if TYPE_CHECKING:
    from onchain_ops.codec.payload import SignedTransaction, StructuredTransaction
    from onchain_ops.lifecycle.kinds import OperationKind


class OperationModel(BaseModel):
    """Server snapshot of an operation as returned by the creation API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    operation_id: str = Field(
        validation_alias=AliasChoices(
            "operation_id", "transfer_id", "trade_id", "staking_operation_id"
        ),
        min_length=1,
    )
    network_id: str
    wallet_id: str
    address_id: str
    destination: str = ""
    asset_id: str
    amount: int = Field(ge=0)
    unsigned_payload: str = Field(min_length=1)
    signed_payload: str | None = None
    transaction_hash: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        """Accept the API's decimal-string amounts without going through float."""
        if isinstance(value, str):
            text = value.strip()
            if not text.isdigit():
                raise ValueError(f"amount must be an integer string, got {value!r}")
            return int(text)
        return value


class OperationRecord:
    """Mutable-once view over an :class:`OperationModel`.

    ``signed_payload`` and ``transaction_hash`` are write-once: re-setting
    the same value is a no-op, a different value raises
    :class:`FieldAlreadySetError`. The decoded transaction is computed on
    first access and cached for the life of the record.
    """

    def __init__(self, model: OperationModel, kind: OperationKind = TRANSFER) -> None:
        self._model = model
        self._kind = kind
        self._signed_payload = model.signed_payload or None
        self._transaction_hash = model.transaction_hash or None
        self._signed_transaction: SignedTransaction | None = None
        self._decoded = ComputeOnce(lambda: kind.decode(model.unsigned_payload))

    @classmethod
    def from_dict(cls, data: dict[str, Any], kind: OperationKind = TRANSFER) -> OperationRecord:
        return cls(OperationModel.model_validate(data), kind)

    # -- Immutable fields --

    @property
    def kind(self) -> OperationKind:
        return self._kind

    @property
    def model(self) -> OperationModel:
        return self._model

    @property
    def operation_id(self) -> str:
        return self._model.operation_id

    @property
    def network_id(self) -> str:
        return self._model.network_id

    @property
    def wallet_id(self) -> str:
        return self._model.wallet_id

    @property
    def source_address_id(self) -> str:
        return self._model.address_id

    @property
    def destination_address_id(self) -> str:
        return self._model.destination

    @property
    def asset_id(self) -> str:
        return self._model.asset_id

    @property
    def amount(self) -> int:
        """Amount in atomic units."""
        return self._model.amount

    @property
    def unsigned_payload(self) -> str:
        return self._model.unsigned_payload

    # -- Write-once fields --

    @property
    def signed_payload(self) -> str | None:
        return self._signed_payload

    @property
    def transaction_hash(self) -> str | None:
        return self._transaction_hash

    @property
    def signed_transaction(self) -> SignedTransaction | None:
        return self._signed_transaction

    def set_signed_payload(self, signed_payload: str) -> None:
        self._signed_payload = self._set_once("signed_payload", self._signed_payload, signed_payload)

    def set_transaction_hash(self, transaction_hash: str) -> None:
        self._transaction_hash = self._set_once(
            "transaction_hash", self._transaction_hash, transaction_hash
        )

    def attach_signed_transaction(self, signed: SignedTransaction) -> None:
        """Record a signer's output: signed payload and, if known, the hash."""
        payload = self._set_once("signed_payload", self._signed_payload, signed.signed_payload)
        tx_hash = self._transaction_hash
        if signed.transaction_hash:
            tx_hash = self._set_once("transaction_hash", tx_hash, signed.transaction_hash)
        self._signed_payload = payload
        self._transaction_hash = tx_hash
        self._signed_transaction = signed

    @staticmethod
    def _set_once(name: str, current: str | None, value: str) -> str:
        if not value:
            raise ValueError(f"{name} cannot be empty")
        if current is not None and current != value:
            raise FieldAlreadySetError(name, current, value)
        return value

    # -- Derived --

    @property
    def decoded_transaction(self) -> StructuredTransaction:
        """Structured transaction decoded from the unsigned payload.

        Raises:
            InvalidUnsignedPayload: If the payload cannot be decoded.
        """
        return self._decoded.get()

    @property
    def decoded_cell(self) -> ComputeOnce[StructuredTransaction]:
        return self._decoded

    def __repr__(self) -> str:
        return (
            f"<OperationRecord kind={self._kind.name} id={self.operation_id} "
            f"hash={self._transaction_hash}>"
        )
