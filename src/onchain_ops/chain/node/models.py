"""Node data models — OnchainTransaction, TransactionReceipt.

Data classes for the two JSON-RPC results the status resolver reads:
``eth_getTransactionByHash`` and ``eth_getTransactionReceipt``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _quantity(raw: Any) -> int | None:
    """Parse a JSON-RPC quantity (``"0x1a"`` or int) into an int."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw)
    return int(text, 16) if text[:2].lower() == "0x" else int(text)


# ---------------------------------------------------------------------------
# OnchainTransaction: eth_getTransactionByHash
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OnchainTransaction:
    """A transaction as seen by the node.

    Attributes:
        hash: Transaction hash (hex).
        block_hash: Hash of the including block, ``None`` while unmined.
        block_number: Number of the including block, ``None`` while unmined.
    """

    hash: str
    block_hash: str | None = None
    block_number: int | None = None

    @property
    def is_mined(self) -> bool:
        """Whether the node reports a block reference for the transaction."""
        return bool(self.block_hash)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OnchainTransaction:
        """Create from a JSON-RPC transaction object."""
        return cls(
            hash=data.get("hash", ""),
            block_hash=data.get("blockHash") or None,
            block_number=_quantity(data.get("blockNumber")),
        )


# ---------------------------------------------------------------------------
# TransactionReceipt: eth_getTransactionReceipt
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransactionReceipt:
    """Execution receipt of a mined transaction.

    Attributes:
        transaction_hash: Transaction hash (hex).
        status: 1 on success, 0 on revert, ``None`` for pre-Byzantium receipts.
        block_hash: Hash of the including block.
        gas_used: Gas consumed by execution.
    """

    transaction_hash: str
    status: int | None = None
    block_hash: str | None = None
    gas_used: int | None = None

    @property
    def success(self) -> bool:
        return self.status == 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransactionReceipt:
        """Create from a JSON-RPC receipt object."""
        return cls(
            transaction_hash=data.get("transactionHash", ""),
            status=_quantity(data.get("status")),
            block_hash=data.get("blockHash") or None,
            gas_used=_quantity(data.get("gasUsed")),
        )
