"""Shared builders and fakes for the onchain-ops test suite."""

from __future__ import annotations

import json
from typing import Any

from onchain_ops.chain.node.models import OnchainTransaction, TransactionReceipt

TX_HASH = "0x" + "ab" * 32
BLOCK_HASH = "0x" + "cd" * 32

PAYLOAD_FIELDS: dict[str, Any] = {
    "chainId": 84532,
    "nonce": 7,
    "maxPriorityFeePerGas": "0x59682f00",
    "maxFeePerGas": "0x59682f3c",
    "gas": 21000,
    "to": "0x4675C7e5BaAFBFFbca748158bEcBA61ef3b0a263",
    "value": "2500000000000000000",
    "input": "0x",
}


def hex_payload(fields: dict[str, Any] | None = None, **overrides: Any) -> str:
    """Hex-encode a JSON payload the way the creation service does."""
    doc = dict(PAYLOAD_FIELDS if fields is None else fields)
    doc.update(overrides)
    return json.dumps(doc).encode("utf-8").hex()


def operation_dict(**overrides: Any) -> dict[str, Any]:
    """A transfer snapshot as returned by the creation API."""
    data: dict[str, Any] = {
        "transfer_id": "transfer-1",
        "network_id": "base-sepolia",
        "wallet_id": "wallet-1",
        "address_id": "0x1111111111111111111111111111111111111111",
        "destination": "0x4675C7e5BaAFBFFbca748158bEcBA61ef3b0a263",
        "asset_id": "eth",
        "amount": "2500000000000000000",
        "unsigned_payload": hex_payload(),
    }
    data.update(overrides)
    return data


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is awaited."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedDataSource:
    """Data source answering from fixed tables, counting every query.

    ``transactions`` / ``receipts`` map hash -> object (or None). An
    exception instance as a value is raised instead of returned.
    """

    def __init__(
        self,
        transactions: dict[str, Any] | None = None,
        receipts: dict[str, Any] | None = None,
    ) -> None:
        self.transactions = transactions or {}
        self.receipts = receipts or {}
        self.calls: list[tuple[str, str]] = []

    async def get_transaction_by_hash(self, transaction_hash: str) -> OnchainTransaction | None:
        self.calls.append(("tx", transaction_hash))
        value = self.transactions.get(transaction_hash)
        if isinstance(value, Exception):
            raise value
        return value

    async def get_transaction_receipt(self, transaction_hash: str) -> TransactionReceipt | None:
        self.calls.append(("receipt", transaction_hash))
        value = self.receipts.get(transaction_hash)
        if isinstance(value, Exception):
            raise value
        return value


def mined(tx_hash: str = TX_HASH) -> OnchainTransaction:
    return OnchainTransaction(hash=tx_hash, block_hash=BLOCK_HASH, block_number=100)


def receipt(status: int | None, tx_hash: str = TX_HASH) -> TransactionReceipt:
    return TransactionReceipt(transaction_hash=tx_hash, status=status, block_hash=BLOCK_HASH)
