"""Lifecycle — decode, sign, resolve and wait on on-chain operations."""

from onchain_ops.lifecycle.engine import LifecycleEngine
from onchain_ops.lifecycle.kinds import STAKING_OPERATION, TRADE, TRANSFER, OperationKind
from onchain_ops.lifecycle.operation import Operation
from onchain_ops.lifecycle.record import OperationModel, OperationRecord
from onchain_ops.lifecycle.status import DataSource, LifecycleState, StatusResolver
from onchain_ops.lifecycle.wait import WaitCoordinator

__all__ = [
    "STAKING_OPERATION",
    "TRADE",
    "TRANSFER",
    "DataSource",
    "LifecycleEngine",
    "LifecycleState",
    "Operation",
    "OperationKind",
    "OperationModel",
    "OperationRecord",
    "StatusResolver",
    "WaitCoordinator",
]
