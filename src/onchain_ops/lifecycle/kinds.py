"""Operation kinds — the small capability set that varies per operation.

Transfers, trades and staking operations share the payload/sign/poll/wait
lifecycle. A kind only supplies what differs: labels, the payload decoder
and which states end the lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from onchain_ops.codec.payload import decode_payload
from onchain_ops.lifecycle.status import TERMINAL_STATES, LifecycleState

if TYPE_CHECKING:
    from collections.abc import Callable

    from onchain_ops.codec.payload import StructuredTransaction


@dataclass(frozen=True)
class OperationKind:
    """Per-kind parameters of the lifecycle engine.

    Attributes:
        name: Machine name (``"transfer"``).
        label: Display name used in summaries (``"Transfer"``).
        id_key: Id key used in summaries (``"transferId"``).
        decode: Unsigned payload decoder.
        terminal_states: States after which polling stops.
    """

    name: str
    label: str
    id_key: str
    decode: Callable[[str], StructuredTransaction] = decode_payload
    terminal_states: frozenset[LifecycleState] = field(default=TERMINAL_STATES)

    def is_terminal(self, state: LifecycleState) -> bool:
        return state in self.terminal_states


TRANSFER = OperationKind(name="transfer", label="Transfer", id_key="transferId")
TRADE = OperationKind(name="trade", label="Trade", id_key="tradeId")
STAKING_OPERATION = OperationKind(
    name="staking_operation",
    label="StakingOperation",
    id_key="stakingOperationId",
)

KINDS = {kind.name: kind for kind in (TRANSFER, TRADE, STAKING_OPERATION)}
