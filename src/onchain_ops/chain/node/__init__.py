"""Node — JSON-RPC transaction and receipt lookups."""

from onchain_ops.chain.node.models import OnchainTransaction, TransactionReceipt
from onchain_ops.chain.node.service import NodeService

__all__ = ["NodeService", "OnchainTransaction", "TransactionReceipt"]
