"""Chain — blockchain data sources for status resolution."""

from onchain_ops.chain.node.service import NodeService

__all__ = ["NodeService"]
