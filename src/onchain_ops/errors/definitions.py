"""Pre-defined error instances raised by the lifecycle engine."""

from __future__ import annotations

from onchain_ops.errors.ops_errors import InternalError

# -- Construction ----------------------------------------------------------

ErrOperationModelMissing = InternalError("operation model cannot be empty")
ErrDataSourceMissing = InternalError("blockchain data source cannot be empty")
ErrResolverMissing = InternalError("status resolver cannot be empty")
