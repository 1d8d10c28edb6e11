"""Data-source and wait errors."""

from __future__ import annotations

from onchain_ops.errors.ops_errors import OpsError


class DataSourceError(OpsError):
    """Error from the blockchain node queried for transaction status."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="data-source-error")


class OperationTimeout(OpsError):
    """No terminal state was observed before the wait deadline.

    Attributes:
        operation_id: The operation that was being waited on.
        elapsed: Seconds spent waiting before giving up.
        timeout_seconds: The deadline that was exceeded.
    """

    def __init__(self, operation_id: str, elapsed: float, timeout_seconds: float) -> None:
        super().__init__(
            f"operation {operation_id} timed out after {elapsed:.2f}s "
            f"(timeout {timeout_seconds}s)",
            status_code=504,
            code="operation-timeout",
        )
        self.operation_id = operation_id
        self.elapsed = elapsed
        self.timeout_seconds = timeout_seconds
