"""OpsError — base exception class for all onchain-ops errors."""

from __future__ import annotations


class OpsError(Exception):
    """Base error for all on-chain operation lifecycle failures.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "ops-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class InternalError(OpsError):
    """Missing collaborator or record handed to an engine component."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=500, code="internal-error")


class FieldAlreadySetError(OpsError):
    """A write-once record field was given a different value."""

    def __init__(self, field: str, current: str, attempted: str) -> None:
        super().__init__(
            f"{field} already set to {current!r}, refusing {attempted!r}",
            status_code=409,
            code="field-already-set",
        )
        self.field = field
        self.current = current
        self.attempted = attempted
