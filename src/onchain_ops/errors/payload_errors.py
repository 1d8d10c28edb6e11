"""Unsigned payload decoding errors."""

from __future__ import annotations

from onchain_ops.errors.ops_errors import OpsError


class InvalidUnsignedPayload(OpsError):
    """The server-issued unsigned payload cannot be turned into a transaction."""

    def __init__(self, message: str, *, code: str = "invalid-unsigned-payload") -> None:
        super().__init__(message, status_code=400, code=code)


class MalformedPayload(InvalidUnsignedPayload):
    """Payload is not an even-length hex string."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="malformed-payload")


class InvalidPayloadEncoding(InvalidUnsignedPayload):
    """Payload bytes are not UTF-8 JSON."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="invalid-payload-encoding")


class InvalidPayloadSchema(InvalidUnsignedPayload):
    """Payload JSON is missing a field or has a field of the wrong type."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message, code="invalid-payload-schema")
        self.field = field
