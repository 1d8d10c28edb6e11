"""Unsigned payload codec — hex(JSON) <-> StructuredTransaction.

The operation-creation service hands out an EIP-1559 transaction as the
hex encoding of a UTF-8 JSON document::

    {"chainId": 84532, "nonce": 7, "maxPriorityFeePerGas": "0x59682f00",
     "maxFeePerGas": "0x59682f3c", "gas": 21000, "to": "0xabc...",
     "value": "2500000000000000000", "input": "0x"}

Numeric fields may arrive as JSON integers or as decimal / ``0x`` hex
strings. Every numeric field is held as a Python ``int``; floats are never
produced while parsing.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Protocol

from onchain_ops.errors.payload_errors import (
    InvalidPayloadEncoding,
    InvalidPayloadSchema,
    MalformedPayload,
)

_HEX_RE = re.compile(r"[0-9a-fA-F]*")

# uint256 tops out just above 1.15e77
_MAX_DIGITS = 77

# (wire name, attribute name)
_NUMERIC_FIELDS = (
    ("chainId", "chain_id"),
    ("nonce", "nonce"),
    ("maxPriorityFeePerGas", "max_priority_fee_per_gas"),
    ("maxFeePerGas", "max_fee_per_gas"),
    ("gas", "gas_limit"),
    ("value", "value"),
)
_STRING_FIELDS = (
    ("to", "to"),
    ("input", "data"),
)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StructuredTransaction:
    """Decoded unsigned transaction.

    Attributes:
        chain_id: EIP-155 chain id.
        nonce: Sender account nonce.
        max_priority_fee_per_gas: Tip per gas unit (wei).
        max_fee_per_gas: Fee cap per gas unit (wei).
        gas_limit: Gas limit (the payload's ``gas`` field).
        to: Recipient or contract address.
        value: Native value transferred (wei).
        data: Calldata hex (the payload's ``input`` field).
    """

    chain_id: int
    nonce: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    gas_limit: int
    to: str
    value: int
    data: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SignedTransaction:
    """What a signer hands back for a StructuredTransaction."""

    transaction: StructuredTransaction
    signed_payload: str
    transaction_hash: str | None = None


class Signer(Protocol):
    """Client-held key that signs a decoded transaction."""

    def sign(self, transaction: StructuredTransaction) -> SignedTransaction: ...


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _hex_to_bytes(hex_payload: str) -> bytes:
    body = hex_payload[2:] if hex_payload[:2].lower() == "0x" else hex_payload
    if not body:
        raise MalformedPayload("unsigned payload is empty")
    if len(body) % 2:
        raise MalformedPayload(f"unsigned payload has odd length ({len(body)} hex digits)")
    if not _HEX_RE.fullmatch(body):
        raise MalformedPayload("unsigned payload contains non-hex characters")
    return bytes.fromhex(body)


def _to_int(wire_name: str, raw: Any) -> int:
    """Coerce a JSON numeric field to an arbitrary-precision int."""
    if isinstance(raw, bool):
        raise InvalidPayloadSchema(f"field {wire_name!r} must be numeric", field=wire_name)
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, Decimal):
        if not raw.is_finite() or raw.adjusted() > _MAX_DIGITS:
            raise InvalidPayloadSchema(f"field {wire_name!r} is out of range", field=wire_name)
        if raw != raw.to_integral_value():
            raise InvalidPayloadSchema(
                f"field {wire_name!r} must be an integer, got {raw}", field=wire_name
            )
        value = int(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            value = int(text, 16) if text[:2].lower() == "0x" else int(text, 10)
        except ValueError:
            raise InvalidPayloadSchema(
                f"field {wire_name!r} is not a numeric string: {raw!r}", field=wire_name
            ) from None
    else:
        raise InvalidPayloadSchema(f"field {wire_name!r} must be numeric", field=wire_name)

    if value < 0:
        raise InvalidPayloadSchema(f"field {wire_name!r} must not be negative", field=wire_name)
    return value


def decode_payload(hex_payload: str) -> StructuredTransaction:
    """Decode a hex-encoded JSON unsigned payload.

    Args:
        hex_payload: Hex string, with or without a ``0x`` prefix.

    Returns:
        The structured transaction.

    Raises:
        MalformedPayload: Odd length, empty, or non-hex characters.
        InvalidPayloadEncoding: Bytes are not UTF-8 JSON.
        InvalidPayloadSchema: A required field is missing or mistyped.
    """
    if not isinstance(hex_payload, str):
        raise MalformedPayload("unsigned payload must be a hex string")

    raw = _hex_to_bytes(hex_payload)
    try:
        doc = json.loads(raw.decode("utf-8"), parse_float=Decimal)
    except UnicodeDecodeError as exc:
        raise InvalidPayloadEncoding(f"unsigned payload is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidPayloadEncoding(f"unable to decode unsigned payload JSON: {exc}") from exc
    except (ValueError, RecursionError) as exc:
        raise InvalidPayloadEncoding(f"unsigned payload JSON is out of bounds: {exc}") from exc

    if not isinstance(doc, dict):
        raise InvalidPayloadSchema("unsigned payload JSON must be an object")

    fields: dict[str, Any] = {}
    for wire_name, attr in _NUMERIC_FIELDS:
        if wire_name not in doc or doc[wire_name] is None:
            raise InvalidPayloadSchema(f"missing field {wire_name!r}", field=wire_name)
        fields[attr] = _to_int(wire_name, doc[wire_name])
    for wire_name, attr in _STRING_FIELDS:
        if wire_name not in doc or doc[wire_name] is None:
            raise InvalidPayloadSchema(f"missing field {wire_name!r}", field=wire_name)
        if not isinstance(doc[wire_name], str):
            raise InvalidPayloadSchema(f"field {wire_name!r} must be a string", field=wire_name)
        fields[attr] = doc[wire_name]

    return StructuredTransaction(**fields)


def encode_payload(transaction: StructuredTransaction) -> str:
    """Encode a transaction in the unsigned payload wire format (no ``0x``)."""
    doc: dict[str, Any] = {}
    for wire_name, attr in _NUMERIC_FIELDS:
        doc[wire_name] = getattr(transaction, attr)
    for wire_name, attr in _STRING_FIELDS:
        doc[wire_name] = getattr(transaction, attr)
    return json.dumps(doc, separators=(",", ":")).encode("utf-8").hex()


class PayloadCodec:
    """Injectable wrapper over :func:`decode_payload` / :func:`encode_payload`."""

    def decode(self, hex_payload: str) -> StructuredTransaction:
        return decode_payload(hex_payload)

    def encode(self, transaction: StructuredTransaction) -> str:
        return encode_payload(transaction)
