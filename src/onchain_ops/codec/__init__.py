"""Codec — unsigned payload decoding."""

from onchain_ops.codec.payload import (
    PayloadCodec,
    SignedTransaction,
    Signer,
    StructuredTransaction,
    decode_payload,
    encode_payload,
)

__all__ = [
    "PayloadCodec",
    "SignedTransaction",
    "Signer",
    "StructuredTransaction",
    "decode_payload",
    "encode_payload",
]
