"""Signing schemas: EIP-191 (signed data), EIP-712 (Ethereum typed data)."""

from ._eip191 import eip191_personal_digest, eip191_validator_digest
from ._eip712 import (
    Domain,
    Field,
    TypeDescriptor,
    domain_separator,
    eip712_digest,
    eip712_hash_full_message,
    encode_data,
    encode_type,
    hash_struct,
    type_hash,
)
from .digest import Scheme, TypedPayload, build_digest

__all__: tuple[str, ...] = (
    "Domain",
    "Field",
    "Scheme",
    "TypeDescriptor",
    "TypedPayload",
    "build_digest",
    "domain_separator",
    "eip191_personal_digest",
    "eip191_validator_digest",
    "eip712_digest",
    "eip712_hash_full_message",
    "encode_data",
    "encode_type",
    "hash_struct",
    "type_hash",
)
