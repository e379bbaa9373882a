"""
Digest builder: one entry point over the 0x19-prefixed signing schemes.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from typing import NamedTuple

from ..curves._backend import CryptoBackend
from ..errors import SchemeMismatchError
from ._eip191 import eip191_personal_digest, eip191_validator_digest
from ._eip712 import Domain, TypeDescriptor, eip712_digest


class Scheme(IntEnum):
    """Signing schemes, valued by their EIP-191 version byte."""

    VALIDATOR = 0x00
    EIP712 = 0x01
    PERSONAL = 0x45


class TypedPayload(NamedTuple):
    """EIP-712 message: its struct type and value."""

    type: TypeDescriptor
    value: Mapping[str, object]


def build_digest(
    scheme: Scheme | int,
    context: object,
    payload: object,
    *,
    backend: CryptoBackend | None = None,
) -> bytes:
    """
    Build the 32-byte digest to sign or recover against.

    scheme / context / payload:
        VALIDATOR  validator address (bytes or hex) / 32 bytes of application data
        PERSONAL   None / message bytes or str
        EIP712     Domain / TypedPayload(descriptor, value)

    Raises:
        SchemeMismatchError: context or payload does not fit the scheme.
    """
    try:
        scheme = Scheme(scheme)
    except ValueError as exc:
        raise SchemeMismatchError(f"unknown signing scheme {scheme!r}") from exc

    if scheme is Scheme.VALIDATOR:
        if context is None:
            raise SchemeMismatchError("validator form requires a validator address")
        return eip191_validator_digest(context, payload, backend=backend)

    if scheme is Scheme.PERSONAL:
        if context is not None:
            raise SchemeMismatchError("personal_sign takes no context")
        return eip191_personal_digest(payload, backend=backend)

    if not isinstance(context, Domain):
        raise SchemeMismatchError("EIP-712 requires a Domain context")
    try:
        descriptor, value = payload
    except (TypeError, ValueError) as exc:
        raise SchemeMismatchError(
            "EIP-712 payload must be a TypedPayload(type, value)"
        ) from exc
    if not isinstance(descriptor, TypeDescriptor):
        raise SchemeMismatchError("EIP-712 payload type must be a TypeDescriptor")
    return eip712_digest(context, descriptor, value, backend=backend)


__all__: tuple[str, ...] = ("Scheme", "TypedPayload", "build_digest")
