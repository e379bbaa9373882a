"""
EIP-191 signed data: version 0x00 (intended validator) and 0x45 (personal_sign).
"""

from __future__ import annotations

from ..curves._backend import CryptoBackend, resolve_backend
from ..curves.address import to_address_bytes
from ..errors import SchemaMismatchError, SchemeMismatchError

_VALIDATOR_PREFIX = b"\x19\x00"
_PERSONAL_PREFIX = b"\x19Ethereum Signed Message:\n"

# application data slot of the validator form
VALIDATOR_DATA_SIZE = 32


def eip191_validator_digest(
    validator: bytes | str,
    data: bytes,
    *,
    backend: CryptoBackend | None = None,
) -> bytes:
    """
    keccak256(0x19 || 0x00 || validator || data).

    data is the caller's pre-hashed application data and must be exactly
    32 bytes; nothing is hashed on the caller's behalf.

    Args:
        validator: Intended validator address (20 bytes or hex string).
        data: 32 bytes of application data.

    Returns:
        32-byte digest.
    """
    try:
        validator_bytes = to_address_bytes(validator)
    except SchemaMismatchError as exc:
        raise SchemeMismatchError(f"validator form needs a 20-byte address: {exc}") from exc
    if not isinstance(data, (bytes, bytearray)):
        raise SchemeMismatchError("validator form data must be bytes")
    if len(data) != VALIDATOR_DATA_SIZE:
        raise SchemeMismatchError(
            f"validator form data must be {VALIDATOR_DATA_SIZE} bytes, got {len(data)}"
        )
    return resolve_backend(backend).keccak256(
        _VALIDATOR_PREFIX + validator_bytes + bytes(data)
    )


def eip191_personal_digest(
    message: bytes | str, *, backend: CryptoBackend | None = None
) -> bytes:
    """keccak256("\\x19Ethereum Signed Message:\\n" || len(message) || message); str is UTF-8 encoded."""
    if isinstance(message, str):
        message = message.encode("utf-8")
    elif not isinstance(message, (bytes, bytearray)):
        raise SchemeMismatchError("personal_sign message must be bytes or str")
    message = bytes(message)
    return resolve_backend(backend).keccak256(
        _PERSONAL_PREFIX + str(len(message)).encode("ascii") + message
    )


__all__: tuple[str, ...] = (
    "VALIDATOR_DATA_SIZE",
    "eip191_personal_digest",
    "eip191_validator_digest",
)
