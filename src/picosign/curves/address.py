"""
Ethereum addresses. Internally an address is always 20 raw bytes; hex strings
are converted here, at the boundary, and nowhere else.
"""

from __future__ import annotations

from ..errors import SchemaMismatchError
from ..hashes import keccak256
from ._backend import CryptoBackend, resolve_backend


def to_address_bytes(address: bytes | bytearray | str) -> bytes:
    """
    Normalize an address to 20 raw bytes.

    Args:
        address: 20 bytes, or a hex string (with or without 0x, any case).

    Returns:
        20-byte address.
    """
    if isinstance(address, str):
        text = address[2:] if address[:2] in ("0x", "0X") else address
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise SchemaMismatchError(f"address {address!r} is not hex") from exc
    elif isinstance(address, (bytes, bytearray, memoryview)):
        raw = bytes(address)
    else:
        raise SchemaMismatchError(
            f"address must be bytes or hex str, got {type(address).__name__}"
        )
    if len(raw) != 20:
        raise SchemaMismatchError(f"address must be 20 bytes, got {len(raw)}")
    return raw


def public_key_to_address(
    public_key: bytes, *, backend: CryptoBackend | None = None
) -> bytes:
    """
    20-byte address from an uncompressed public key: keccak256(x || y)[12:].

    Accepts the 64-byte raw point or the 65-byte 0x04-prefixed form.
    """
    if len(public_key) == 65 and public_key[0] == 0x04:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError(f"expected 64-byte public key, got {len(public_key)}")
    return resolve_backend(backend).keccak256(public_key)[12:]


def to_checksum_address(address: bytes | str) -> str:
    """EIP-55 mixed-case rendering of an address (display only)."""
    hex_addr = to_address_bytes(address).hex()
    digest = keccak256(hex_addr.encode("ascii")).hex()
    return "0x" + "".join(
        ch.upper() if int(digest[i], 16) >= 8 else ch for i, ch in enumerate(hex_addr)
    )


__all__: tuple[str, ...] = (
    "public_key_to_address",
    "to_address_bytes",
    "to_checksum_address",
)
