"""
Keccak-256 (original Keccak padding, not FIPS SHA3-256). Backed by pycryptodome.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak


def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 digest of data.

    Args:
        data: Bytes to hash.

    Returns:
        32-byte digest.
    """
    return _keccak.new(data=bytes(data), digest_bits=256).digest()


__all__: tuple[str, ...] = ("keccak256",)
