"""
Crypto primitive boundary: keccak256 and secp256k1 recovery.

picosign never does curve arithmetic itself. Everything goes through a
CryptoBackend; CoincurveBackend (libsecp256k1 via coincurve, keccak via
pycryptodome) is the production implementation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache

from coincurve import PrivateKey, PublicKey

from ..errors import RecoveryFailureError
from ..hashes import keccak256

logger = logging.getLogger(__name__)


class CryptoBackend(ABC):
    """Hash and curve primitives consumed by the digest builder and the recoverer."""

    @abstractmethod
    def keccak256(self, data: bytes) -> bytes:
        """32-byte Keccak-256 digest of data."""

    @abstractmethod
    def recover_public_key(
        self, msg_hash: bytes, r: int, s: int, recovery_id: int
    ) -> bytes:
        """
        Recover the public key that produced (r, s) over msg_hash.

        Returns the 64-byte uncompressed point (x || y, no 0x04 prefix).
        Raises RecoveryFailureError if no point matches.
        """

    @abstractmethod
    def public_key(self, private_key: bytes) -> bytes:
        """64-byte uncompressed public key (x || y) for a 32-byte private key."""

    @abstractmethod
    def sign_recoverable(
        self, private_key: bytes, msg_hash: bytes
    ) -> tuple[int, int, int]:
        """Sign a 32-byte hash; returns (r, s, recovery_id) with recovery_id in {0, 1}."""


class CoincurveBackend(CryptoBackend):
    """libsecp256k1 (coincurve) for the curve, pycryptodome for keccak."""

    def keccak256(self, data: bytes) -> bytes:
        return keccak256(data)

    def recover_public_key(
        self, msg_hash: bytes, r: int, s: int, recovery_id: int
    ) -> bytes:
        if recovery_id not in (0, 1, 2, 3):
            raise RecoveryFailureError(f"recovery id {recovery_id} out of range")
        sig = r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([recovery_id])
        try:
            pub = PublicKey.from_signature_and_message(sig, msg_hash, hasher=None)
        except ValueError as exc:
            logger.debug("libsecp256k1 recovery failed: %s", exc)
            raise RecoveryFailureError(
                f"no public key recoverable for recovery id {recovery_id}"
            ) from exc
        return pub.format(compressed=False)[1:]

    def public_key(self, private_key: bytes) -> bytes:
        if len(private_key) != 32:
            raise ValueError("private_key must be 32 bytes")
        return PrivateKey(private_key).public_key.format(compressed=False)[1:]

    def sign_recoverable(
        self, private_key: bytes, msg_hash: bytes
    ) -> tuple[int, int, int]:
        if len(private_key) != 32 or len(msg_hash) != 32:
            raise ValueError("private_key and msg_hash must be 32 bytes")
        # RFC 6979 nonce; libsecp256k1 always emits low-s
        sig = PrivateKey(private_key).sign_recoverable(msg_hash, hasher=None)
        r = int.from_bytes(sig[:32], "big")
        s = int.from_bytes(sig[32:64], "big")
        return (r, s, sig[64])


@lru_cache(maxsize=None)
def default_backend() -> CryptoBackend:
    """Process-wide CoincurveBackend (stateless, safe to share across threads)."""
    return CoincurveBackend()


def resolve_backend(backend: CryptoBackend | None) -> CryptoBackend:
    return default_backend() if backend is None else backend


__all__: tuple[str, ...] = (
    "CoincurveBackend",
    "CryptoBackend",
    "default_backend",
    "resolve_backend",
)
