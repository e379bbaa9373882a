"""
secp256k1 signatures: the (r, s, v) value type and signer-address recovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import InvalidSignatureError, NonCanonicalSignatureError
from ._backend import CryptoBackend, resolve_backend
from .address import public_key_to_address, to_checksum_address

logger = logging.getLogger(__name__)

N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_N = N // 2

_V_OFFSET = 27


@dataclass(frozen=True)
class Signature:
    """
    ECDSA signature. v is stored in the Ethereum 27/28 convention; the
    recovery-id form 0/1 is accepted and normalized on construction.

    r and s are only checked to fit in 256 bits here; the [1, n-1] range and
    the low-s rule are enforced by recover_address.
    """

    r: int
    s: int
    v: int

    def __post_init__(self) -> None:
        for name in ("r", "s", "v"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSignatureError(f"{name} must be an int")
        if not (0 <= self.r < 1 << 256 and 0 <= self.s < 1 << 256):
            raise InvalidSignatureError("r and s must be 256-bit unsigned integers")
        if self.v in (0, 1):
            object.__setattr__(self, "v", self.v + _V_OFFSET)
        elif self.v not in (27, 28):
            raise InvalidSignatureError(f"v must be 27/28 (or 0/1), got {self.v}")

    @property
    def recovery_id(self) -> int:
        return self.v - _V_OFFSET

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        """Parse the 65-byte r || s || v layout."""
        if len(data) != 65:
            raise InvalidSignatureError(f"signature must be 65 bytes, got {len(data)}")
        return cls(
            int.from_bytes(data[:32], "big"),
            int.from_bytes(data[32:64], "big"),
            data[64],
        )

    @classmethod
    def from_hex(cls, text: str) -> Signature:
        try:
            data = bytes.fromhex(text[2:] if text.startswith("0x") else text)
        except ValueError as exc:
            raise InvalidSignatureError("signature is not hex") from exc
        return cls.from_bytes(data)

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])


@dataclass(frozen=True)
class RecoveryPolicy:
    """
    Signature acceptance policy.

    allow_high_s: accept s > n/2. Off by default; turn on only for legacy
    signers that do not normalize s.
    """

    allow_high_s: bool = False


DEFAULT_POLICY = RecoveryPolicy()


def check_signature(signature: Signature, policy: RecoveryPolicy = DEFAULT_POLICY) -> None:
    """Raise InvalidSignatureError unless r, s are in range and s satisfies the policy."""
    if not 1 <= signature.r < N:
        raise InvalidSignatureError("r out of range [1, n-1]")
    if not 1 <= signature.s < N:
        raise InvalidSignatureError("s out of range [1, n-1]")
    if signature.s > HALF_N and not policy.allow_high_s:
        logger.debug("rejecting high-s signature r=%#x", signature.r)
        raise NonCanonicalSignatureError("s > n/2 (non-canonical signature)")


def recover_public_key(
    digest: bytes,
    signature: Signature,
    *,
    policy: RecoveryPolicy = DEFAULT_POLICY,
    backend: CryptoBackend | None = None,
) -> bytes:
    """
    Recover the 64-byte public key (x || y) from a 32-byte digest and signature.

    Raises:
        InvalidSignatureError: bad digest length, r/s out of range, or high-s
            under the canonical policy.
        RecoveryFailureError: v selects no valid curve point.
    """
    if len(digest) != 32:
        raise InvalidSignatureError(f"digest must be 32 bytes, got {len(digest)}")
    check_signature(signature, policy)
    return resolve_backend(backend).recover_public_key(
        bytes(digest), signature.r, signature.s, signature.recovery_id
    )


def recover_address(
    digest: bytes,
    signature: Signature,
    *,
    policy: RecoveryPolicy = DEFAULT_POLICY,
    backend: CryptoBackend | None = None,
) -> bytes:
    """
    Recover the signer's 20-byte address from a digest and signature.

    The result identifies a key; it does not authorize anything. Compare it
    against the expected signer (see picosign.verify).

    Args:
        digest: 32-byte digest that was signed.
        signature: Signature (v in 27/28).
        policy: RecoveryPolicy; default rejects high-s.
        backend: CryptoBackend; default CoincurveBackend.

    Returns:
        20-byte address.
    """
    pub = recover_public_key(digest, signature, policy=policy, backend=backend)
    address = public_key_to_address(pub, backend=backend)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("recovered signer %s", to_checksum_address(address))
    return address


def sign_digest(
    private_key: bytes, digest: bytes, *, backend: CryptoBackend | None = None
) -> Signature:
    """
    Sign a 32-byte digest through the backend; returns a low-s Signature (v 27/28).
    """
    r, s, recid = resolve_backend(backend).sign_recoverable(private_key, digest)
    return Signature(r, s, recid)


def private_key_to_address(
    private_key: bytes, *, backend: CryptoBackend | None = None
) -> bytes:
    """20-byte address for a 32-byte private key."""
    return public_key_to_address(
        resolve_backend(backend).public_key(private_key), backend=backend
    )


__all__: tuple[str, ...] = (
    "DEFAULT_POLICY",
    "HALF_N",
    "N",
    "RecoveryPolicy",
    "Signature",
    "check_signature",
    "private_key_to_address",
    "recover_address",
    "recover_public_key",
    "sign_digest",
)
