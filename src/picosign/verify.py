"""
Verifier: digest builder -> signature recoverer -> address comparison.
"""

from __future__ import annotations

import logging

from .curves._backend import CryptoBackend, resolve_backend
from .curves.address import to_address_bytes, to_checksum_address
from .curves.secp256k1 import DEFAULT_POLICY, RecoveryPolicy, Signature, recover_address
from .errors import InvalidSignatureError
from .signing.digest import Scheme, build_digest

logger = logging.getLogger(__name__)


def _as_signature(signature: Signature | bytes | str) -> Signature:
    if isinstance(signature, Signature):
        return signature
    if isinstance(signature, str):
        return Signature.from_hex(signature)
    if isinstance(signature, (bytes, bytearray, memoryview)):
        return Signature.from_bytes(bytes(signature))
    raise InvalidSignatureError(
        f"signature must be a Signature, 65 bytes or hex str, got {type(signature).__name__}"
    )


class Verifier:
    """
    Recovers and checks signers for EIP-191 / EIP-712 payloads.

    Stateless apart from its backend and policy, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        backend: CryptoBackend | None = None,
        policy: RecoveryPolicy = DEFAULT_POLICY,
    ) -> None:
        self.backend = resolve_backend(backend)
        self.policy = policy

    def digest(self, scheme: Scheme | int, context: object, payload: object) -> bytes:
        return build_digest(scheme, context, payload, backend=self.backend)

    def recover(
        self,
        scheme: Scheme | int,
        context: object,
        payload: object,
        signature: Signature | bytes | str,
    ) -> bytes:
        """20-byte address of whoever signed payload under scheme/context."""
        return recover_address(
            self.digest(scheme, context, payload),
            _as_signature(signature),
            policy=self.policy,
            backend=self.backend,
        )

    def verify(
        self,
        scheme: Scheme | int,
        context: object,
        payload: object,
        signature: Signature | bytes | str,
        expected_address: bytes | str,
    ) -> bool:
        """
        True if signature over payload was made by expected_address.

        Returns False only for a well-formed signature by someone else;
        malformed input raises (SchemeMismatchError, SchemaMismatchError,
        InvalidSignatureError, RecoveryFailureError).
        """
        expected = to_address_bytes(expected_address)
        recovered = self.recover(scheme, context, payload, signature)
        if recovered != expected:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "signer mismatch: expected %s, recovered %s",
                    to_checksum_address(expected),
                    to_checksum_address(recovered),
                )
            return False
        return True


def recover(
    scheme: Scheme | int,
    context: object,
    payload: object,
    signature: Signature | bytes | str,
    *,
    policy: RecoveryPolicy = DEFAULT_POLICY,
    backend: CryptoBackend | None = None,
) -> bytes:
    """Verifier(backend, policy).recover(...)."""
    return Verifier(backend, policy).recover(scheme, context, payload, signature)


def verify(
    scheme: Scheme | int,
    context: object,
    payload: object,
    signature: Signature | bytes | str,
    expected_address: bytes | str,
    *,
    policy: RecoveryPolicy = DEFAULT_POLICY,
    backend: CryptoBackend | None = None,
) -> bool:
    """Verifier(backend, policy).verify(...)."""
    return Verifier(backend, policy).verify(
        scheme, context, payload, signature, expected_address
    )


__all__: tuple[str, ...] = ("Verifier", "recover", "verify")
