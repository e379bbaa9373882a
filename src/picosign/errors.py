"""
Error taxonomy. Every error is a ValueError so callers that already catch bad input keep working.
"""

from __future__ import annotations


class PicosignError(ValueError):
    """Base class for all picosign errors."""


class SchemaMismatchError(PicosignError):
    """A value does not conform to its declared EIP-712 type."""


class UnsupportedTypeError(PicosignError):
    """A field type outside the supported atomic / struct / array set."""


class InvalidSignatureError(PicosignError):
    """Signature components out of range, or an unknown v."""


class NonCanonicalSignatureError(InvalidSignatureError):
    """High-s signature rejected under the canonical (low-s) policy."""


class RecoveryFailureError(PicosignError):
    """No public key could be recovered for (digest, r, s, v)."""


class SchemeMismatchError(PicosignError):
    """Context or payload inconsistent with the requested signing scheme."""


__all__: tuple[str, ...] = (
    "InvalidSignatureError",
    "NonCanonicalSignatureError",
    "PicosignError",
    "RecoveryFailureError",
    "SchemaMismatchError",
    "SchemeMismatchError",
    "UnsupportedTypeError",
)
