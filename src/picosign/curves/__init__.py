"""secp256k1 signatures, addresses and the crypto backend boundary."""

from ._backend import CoincurveBackend, CryptoBackend, default_backend
from .address import public_key_to_address, to_address_bytes, to_checksum_address
from .secp256k1 import (
    N,
    RecoveryPolicy,
    Signature,
    private_key_to_address,
    recover_address,
    recover_public_key,
    sign_digest,
)

__all__: tuple[str, ...] = (
    "CoincurveBackend",
    "CryptoBackend",
    "N",
    "RecoveryPolicy",
    "Signature",
    "default_backend",
    "private_key_to_address",
    "public_key_to_address",
    "recover_address",
    "recover_public_key",
    "sign_digest",
    "to_address_bytes",
    "to_checksum_address",
)
