"""
Ethereum signed-data hashing and signer recovery: EIP-191, EIP-712, secp256k1.
Curve math and keccak256 come from a CryptoBackend (coincurve + pycryptodome by default).
"""

from .__about__ import __version__
from .curves import (
    CoincurveBackend,
    CryptoBackend,
    N,
    RecoveryPolicy,
    Signature,
    default_backend,
    private_key_to_address,
    public_key_to_address,
    recover_address,
    recover_public_key,
    sign_digest,
    to_address_bytes,
    to_checksum_address,
)
from .errors import (
    InvalidSignatureError,
    NonCanonicalSignatureError,
    PicosignError,
    RecoveryFailureError,
    SchemaMismatchError,
    SchemeMismatchError,
    UnsupportedTypeError,
)
from .hashes import keccak256
from .signing import (
    Domain,
    Field,
    Scheme,
    TypeDescriptor,
    TypedPayload,
    build_digest,
    domain_separator,
    eip191_personal_digest,
    eip191_validator_digest,
    eip712_digest,
    eip712_hash_full_message,
    encode_data,
    encode_type,
    hash_struct,
    type_hash,
)
from .verify import Verifier, recover, verify

__all__: tuple[str, ...] = (
    # About
    "__version__",
    # Hashes
    "keccak256",
    # Backends
    "CoincurveBackend",
    "CryptoBackend",
    "default_backend",
    # Curves: secp256k1
    "N",
    "RecoveryPolicy",
    "Signature",
    "private_key_to_address",
    "public_key_to_address",
    "recover_address",
    "recover_public_key",
    "sign_digest",
    "to_address_bytes",
    "to_checksum_address",
    # Signing: EIP-191 / EIP-712
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
    # Verification
    "Verifier",
    "recover",
    "verify",
    # Errors
    "InvalidSignatureError",
    "NonCanonicalSignatureError",
    "PicosignError",
    "RecoveryFailureError",
    "SchemaMismatchError",
    "SchemeMismatchError",
    "UnsupportedTypeError",
)
