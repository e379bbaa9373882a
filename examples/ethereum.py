#!/usr/bin/env python3
"""Example: EIP-191 personal_sign and intended-validator digests."""

from picosign import (
    Scheme,
    build_digest,
    keccak256,
    private_key_to_address,
    sign_digest,
    to_checksum_address,
    verify,
)

privkey = bytes(31) + bytes([1])
address = to_checksum_address(private_key_to_address(privkey))

message = b"Hello, Ethereum"
digest = build_digest(Scheme.PERSONAL, None, message)
signature = sign_digest(privkey, digest)
print("personal_sign digest:", digest.hex())
print("signature:", "0x" + signature.to_bytes().hex())
print("verified:", verify(Scheme.PERSONAL, None, message, signature, address))

validator = "0x" + "aa" * 20
app_data = keccak256(b"application data")
digest = build_digest(Scheme.VALIDATOR, validator, app_data)
signature = sign_digest(privkey, digest)
print("validator digest:", digest.hex())
print("verified:", verify(Scheme.VALIDATOR, validator, app_data, signature, address))
