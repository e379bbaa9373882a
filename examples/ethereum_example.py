#!/usr/bin/env python3
"""Example: EIP-712 digest, signing through the backend, signer recovery."""

from picosign import (
    Domain,
    Scheme,
    TypeDescriptor,
    TypedPayload,
    build_digest,
    private_key_to_address,
    recover,
    sign_digest,
    to_checksum_address,
    verify,
)

privkey = bytes(31) + bytes([1])
address = private_key_to_address(privkey)
print("Ethereum address:", to_checksum_address(address))

person = TypeDescriptor("Person", [("name", "string"), ("wallet", "address")])
mail = TypeDescriptor(
    "Mail",
    [("from", "Person"), ("to", "Person"), ("contents", "string")],
    references=[person],
)
domain = Domain(
    name="Example",
    version="1",
    chain_id=1,
    verifying_contract="0x" + "00" * 19 + "01",
)
payload = TypedPayload(
    mail,
    {
        "from": {"name": "Alice", "wallet": address},
        "to": {"name": "Bob", "wallet": "0x" + "bb" * 20},
        "contents": "Hello from picosign",
    },
)

digest = build_digest(Scheme.EIP712, domain, payload)
print("EIP-712 digest:", digest.hex())

signature = sign_digest(privkey, digest)
print("Signature (r, s, v):", hex(signature.r), hex(signature.s), signature.v)

signer = recover(Scheme.EIP712, domain, payload, signature)
print("Recovered signer:", to_checksum_address(signer))
print("Verified:", verify(Scheme.EIP712, domain, payload, signature, address))
