"""
Benchmark the verification path: EIP-712 digest construction, signer
recovery, and the end-to-end verify. Reports time per call and peak memory
(tracemalloc) per run.

Run from repo root:

  PYTHONPATH=src python benchmarks/signing.py

Or after pip install -e .:

  python benchmarks/signing.py
"""

from __future__ import annotations

import os
import sys
import time
import tracemalloc

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_src = os.path.join(_root, "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from picosign import (
    Domain,
    Scheme,
    TypeDescriptor,
    TypedPayload,
    build_digest,
    eip712_hash_full_message,
    private_key_to_address,
    recover_address,
    sign_digest,
    verify,
)

N_TIME = 500
N_MEM = 200
PRIV = bytes(31) + bytes([1])
ADDRESS = private_key_to_address(PRIV)
PERSON = TypeDescriptor("Person", [("name", "string"), ("wallet", "address")])
MAIL = TypeDescriptor(
    "Mail",
    [("from", "Person"), ("to", "Person"), ("contents", "string")],
    references=[PERSON],
)
DOMAIN = Domain(name="A", version="1", chain_id=1, verifying_contract="0x" + "00" * 20)
PAYLOAD = TypedPayload(
    MAIL,
    {
        "from": {"name": "Cow", "wallet": "0x" + "11" * 20},
        "to": {"name": "Bob", "wallet": "0x" + "22" * 20},
        "contents": "hello",
    },
)
EIP712_FULL = {
    "domain": {
        "name": "A",
        "version": "1",
        "chainId": 1,
        "verifyingContract": "0x" + "00" * 20,
    },
    "types": {
        "Mail": [
            {"name": "from", "type": "address"},
            {"name": "message", "type": "string"},
        ]
    },
    "primaryType": "Mail",
    "message": {"from": "0x" + "00" * 20, "message": "hello"},
}


def _time_per_call(fn, *args, n: int = N_TIME, **kwargs) -> float:
    for _ in range(20):
        fn(*args, **kwargs)
    start = time.perf_counter()
    for _ in range(n):
        fn(*args, **kwargs)
    return (time.perf_counter() - start) / n


def _peak_kb(fn, *args, n: int = N_MEM, **kwargs) -> float:
    tracemalloc.start()
    if hasattr(tracemalloc, "reset_peak"):
        tracemalloc.reset_peak()
    for _ in range(n):
        fn(*args, **kwargs)
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return peak / 1024.0


def main() -> None:
    digest = build_digest(Scheme.EIP712, DOMAIN, PAYLOAD)
    signature = sign_digest(PRIV, digest)
    assert recover_address(digest, signature) == ADDRESS
    assert verify(Scheme.EIP712, DOMAIN, PAYLOAD, signature, ADDRESS)
    print("Benchmark: picosign verification path (coincurve backend)")
    print(f"  n = {N_TIME} (time), {N_MEM} (memory)")
    print()

    rows = [
        ("build_digest (EIP-712, nested)", build_digest, (Scheme.EIP712, DOMAIN, PAYLOAD)),
        ("eip712_hash_full_message", eip712_hash_full_message, (EIP712_FULL,)),
        ("recover_address", recover_address, (digest, signature)),
        ("verify (EIP-712)", verify, (Scheme.EIP712, DOMAIN, PAYLOAD, signature, ADDRESS)),
    ]
    for label, fn, args in rows:
        t = _time_per_call(fn, *args) * 1000
        m = _peak_kb(fn, *args)
        print(f"  {label:<32} {t:.4f} ms  peak {m:.2f} KiB")


if __name__ == "__main__":
    main()
