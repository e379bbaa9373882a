"""
Simple Keccak-256 usage (pycryptodome behind picosign.hashes).

Run from repo root: PYTHONPATH=src python examples/keccak.py
"""

import os
import sys

if getattr(sys, "frozen", False) is False:
    _root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    _src = os.path.join(_root, "src")
    if _src not in sys.path:
        sys.path.insert(0, _src)

from picosign.hashes import keccak256

digest = keccak256(b"hello")
print("keccak256(b'hello') =", digest.hex())

# EIP-712 type hash: keccak256 of the encoded type string
h = keccak256(b"Mail(Person from,Person to,string contents)Person(string name,address wallet)")
print("typeHash(Mail)      =", h.hex())
