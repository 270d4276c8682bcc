"""Cryptographic utilities for suu — commitment hashing and secrets."""

from suu_core.crypto.hashing import (
    commitment_preimage,
    compute_commitment,
    generate_secret,
    keccak256,
    verify_commitment,
)

__all__ = [
    "commitment_preimage",
    "compute_commitment",
    "generate_secret",
    "keccak256",
    "verify_commitment",
]
