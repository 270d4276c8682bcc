"""Commitment hashing for battle and capture rounds.

The contract recomputes the commitment at reveal time, so the preimage
layout is part of the wire contract:

    subject_id      8 bytes, little-endian u64
    opponent_level  1 byte
    opponent_element 1 byte
    secret          UTF-8 bytes, unpadded

hashed with Keccak-256 (not SHA3-256; the padding differs).
"""

from __future__ import annotations

import hmac
import secrets
import struct

from web3 import Web3

DIGEST_LENGTH = 32
HEADER_LENGTH = 10
U64_MAX = (1 << 64) - 1


def commitment_preimage(
    subject_id: int,
    opponent_level: int,
    opponent_element: int,
    secret: str,
) -> bytes:
    """Serialise the commitment inputs in the layout the contract expects."""
    if not 0 <= subject_id <= U64_MAX:
        msg = f"subject_id {subject_id} does not fit in a u64"
        raise ValueError(msg)
    if not 0 <= opponent_level <= 0xFF:
        msg = f"opponent_level {opponent_level} does not fit in a u8"
        raise ValueError(msg)
    if not 0 <= opponent_element <= 0xFF:
        msg = f"opponent_element {opponent_element} does not fit in a u8"
        raise ValueError(msg)
    header = struct.pack("<QBB", subject_id, opponent_level, opponent_element)
    return header + secret.encode("utf-8")


def keccak256(data: bytes) -> bytes:
    return bytes(Web3.keccak(data))


def compute_commitment(
    subject_id: int,
    opponent_level: int,
    opponent_element: int,
    secret: str,
) -> bytes:
    """Compute the 32-byte commitment published by battle_commit / capture_commit."""
    return keccak256(
        commitment_preimage(subject_id, opponent_level, opponent_element, secret)
    )


def verify_commitment(
    commitment: bytes | str,
    subject_id: int,
    opponent_level: int,
    opponent_element: int,
    secret: str,
) -> bool:
    """Check that a reveal's inputs reproduce ``commitment`` (bytes or hex)."""
    if isinstance(commitment, str):
        try:
            commitment = bytes.fromhex(commitment.removeprefix("0x"))
        except ValueError:
            return False
    expected = compute_commitment(subject_id, opponent_level, opponent_element, secret)
    return hmac.compare_digest(expected, commitment)


def generate_secret(nbytes: int = 16) -> str:
    """Fresh random reveal secret (hex text, so it is plain ASCII on the wire)."""
    return secrets.token_hex(nbytes)
