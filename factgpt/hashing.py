"""
FactGPT Message Hashing

All message hashes use Keccak-256 (pre-standard Keccak padding, not
SHA3-256) and are interpreted as 256-bit big-endian integers.
"""

from typing import Union

from Crypto.Hash import keccak

from .canonicalization import build_message
from .primitives import RequestId


def keccak256(data: Union[bytes, str]) -> bytes:
    """Compute the raw 32-byte Keccak-256 digest."""
    if isinstance(data, str):
        data = data.encode('utf-8')

    hasher = keccak.new(digest_bits=256)
    hasher.update(data)
    return hasher.digest()


def keccak256_hex(data: Union[bytes, str]) -> str:
    """
    Compute Keccak-256 with prefixed lowercase hex output.

    Returns:
        Hash string in format "0xabcdef..."
    """
    return "0x" + keccak256(data).hex()


def message_hash(app_id: int, request_id: Union[RequestId, bytes], outcome: bool) -> int:
    """
    Compute the hash the oracle group must sign for an outcome.

    hash = Keccak-256(be32(app_id) || request_id || "true"/"false")
    """
    digest = keccak256(build_message(app_id, request_id, outcome))
    return int.from_bytes(digest, "big")


def hash_to_bytes(value: int) -> bytes:
    """Encode a message hash back into its 32-byte form."""
    return value.to_bytes(32, "big")


def hash_to_hex(value: int) -> str:
    return "0x" + hash_to_bytes(value).hex()


def verify_message_hash(
    declared_hash: int,
    app_id: int,
    request_id: Union[RequestId, bytes],
    outcome: bool
) -> bool:
    """Recompute the message hash from its fields and compare."""
    return message_hash(app_id, request_id, outcome) == declared_hash
