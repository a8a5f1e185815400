"""Safety code calculation for RaSTA packets."""

from __future__ import annotations

import enum
import hashlib
import struct
from dataclasses import dataclass

from .md4 import generate_md4

__all__ = ["HashAlgorithm", "HashingContext", "generate_blake2"]


class HashAlgorithm(enum.IntEnum):
    """Algorithms available for the safety code."""

    MD4 = 0
    BLAKE2B = 1


def generate_blake2(data: bytes, key: bytes, hash_type: int) -> bytes:
    """Return a BLAKE2b digest of ``hash_type * 8`` bytes, or 8 zero bytes for type 0."""
    if hash_type < 0:
        raise ValueError(f"unsupported BLAKE2 hash type: {hash_type}")
    digest_size = hash_type * 8
    if digest_size == 0:
        return bytes(8)
    if digest_size > hashlib.blake2b.MAX_DIGEST_SIZE:
        raise ValueError(f"BLAKE2b digest of {digest_size} bytes is too long")
    if len(key) > hashlib.blake2b.MAX_KEY_SIZE:
        raise ValueError(f"BLAKE2b key of {len(key)} bytes is too long")
    return hashlib.blake2b(bytes(data), digest_size=digest_size, key=bytes(key)).digest()


@dataclass(frozen=True)
class HashingContext:
    """Algorithm, key and length of the safety code."""

    hash_length: int
    algorithm: HashAlgorithm
    key: bytes = b""

    @classmethod
    def from_md4_iv(cls, hash_length: int, a: int, b: int, c: int, d: int) -> "HashingContext":
        """Build an MD4 context whose key holds the initial vector."""
        key = struct.pack("<4I", *(word & 0xFFFFFFFF for word in (a, b, c, d)))
        return cls(hash_length, HashAlgorithm.MD4, key)

    @classmethod
    def from_key(cls, hash_length: int, algorithm: HashAlgorithm, key: int | bytes) -> "HashingContext":
        """Build a context from a key; an integer key becomes four big-endian bytes."""
        if isinstance(key, int):
            key = (key & 0xFFFFFFFF).to_bytes(4, "big")
        return cls(hash_length, HashAlgorithm(algorithm), bytes(key))

    def md4_iv(self) -> tuple[int, int, int, int]:
        """Read the MD4 initial vector back out of the key."""
        if len(self.key) < 16:
            raise ValueError("key is too short to hold an MD4 initial vector")
        return struct.unpack("<4I", self.key[:16])

    def calculate(self, data: bytes) -> bytes:
        """Compute the safety code of ``data``."""
        if self.algorithm is HashAlgorithm.BLAKE2B:
            return generate_blake2(data, self.key, self.hash_length)
        return generate_md4(data, self.hash_length, self.md4_iv())