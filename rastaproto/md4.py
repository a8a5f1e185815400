"""MD4 message digest with a configurable initial vector."""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Sequence

__all__ = ["DEFAULT_IV", "Md4", "generate_md4"]

DEFAULT_IV = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

_MASK = 0xFFFFFFFF
_ROUND2 = 0x5A827999
_ROUND3 = 0x6ED9EBA1

_ORDER1 = tuple(range(16))
_ORDER2 = (0, 4, 8, 12, 1, 5, 9, 13, 2, 6, 10, 14, 3, 7, 11, 15)
_ORDER3 = (0, 8, 4, 12, 2, 10, 6, 14, 1, 9, 5, 13, 3, 11, 7, 15)

_SHIFTS1 = (3, 7, 11, 19)
_SHIFTS2 = (3, 5, 9, 13)
_SHIFTS3 = (3, 9, 11, 15)


def _f(x: int, y: int, z: int) -> int:
    return z ^ (x & (y ^ z))


def _g(x: int, y: int, z: int) -> int:
    return (x & (y | z)) | (y & z)


def _h(x: int, y: int, z: int) -> int:
    return x ^ y ^ z


def _rotl(value: int, shift: int) -> int:
    value &= _MASK
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _round(
    regs: list[int],
    func: Callable[[int, int, int], int],
    words: Sequence[int],
    order: Iterable[int],
    shifts: Sequence[int],
    constant: int,
) -> None:
    for step, word_index in enumerate(order):
        target = -step % 4
        b, c, d = (regs[(target + k) % 4] for k in (1, 2, 3))
        regs[target] = _rotl(
            regs[target] + func(b, c, d) + words[word_index] + constant,
            shifts[step % 4],
        )


def _compress(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    words = struct.unpack("<16I", block)
    regs = list(state)
    _round(regs, _f, words, _ORDER1, _SHIFTS1, 0)
    _round(regs, _g, words, _ORDER2, _SHIFTS2, _ROUND2)
    _round(regs, _h, words, _ORDER3, _SHIFTS3, _ROUND3)
    return tuple((old + new) & _MASK for old, new in zip(state, regs))  # type: ignore[return-value]


def _blocks(data: bytes) -> Iterable[bytes]:
    view = memoryview(data)
    while view:
        yield bytes(view[:64])
        view = view[64:]


class Md4:
    """Incremental MD4 hash whose chaining variables start from ``iv``."""

    digest_size = 16
    block_size = 64

    def __init__(self, iv: Sequence[int] = DEFAULT_IV) -> None:
        if len(iv) != 4:
            raise ValueError("an MD4 initial vector has exactly four words")
        self._state = tuple(word & _MASK for word in iv)
        self._pending = b""
        self._length = 0

    def update(self, data: bytes) -> "Md4":
        """Feed more data into the hash."""
        data = bytes(data)
        self._length += len(data)
        buffered = self._pending + data
        complete = len(buffered) - len(buffered) % 64
        state = self._state
        for block in _blocks(buffered[:complete]):
            state = _compress(state, block)
        self._state = state
        self._pending = buffered[complete:]
        return self

    def digest(self) -> bytes:
        """Return the 16 byte digest of everything fed so far."""
        bit_length = (self._length * 8) & 0xFFFFFFFFFFFFFFFF
        padding = b"\x80" + b"\x00" * ((55 - self._length) % 64)
        tail = self._pending + padding + struct.pack("<Q", bit_length)
        state = self._state
        for block in _blocks(tail):
            state = _compress(state, block)
        return struct.pack("<4I", *state)

    def hexdigest(self) -> str:
        return self.digest().hex()


def generate_md4(data: bytes, hash_type: int, iv: Sequence[int] | None = None) -> bytes:
    """Return the safety code of ``data``.

    ``hash_type`` 0 yields eight zero bytes, 1 the first half of the
    digest and 2 the full 16 byte digest.
    """
    if hash_type == 0:
        return bytes(8)
    if hash_type not in (1, 2):
        raise ValueError(f"unsupported MD4 hash type: {hash_type}")
    digest = Md4(DEFAULT_IV if iv is None else iv).update(data).digest()
    return digest if hash_type == 2 else digest[:8]