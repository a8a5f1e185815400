"""Table-driven CRC calculation with the checksum variants used by the redundancy layer."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

__all__ = [
    "CrcOptions",
    "reflect",
    "crc_option_a",
    "crc_option_b",
    "crc_option_c",
    "crc_option_d",
    "crc_option_e",
]


def reflect(value: int, bits: int) -> int:
    """Return the lowest ``bits`` bits of ``value`` in reversed order."""
    if bits <= 0:
        return 0
    lowest = value & ((1 << bits) - 1)
    return int(format(lowest, f"0{bits}b")[::-1], 2)


@dataclass
class CrcOptions:
    """Parameters of a CRC variant; a width of 0 means no checksum at all."""

    width: int = 0
    polynom: int = 0
    initial: int = 0
    initial_optimized: int = 0
    refin: bool = False
    refout: bool = False
    final_xor: int = 0

    @property
    def mask(self) -> int:
        return (1 << self.width) - 1 if self.width > 0 else 0

    @property
    def high_bit(self) -> int:
        return 1 << (self.width - 1) if self.width > 0 else 0

    @property
    def checksum_length(self) -> int:
        """Size of the checksum in bytes."""
        return self.width // 8

    @cached_property
    def table(self) -> tuple[int, ...]:
        """The 256-entry lookup table for this variant."""
        entries = []
        for byte in range(256):
            crc = reflect(byte, 8) if self.refin else byte
            crc <<= self.width - 8
            for _ in range(8):
                carry = crc & self.high_bit
                crc <<= 1
                if carry:
                    crc ^= self.polynom
            if self.refin:
                crc = reflect(crc, self.width)
            entries.append(crc & self.mask)
        return tuple(entries)

    def calculate(self, data: bytes) -> int:
        """Compute the checksum of ``data``."""
        if self.width == 0:
            return 0

        table = self.table
        mask = self.mask
        crc = self.initial_optimized
        if self.refin:
            crc = reflect(crc, self.width)
            for byte in bytes(data):
                crc = (crc >> 8) ^ table[(crc & 0xFF) ^ byte]
        else:
            shift = self.width - 8
            for byte in bytes(data):
                crc = ((crc << 8) ^ table[((crc >> shift) & 0xFF) ^ byte]) & mask

        if self.refout != self.refin:
            crc = reflect(crc, self.width)
        return (crc ^ self.final_xor) & mask


def crc_option_a() -> CrcOptions:
    """No checksum."""
    return CrcOptions(width=0)


def crc_option_b() -> CrcOptions:
    """32 bit CRC, polynomial 0xEE5B42FD, not reflected."""
    return CrcOptions(width=32, polynom=0xEE5B42FD)


def crc_option_c() -> CrcOptions:
    """32 bit CRC, polynomial 0x1EDC6F41 (Castagnoli), reflected."""
    return CrcOptions(
        width=32,
        polynom=0x1EDC6F41,
        initial=0x2A26F826,
        initial_optimized=0xFFFFFFFF,
        refin=True,
        refout=True,
        final_xor=0xFFFFFFFF,
    )


def crc_option_d() -> CrcOptions:
    """16 bit CRC, polynomial 0x1021, reflected."""
    return CrcOptions(width=16, polynom=0x1021, refin=True, refout=True)


def crc_option_e() -> CrcOptions:
    """16 bit CRC, polynomial 0x8005, reflected."""
    return CrcOptions(width=16, polynom=0x8005, refin=True, refout=True)