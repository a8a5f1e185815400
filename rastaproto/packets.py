"""Wire format of RaSTA safety packets and the redundancy packets that carry them."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from .crc import CrcOptions, crc_option_a
from .hashing import HashingContext

__all__ = [
    "HEADER_LENGTH",
    "REDUNDANCY_HEADER_LENGTH",
    "PacketType",
    "PacketFormatError",
    "RastaPacket",
    "RedundancyPacket",
    "packet_to_bytes",
    "packet_to_bytes_no_checksum",
    "packet_from_bytes",
    "redundancy_packet_to_bytes",
    "redundancy_packet_from_bytes",
]

_HEADER = struct.Struct("<HHIIIIII")
_REDUNDANCY_HEADER = struct.Struct("<HHI")

HEADER_LENGTH = _HEADER.size
REDUNDANCY_HEADER_LENGTH = _REDUNDANCY_HEADER.size

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF


class PacketType(enum.IntEnum):
    """Message types of the safety and retransmission layer."""

    CONNECTION_REQUEST = 6200
    CONNECTION_RESPONSE = 6201
    RETRANSMISSION_REQUEST = 6212
    RETRANSMISSION_RESPONSE = 6213
    DISCONNECTION_REQUEST = 6216
    HEARTBEAT = 6220
    DATA = 6240
    RETRANSMITTED_DATA = 6241


class PacketFormatError(ValueError):
    """Raised when a packet or its encoding has an invalid length."""


def _as_type(value: int) -> int:
    try:
        return PacketType(value)
    except ValueError:
        return int(value)


@dataclass
class RastaPacket:
    """A safety layer packet.

    ``length`` is the full encoded size; when omitted it is taken from the
    header, the data and the checksum held by the packet.
    """

    type: int
    receiver_id: int = 0
    sender_id: int = 0
    sequence_number: int = 0
    confirmed_sequence_number: int = 0
    timestamp: int = 0
    confirmed_timestamp: int = 0
    data: bytes = b""
    checksum: bytes = b""
    length: int | None = None
    checksum_correct: bool = True

    def __post_init__(self) -> None:
        self.type = _as_type(self.type)
        self.data = bytes(self.data)
        self.checksum = bytes(self.checksum)
        if self.length is None:
            self.length = HEADER_LENGTH + len(self.data) + len(self.checksum)


@dataclass
class RedundancyPacket:
    """A redundancy layer packet wrapping one safety packet."""

    sequence_number: int
    data: RastaPacket
    checksum_type: CrcOptions = field(default_factory=crc_option_a)
    reserve: int = 0
    length: int | None = None
    checksum_correct: bool = True

    def __post_init__(self) -> None:
        if self.length is None:
            self.length = (
                REDUNDANCY_HEADER_LENGTH + self.data.length + self.checksum_type.checksum_length
            )


def _checksum_length(hashing_context: HashingContext) -> int:
    return hashing_context.hash_length * 8


def _encode_without_checksum(packet: RastaPacket, hashing_context: HashingContext) -> tuple[bytes, int]:
    checksum_len = _checksum_length(hashing_context)
    length = packet.length if packet.length is not None else 0
    if length < HEADER_LENGTH + checksum_len:
        raise PacketFormatError(
            f"packet length {length} is shorter than header and safety code ({HEADER_LENGTH + checksum_len})"
        )
    data_len = length - HEADER_LENGTH - checksum_len
    if len(packet.data) < data_len:
        raise PacketFormatError(
            f"packet declares {data_len} data bytes but holds only {len(packet.data)}"
        )
    header = _HEADER.pack(
        length & _U16,
        int(packet.type) & _U16,
        packet.receiver_id & _U32,
        packet.sender_id & _U32,
        packet.sequence_number & _U32,
        packet.confirmed_sequence_number & _U32,
        packet.timestamp & _U32,
        packet.confirmed_timestamp & _U32,
    )
    return header + packet.data[:data_len], checksum_len


def packet_to_bytes(packet: RastaPacket, hashing_context: HashingContext) -> bytes:
    """Encode ``packet`` and append a freshly calculated safety code."""
    body, checksum_len = _encode_without_checksum(packet, hashing_context)
    if checksum_len == 0:
        return body
    return body + hashing_context.calculate(body)[:checksum_len]


def packet_to_bytes_no_checksum(packet: RastaPacket, hashing_context: HashingContext) -> bytes:
    """Encode ``packet`` using the safety code it already holds."""
    body, checksum_len = _encode_without_checksum(packet, hashing_context)
    if len(packet.checksum) < checksum_len:
        raise PacketFormatError(
            f"packet holds {len(packet.checksum)} checksum bytes, {checksum_len} needed"
        )
    return body + packet.checksum[:checksum_len]


def packet_from_bytes(data: bytes, hashing_context: HashingContext) -> RastaPacket:
    """Decode a safety packet and verify its safety code."""
    data = bytes(data)
    checksum_len = _checksum_length(hashing_context)
    if len(data) < HEADER_LENGTH + checksum_len:
        raise PacketFormatError(
            f"{len(data)} bytes are too few for a packet with a {checksum_len} byte safety code"
        )
    (
        length,
        packet_type,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
    ) = _HEADER.unpack_from(data)
    if length < HEADER_LENGTH + checksum_len:
        raise PacketFormatError(f"declared packet length {length} is too short")
    if length > len(data):
        raise PacketFormatError(f"declared packet length {length} exceeds the {len(data)} bytes received")

    data_len = length - HEADER_LENGTH - checksum_len
    payload_end = HEADER_LENGTH + data_len
    received_checksum = data[payload_end : payload_end + checksum_len]
    if checksum_len:
        expected = hashing_context.calculate(data[: length - checksum_len])[:checksum_len]
        correct = expected == received_checksum
    else:
        correct = True

    return RastaPacket(
        type=packet_type,
        receiver_id=receiver_id,
        sender_id=sender_id,
        sequence_number=sequence_number,
        confirmed_sequence_number=confirmed_sequence_number,
        timestamp=timestamp,
        confirmed_timestamp=confirmed_timestamp,
        data=data[HEADER_LENGTH:payload_end],
        checksum=received_checksum,
        length=length,
        checksum_correct=correct,
    )


def redundancy_packet_to_bytes(packet: RedundancyPacket, hashing_context: HashingContext) -> bytes:
    """Encode a redundancy packet, its inner packet and its CRC."""
    crc_len = packet.checksum_type.checksum_length
    length = packet.length if packet.length is not None else 0
    header = _REDUNDANCY_HEADER.pack(length & _U16, packet.reserve & _U16, packet.sequence_number & _U32)
    body = header + packet_to_bytes(packet.data, hashing_context)
    if len(body) + crc_len != length:
        raise PacketFormatError(
            f"redundancy packet declares {length} bytes but encodes to {len(body) + crc_len}"
        )
    if crc_len == 0:
        return body
    crc = packet.checksum_type.calculate(body)
    return body + struct.pack("<I", crc & _U32)[:crc_len]


def redundancy_packet_from_bytes(
    data: bytes, checksum_type: CrcOptions, hashing_context: HashingContext
) -> RedundancyPacket:
    """Decode a redundancy packet and verify its CRC."""
    data = bytes(data)
    crc_len = checksum_type.checksum_length
    if len(data) < REDUNDANCY_HEADER_LENGTH + crc_len:
        raise PacketFormatError(f"{len(data)} bytes are too few for a redundancy packet")
    length, reserve, sequence_number = _REDUNDANCY_HEADER.unpack_from(data)
    end = len(data) - crc_len
    inner = packet_from_bytes(data[REDUNDANCY_HEADER_LENGTH:end], hashing_context)

    if crc_len == 0:
        correct = True
    else:
        calculated = struct.pack("<I", checksum_type.calculate(data[:end]) & _U32)[:crc_len]
        correct = calculated == data[end:]

    return RedundancyPacket(
        sequence_number=sequence_number,
        data=inner,
        checksum_type=checksum_type,
        reserve=reserve,
        length=length,
        checksum_correct=correct,
    )