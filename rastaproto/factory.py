"""Construction and decoding of the individual RaSTA message kinds."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable, Iterator

from .crc import CrcOptions
from .hashing import HashingContext
from .packets import (
    HEADER_LENGTH,
    PacketFormatError,
    PacketType,
    RastaPacket,
    RedundancyPacket,
)

__all__ = [
    "CONNECTION_DATA_LENGTH",
    "DISCONNECTION_DATA_LENGTH",
    "ConnectionData",
    "DisconnectionData",
    "create_connection_request",
    "create_connection_response",
    "extract_connection_data",
    "create_retransmission_request",
    "create_retransmission_response",
    "create_disconnection_request",
    "extract_disconnection_data",
    "create_heartbeat",
    "create_data_message",
    "extract_message_data",
    "create_retransmitted_data_message",
    "create_redundancy_packet",
]

CONNECTION_DATA_LENGTH = 14
DISCONNECTION_DATA_LENGTH = 4

_U16 = struct.Struct("<H")
_DISCONNECTION = struct.Struct("<HH")
_VERSION_LENGTH = 4
_MAX_U16 = 0xFFFF


@dataclass(frozen=True)
class ConnectionData:
    """Payload of a connection request or response."""

    version: bytes
    send_max: int


@dataclass(frozen=True)
class DisconnectionData:
    """Payload of a disconnection request."""

    details: int = 0
    reason: int = 0


def _version_bytes(version: bytes | str) -> bytes:
    if isinstance(version, str):
        version = version.encode("ascii")
    version = bytes(version)
    if len(version) != _VERSION_LENGTH:
        raise ValueError(f"protocol version must be {_VERSION_LENGTH} bytes, got {len(version)}")
    return version


def _initialize(
    packet_type: PacketType,
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    data: bytes,
    hashing_context: HashingContext,
) -> RastaPacket:
    checksum_len = hashing_context.hash_length * 8
    length = HEADER_LENGTH + checksum_len + len(data)
    if length > _MAX_U16:
        raise PacketFormatError(f"packet of {length} bytes exceeds the 16 bit length field")
    return RastaPacket(
        type=packet_type,
        receiver_id=receiver_id,
        sender_id=sender_id,
        sequence_number=sequence_number,
        confirmed_sequence_number=confirmed_sequence_number,
        timestamp=timestamp,
        confirmed_timestamp=confirmed_timestamp,
        data=data,
        checksum=bytes(checksum_len),
        length=length,
    )


def _connection_payload(version: bytes | str, send_max: int) -> bytes:
    payload = _version_bytes(version) + _U16.pack(send_max & _MAX_U16)
    return payload.ljust(CONNECTION_DATA_LENGTH, b"\x00")


def create_connection_request(
    receiver_id: int,
    sender_id: int,
    initial_sequence_number: int,
    timestamp: int,
    send_max: int,
    version: bytes | str,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a connection request carrying the protocol version and send window."""
    return _initialize(
        PacketType.CONNECTION_REQUEST,
        receiver_id,
        sender_id,
        initial_sequence_number,
        0,
        timestamp,
        0,
        _connection_payload(version, send_max),
        hashing_context,
    )


def create_connection_response(
    receiver_id: int,
    sender_id: int,
    initial_sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    send_max: int,
    version: bytes | str,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a connection response carrying the protocol version and send window."""
    return _initialize(
        PacketType.CONNECTION_RESPONSE,
        receiver_id,
        sender_id,
        initial_sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        _connection_payload(version, send_max),
        hashing_context,
    )


def extract_connection_data(packet: RastaPacket) -> ConnectionData:
    """Read version and send window from a connection request or response."""
    if len(packet.data) != CONNECTION_DATA_LENGTH:
        raise PacketFormatError(
            f"connection data must be {CONNECTION_DATA_LENGTH} bytes, got {len(packet.data)}"
        )
    (send_max,) = _U16.unpack_from(packet.data, _VERSION_LENGTH)
    return ConnectionData(version=packet.data[:_VERSION_LENGTH], send_max=send_max)


def create_retransmission_request(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a retransmission request."""
    return _initialize(
        PacketType.RETRANSMISSION_REQUEST,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        b"",
        hashing_context,
    )


def create_retransmission_response(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a retransmission response."""
    return _initialize(
        PacketType.RETRANSMISSION_RESPONSE,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        b"",
        hashing_context,
    )


def create_disconnection_request(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    data: DisconnectionData,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a disconnection request carrying details and reason."""
    payload = _DISCONNECTION.pack(data.details & _MAX_U16, data.reason & _MAX_U16)
    return _initialize(
        PacketType.DISCONNECTION_REQUEST,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        payload,
        hashing_context,
    )


def extract_disconnection_data(packet: RastaPacket) -> DisconnectionData:
    """Read details and reason from a disconnection request."""
    if len(packet.data) != DISCONNECTION_DATA_LENGTH:
        raise PacketFormatError(
            f"disconnection data must be {DISCONNECTION_DATA_LENGTH} bytes, got {len(packet.data)}"
        )
    details, reason = _DISCONNECTION.unpack(packet.data)
    return DisconnectionData(details=details, reason=reason)


def create_heartbeat(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a heartbeat."""
    return _initialize(
        PacketType.HEARTBEAT,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        b"",
        hashing_context,
    )


def _pack_messages(messages: Iterable[bytes]) -> bytes:
    parts = []
    for message in messages:
        message = bytes(message)
        if len(message) > _MAX_U16:
            raise PacketFormatError(f"message of {len(message)} bytes exceeds the 16 bit length field")
        parts.append(_U16.pack(len(message)))
        parts.append(message)
    return b"".join(parts)


def create_data_message(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    messages: Iterable[bytes],
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a data message; each message is prefixed with its 2 byte length."""
    return _initialize(
        PacketType.DATA,
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        _pack_messages(messages),
        hashing_context,
    )


def _split_messages(payload: bytes) -> Iterator[bytes]:
    offset = 0
    while offset < len(payload):
        if offset + _U16.size > len(payload):
            raise PacketFormatError("truncated message length in data payload")
        (size,) = _U16.unpack_from(payload, offset)
        start = offset + _U16.size
        end = start + size
        if end > len(payload):
            raise PacketFormatError(
                f"message declares {size} bytes but only {len(payload) - start} remain"
            )
        yield payload[start:end]
        offset = end


def extract_message_data(packet: RastaPacket) -> list[bytes]:
    """Split the payload of a data message into its messages."""
    return list(_split_messages(packet.data))


def create_retransmitted_data_message(
    receiver_id: int,
    sender_id: int,
    sequence_number: int,
    confirmed_sequence_number: int,
    timestamp: int,
    confirmed_timestamp: int,
    messages: Iterable[bytes],
    hashing_context: HashingContext,
) -> RastaPacket:
    """Build a data message marked as retransmitted."""
    packet = create_data_message(
        receiver_id,
        sender_id,
        sequence_number,
        confirmed_sequence_number,
        timestamp,
        confirmed_timestamp,
        messages,
        hashing_context,
    )
    packet.type = PacketType.RETRANSMITTED_DATA
    return packet


def create_redundancy_packet(
    sequence_number: int, inner: RastaPacket, checksum_type: CrcOptions
) -> RedundancyPacket:
    """Wrap ``inner`` in a redundancy packet using the given CRC variant."""
    inner_length = inner.length if inner.length is not None else 0
    return RedundancyPacket(
        sequence_number=sequence_number,
        data=inner,
        checksum_type=checksum_type,
        reserve=0,
        length=8 + inner_length + checksum_type.checksum_length,
        checksum_correct=True,
    )