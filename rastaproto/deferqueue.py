"""Bounded queue of redundancy packets kept in order of arrival time."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterator

from .packets import RedundancyPacket

__all__ = ["DeferredPacket", "DeferQueue"]

_MAX_SEQUENCE_NUMBER = 0xFFFFFFFF


@dataclass
class DeferredPacket:
    """A queued packet together with the time it was received."""

    packet: RedundancyPacket
    received_timestamp: int


class DeferQueue:
    """Holds up to ``max_count`` packets, oldest first.

    Packets are identified by their redundancy sequence number.
    """

    def __init__(self, max_count: int) -> None:
        if max_count < 0:
            raise ValueError(f"queue capacity must not be negative, got {max_count}")
        self.max_count = max_count
        self._elements: list[DeferredPacket] = []

    def _find(self, sequence_number: int) -> DeferredPacket | None:
        return next(
            (
                element
                for element in self._elements
                if element.packet.sequence_number == sequence_number
            ),
            None,
        )

    def add(self, packet: RedundancyPacket, received_timestamp: int) -> bool:
        """Store a copy of ``packet``; returns False and drops it if the queue is full."""
        if self.is_full():
            return False
        self._elements.append(DeferredPacket(copy.deepcopy(packet), received_timestamp))
        self._elements.sort(key=lambda element: element.received_timestamp)
        return True

    def remove(self, sequence_number: int) -> None:
        """Remove the packet with ``sequence_number``; an unknown number is ignored."""
        element = self._find(sequence_number)
        if element is not None:
            self._elements.remove(element)

    def is_full(self) -> bool:
        """Whether the queue holds ``max_count`` packets."""
        return len(self._elements) == self.max_count

    def smallest_sequence_index(self) -> int:
        """Index of the packet with the smallest sequence number, 0 if the queue is empty."""
        index = 0
        smallest = _MAX_SEQUENCE_NUMBER
        for position, element in enumerate(self._elements):
            if element.packet.sequence_number < smallest:
                smallest = element.packet.sequence_number
                index = position
        return index

    def get(self, sequence_number: int) -> RedundancyPacket | None:
        """Return the packet with ``sequence_number`` or None."""
        element = self._find(sequence_number)
        return None if element is None else element.packet

    def get_timestamp(self, sequence_number: int) -> int | None:
        """Return the receive time of the packet with ``sequence_number`` or None."""
        element = self._find(sequence_number)
        return None if element is None else element.received_timestamp

    def clear(self) -> None:
        """Drop every queued packet."""
        self._elements.clear()

    @property
    def oldest(self) -> DeferredPacket | None:
        """The earliest received entry, or None if the queue is empty."""
        return self._elements[0] if self._elements else None

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[DeferredPacket]:
        return iter(list(self._elements))

    def __getitem__(self, index: int) -> DeferredPacket:
        return self._elements[index]

    def __contains__(self, sequence_number: object) -> bool:
        return isinstance(sequence_number, int) and self._find(sequence_number) is not None