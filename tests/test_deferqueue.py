import pytest

from rastaproto.deferqueue import DeferQueue
from rastaproto.packets import PacketType, RastaPacket, RedundancyPacket


def make_packet(sequence_number, payload=b"abc"):
    inner = RastaPacket(type=PacketType.DATA, sender_id=1, receiver_id=2, data=payload)
    return RedundancyPacket(sequence_number=sequence_number, data=inner)


def test_add_keeps_entries_sorted_by_timestamp():
    queue = DeferQueue(4)
    queue.add(make_packet(1), 300)
    queue.add(make_packet(2), 100)
    queue.add(make_packet(3), 200)
    timestamps = [element.received_timestamp for element in queue]
    assert timestamps == sorted(timestamps)
    assert queue.oldest.packet.sequence_number == 2
    assert len(queue) == 3


def test_full_queue_drops_new_packets():
    queue = DeferQueue(2)
    assert queue.add(make_packet(1), 10) is True
    assert queue.is_full() is False
    assert queue.add(make_packet(2), 20) is True
    assert queue.is_full() is True
    assert queue.add(make_packet(3), 30) is False
    assert len(queue) == 2
    assert 3 not in queue


def test_remove_existing_and_missing():
    queue = DeferQueue(3)
    queue.add(make_packet(5), 1)
    queue.add(make_packet(6), 2)
    queue.remove(5)
    assert 5 not in queue
    assert 6 in queue
    queue.remove(42)
    assert len(queue) == 1


def test_get_returns_stored_copy():
    queue = DeferQueue(2)
    original = make_packet(7, b"payload")
    queue.add(original, 11)
    original.data.data = b"changed"
    stored = queue.get(7)
    assert stored.data.data == b"payload"
    assert stored.sequence_number == 7


def test_get_and_timestamp_of_missing_packet():
    queue = DeferQueue(2)
    queue.add(make_packet(1), 99)
    assert queue.get(2) is None
    assert queue.get_timestamp(2) is None
    assert queue.get_timestamp(1) == 99


def test_smallest_sequence_index():
    queue = DeferQueue(4)
    queue.add(make_packet(30), 1)
    queue.add(make_packet(10), 2)
    queue.add(make_packet(20), 3)
    index = queue.smallest_sequence_index()
    assert queue[index].packet.sequence_number == 10


def test_smallest_sequence_index_of_empty_queue():
    assert DeferQueue(3).smallest_sequence_index() == 0


def test_clear_empties_queue():
    queue = DeferQueue(2)
    queue.add(make_packet(1), 1)
    queue.add(make_packet(2), 2)
    queue.clear()
    assert len(queue) == 0
    assert queue.oldest is None
    assert queue.add(make_packet(3), 3) is True


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        DeferQueue(-1)