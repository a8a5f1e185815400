# rastaproto

Building blocks for the RaSTA (Rail Safe Transport Application) protocol.
The package covers safety-layer packets, redundancy-layer packets and their
checksums. It also has two small containers: one tracks connections, the
other holds packets that arrive out of order. It uses only the standard
library.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `rastaproto.crc`

- `CrcOptions`: a dataclass that holds the parameters of a CRC variant
  (`width`, `polynom`, `initial`, `initial_optimized`, `refin`, `refout`,
  `final_xor`). It has the following members:
  - `calculate(data)` returns the checksum as an integer.
  - `checksum_length` gives the size of the checksum in bytes.
  - `table` is the 256-entry lookup table, computed once and then cached.

  A width of 0 means no checksum, and `calculate` then returns 0.
- `crc_option_a()` to `crc_option_e()` are the five redundancy-layer presets:
  - A: no checksum.
  - B: 32 bit, polynomial 0xEE5B42FD.
  - C: 32 bit Castagnoli, reflected.
  - D: 16 bit, polynomial 0x1021.
  - E: 16 bit, polynomial 0x8005.
- `reflect(value, bits)` reverses the lowest `bits` bits of `value`.

### `rastaproto.md4`

- `Md4(iv=DEFAULT_IV)` is an incremental MD4 hasher whose chaining
  variables start from a custom four-word initial vector. It has
  `update(data)`, which returns the hasher, `digest()` and `hexdigest()`.
- `generate_md4(data, hash_type, iv=None)` returns a safety code whose size
  depends on `hash_type`:
  - 0 gives eight zero bytes.
  - 1 gives the first 8 bytes of the digest.
  - 2 gives the full 16 byte digest.

  Any other type raises `ValueError`.

### `rastaproto.hashing`

- `HashAlgorithm` has the values `MD4` and `BLAKE2B`.
- `HashingContext` is a frozen dataclass with the fields `hash_length`,
  `algorithm` and `key`:
  - `HashingContext.from_md4_iv(hash_length, a, b, c, d)` stores an MD4
    initial vector as the key.
  - `HashingContext.from_key(hash_length, algorithm, key)` takes raw bytes,
    or an integer that it turns into four big-endian bytes.
  - `md4_iv()` reads the initial vector back out of the key.
  - `calculate(data)` computes the safety code with the chosen algorithm.
- `generate_blake2(data, key, hash_type)` returns a keyed BLAKE2b digest of
  `hash_type * 8` bytes. Type 0 gives eight zero bytes.

### `rastaproto.packets`

- `PacketType` lists the message types: connection request and response,
  retransmission request and response, disconnection request, heartbeat,
  data, and retransmitted data.
- `RastaPacket` is a safety-layer packet. If you omit `length`, it is
  computed from the header, data and checksum.
- `RedundancyPacket` wraps one `RastaPacket` together with a CRC variant.
- Conversion functions:
  - `packet_to_bytes(packet, hashing_context)` appends a freshly calculated
    safety code.
  - `packet_to_bytes_no_checksum(packet, hashing_context)` uses the safety
    code the packet already holds.
  - `packet_from_bytes(data, hashing_context)` decodes a packet and sets
    `checksum_correct`.
  - `redundancy_packet_to_bytes(packet, hashing_context)` and
    `redundancy_packet_from_bytes(data, checksum_type, hashing_context)` do
    the same for redundancy packets, checking the CRC.
- A wrong or inconsistent length raises `PacketFormatError`, which is a
  subclass of `ValueError`.

### `rastaproto.factory`

- Constructors, one per message type:
  - `create_connection_request`
  - `create_connection_response`
  - `create_retransmission_request`
  - `create_retransmission_response`
  - `create_disconnection_request`
  - `create_heartbeat`
  - `create_data_message`
  - `create_retransmitted_data_message`
- Extractors:
  - `extract_connection_data(packet)` returns a `ConnectionData` with
    `version` and `send_max`.
  - `extract_disconnection_data(packet)` returns a `DisconnectionData` with
    `details` and `reason`.
  - `extract_message_data(packet)` returns the list of messages carried by a
    data packet. Each message is prefixed with its 2 byte length.
- `create_redundancy_packet(sequence_number, inner, checksum_type)` wraps a
  packet for the redundancy layer.

### `rastaproto.connections`

- `ConnectionList` holds any objects that have a `remote_id` attribute, in
  insertion order:
  - `add(connection)` returns the index of the new entry.
  - `remove(index)` removes an entry.
  - `get(index)` returns an entry by position.
  - `get_by_remote(remote_id)` and `index_of(remote_id)` look an entry up by
    its remote id.

  Lookups that find nothing return `None`, and `remove` ignores an index it
  does not hold. The list also supports `len()`, iteration and `in`.

### `rastaproto.deferqueue`

- `DeferQueue(max_count)` keeps copies of redundancy packets, sorted with the
  oldest receive time first. Each entry is a `DeferredPacket`.
  - `add(packet, received_timestamp)` returns `False` when the queue is full.
  - `remove(sequence_number)`, `get(sequence_number)` and
    `get_timestamp(sequence_number)` find a packet by its sequence number.
  - `is_full()` and `clear()` do what their names say.
  - `smallest_sequence_index()` returns the index of the packet with the
    smallest sequence number.
  - `oldest` is the entry received first.

## Example

```python
from rastaproto.crc import crc_option_b
from rastaproto.hashing import HashingContext
from rastaproto.factory import create_heartbeat, create_redundancy_packet
from rastaproto.packets import redundancy_packet_to_bytes, redundancy_packet_from_bytes

ctx = HashingContext.from_md4_iv(1, 0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)
heartbeat = create_heartbeat(0x61, 0x62, 5, 4, 1000, 990, ctx)
outer = create_redundancy_packet(0, heartbeat, crc_option_b())

wire = redundancy_packet_to_bytes(outer, ctx)
decoded = redundancy_packet_from_bytes(wire, crc_option_b(), ctx)
assert decoded.checksum_correct and decoded.data.checksum_correct
```

## What it does not do

This package only builds, encodes, decodes and stores packets. It leaves
several things to the caller:

- It opens no sockets and sends or receives nothing over the network.
- It has no redundancy multiplexer that spreads packets over several
  transport channels.
- It has no connection state machine, heartbeat timers or retransmission
  logic.
- It has no configuration file loading.
- It has no command-line program.