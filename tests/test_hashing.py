import hashlib

import pytest

from rastaproto.hashing import HashAlgorithm, HashingContext, generate_blake2
from rastaproto.md4 import DEFAULT_IV, generate_md4


def test_blake2_matches_reference_implementation():
    key = b"\x01\x02\x03\x04"
    expected = hashlib.blake2b(b"abc", digest_size=16, key=key).digest()
    assert generate_blake2(b"abc", key, 2) == expected


def test_blake2_without_key_matches_reference():
    expected = hashlib.blake2b(b"payload", digest_size=8).digest()
    assert generate_blake2(b"payload", b"", 1) == expected


def test_blake2_type_zero_gives_zero_bytes():
    assert generate_blake2(b"payload", b"k", 0) == bytes(8)


@pytest.mark.parametrize("hash_type", [1, 2, 4, 8])
def test_blake2_length(hash_type):
    assert len(generate_blake2(b"payload", b"k", hash_type)) == hash_type * 8


def test_blake2_rejects_long_key():
    with pytest.raises(ValueError):
        generate_blake2(b"payload", bytes(65), 1)


@pytest.mark.parametrize("hash_type", [-1, 9])
def test_blake2_rejects_bad_type(hash_type):
    with pytest.raises(ValueError):
        generate_blake2(b"payload", b"k", hash_type)


def test_md4_iv_round_trip():
    context = HashingContext.from_md4_iv(2, *DEFAULT_IV)
    assert context.algorithm is HashAlgorithm.MD4
    assert context.md4_iv() == DEFAULT_IV
    assert len(context.key) == 16


def test_md4_context_calculates_with_its_iv():
    iv = (0x11111111, 0x22222222, 0x33333333, 0x44444444)
    context = HashingContext.from_md4_iv(1, *iv)
    assert context.calculate(b"payload") == generate_md4(b"payload", 1, iv)


def test_md4_context_with_default_iv_equals_plain_md4():
    context = HashingContext.from_md4_iv(2, *DEFAULT_IV)
    assert context.calculate(b"abc") == generate_md4(b"abc", 2)


def test_md4_context_type_zero():
    context = HashingContext.from_md4_iv(0, *DEFAULT_IV)
    assert context.calculate(b"payload") == bytes(8)


def test_integer_key_is_big_endian():
    context = HashingContext.from_key(1, HashAlgorithm.BLAKE2B, 0x01020304)
    assert context.key == b"\x01\x02\x03\x04"


def test_blake2_context_uses_key():
    context = HashingContext.from_key(2, HashAlgorithm.BLAKE2B, b"\x0a\x0b\x0c\x0d")
    assert context.calculate(b"payload") == generate_blake2(b"payload", b"\x0a\x0b\x0c\x0d", 2)


def test_different_keys_give_different_codes():
    first = HashingContext.from_key(1, HashAlgorithm.BLAKE2B, 1)
    second = HashingContext.from_key(1, HashAlgorithm.BLAKE2B, 2)
    assert first.calculate(b"payload") != second.calculate(b"payload")


def test_md4_iv_requires_long_enough_key():
    context = HashingContext.from_key(1, HashAlgorithm.MD4, 0x01020304)
    with pytest.raises(ValueError):
        context.md4_iv()


def test_algorithm_given_as_int_is_converted():
    context = HashingContext.from_key(1, 1, b"k")
    assert context.algorithm is HashAlgorithm.BLAKE2B