import pytest

from rastaproto.md4 import DEFAULT_IV, Md4, generate_md4


def test_empty_message_reference_digest():
    assert Md4().hexdigest() == "31d6cfe0d16ae931b73c59d7e0c089c0"


def test_abc_reference_digest():
    assert Md4().update(b"abc").hexdigest() == "a448017aaf21d8525fc10ae87aa6729d"


def test_digest_length():
    assert len(Md4().update(b"some data").digest()) == 16


@pytest.mark.parametrize("size", [0, 1, 55, 56, 63, 64, 65, 127, 128, 1000])
def test_incremental_matches_one_shot(size):
    data = bytes(i % 251 for i in range(size))
    one_shot = Md4().update(data).digest()
    incremental = Md4()
    for start in range(0, size, 7):
        incremental.update(data[start:start + 7])
    assert incremental.digest() == one_shot


def test_digest_does_not_consume_state():
    hasher = Md4().update(b"partial")
    first = hasher.digest()
    assert hasher.digest() == first
    hasher.update(b" more")
    assert hasher.digest() == Md4().update(b"partial more").digest()


def test_explicit_default_iv_matches_default():
    assert Md4(DEFAULT_IV).update(b"x").digest() == Md4().update(b"x").digest()


def test_custom_iv_changes_digest():
    custom = (1, 2, 3, 4)
    assert Md4(custom).update(b"x").digest() != Md4().update(b"x").digest()
    assert Md4(custom).update(b"x").digest() == Md4(custom).update(b"x").digest()


def test_iv_must_have_four_words():
    with pytest.raises(ValueError):
        Md4((1, 2, 3))


def test_type_zero_gives_eight_zero_bytes():
    assert generate_md4(b"payload", 0) == bytes(8)


def test_type_two_is_full_digest():
    assert generate_md4(b"abc", 2) == Md4().update(b"abc").digest()


def test_type_one_is_lower_half_of_type_two():
    full = generate_md4(b"payload", 2)
    assert generate_md4(b"payload", 1) == full[:8]


def test_generate_uses_given_iv():
    iv = (0x11111111, 0x22222222, 0x33333333, 0x44444444)
    assert generate_md4(b"payload", 2, iv) == Md4(iv).update(b"payload").digest()


@pytest.mark.parametrize("hash_type", [-1, 3, 8])
def test_invalid_type_raises(hash_type):
    with pytest.raises(ValueError):
        generate_md4(b"payload", hash_type)