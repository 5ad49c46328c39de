import hashlib

from netdrop.services.hasher import (
    DIGEST_LENGTH,
    STORAGE_KEY_LENGTH,
    compute_digest,
    salted_digest,
    storage_key,
)

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_empty_input_matches_known_digest():
    assert compute_digest(b"") == EMPTY_SHA256


def test_digest_is_deterministic():
    data = b"Consistent test data"
    assert compute_digest(data) == compute_digest(data)
    assert compute_digest(data, 42) == compute_digest(data, 42)


def test_different_content_gives_different_digests():
    samples = [
        b"This is a text file content.",
        bytes([0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10]),
        b'{"test": "data", "number": 42}',
    ]
    digests = {compute_digest(s) for s in samples}
    assert len(digests) == len(samples)


def test_digest_and_key_lengths():
    digest = compute_digest(b"Hello, World! This is test file content.")
    assert len(digest) == DIGEST_LENGTH == 64
    assert all(c in "0123456789abcdef" for c in digest)
    key = storage_key(digest)
    assert len(key) == STORAGE_KEY_LENGTH == 16
    assert digest.startswith(key)


def test_timestamp_is_appended_big_endian():
    data = b"salted"
    ts = 1_700_000_000_123_456_789
    expected = hashlib.sha256(data + ts.to_bytes(8, "big")).hexdigest()
    assert compute_digest(data, ts) == expected
    assert compute_digest(data, ts) != compute_digest(data)


def test_salted_digest_differs_between_calls():
    data = b"same bytes twice"
    assert salted_digest(data) != salted_digest(data)
