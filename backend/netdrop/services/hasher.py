"""Content hashing for uploads.

The digest is SHA-256 over the uploaded bytes, optionally followed by the
8 big-endian bytes of a nanosecond timestamp. Salting makes two uploads of
identical content land under different digests, so nothing is deduplicated.

The storage key (on-disk filename) is the first 16 hex characters of the
digest. The full 64-character digest is what gets stored as ``file_hash``.
"""
import hashlib
import time
from typing import Optional

STORAGE_KEY_LENGTH = 16
DIGEST_LENGTH = 64


def compute_digest(content: bytes, timestamp_ns: Optional[int] = None) -> str:
    """Return the lowercase hex SHA-256 of ``content`` (+ timestamp salt)."""
    hasher = hashlib.sha256()
    hasher.update(content)
    if timestamp_ns is not None:
        hasher.update(timestamp_ns.to_bytes(8, "big"))
    return hasher.hexdigest()


def salted_digest(content: bytes) -> str:
    return compute_digest(content, time.time_ns())


def storage_key(digest: str) -> str:
    """Filename used on disk for a digest."""
    return digest[:STORAGE_KEY_LENGTH]
