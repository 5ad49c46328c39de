"""Upload pipeline: read the request body, hash, write the blob, insert metadata.

Two request encodings are accepted on the same route:
- ``multipart/form-data`` with a ``file`` field (content + optional filename)
- anything else: the raw body is the file content, and the optional
  ``X-File-Name`` header carries the original filename
"""
import logging
from typing import Optional

from fastapi import Request
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from sqlalchemy.ext.asyncio import AsyncSession

from netdrop.config import settings
from netdrop.exceptions import EmptyPayloadError, PayloadTooLargeError, ValidationError
from netdrop.models.file_record import FileRecord
from netdrop.services.blob_store import BlobStore, blob_store
from netdrop.services.hasher import compute_digest, salted_digest, storage_key
from netdrop.services.metadata_store import insert_file

logger = logging.getLogger(__name__)

FILE_FIELD = "file"
FILE_NAME_HEADER = "x-file-name"
MULTIPART_FORM_DATA = b"multipart/form-data"


def clean_filename(name: Optional[str]) -> Optional[str]:
    """Strip any client-side directory part from a filename."""
    if not name:
        return None
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    return base or None


def _decode_header_value(value: bytes) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("latin-1")


class FilePartCollector:
    """Multipart callbacks that keep the bytes of the ``file`` part only.

    The part is kept as raw bytes whether or not it carries a filename.
    Other parts are parsed and dropped.
    """

    def __init__(self, field_name: str = FILE_FIELD):
        self.field_name = field_name.encode("latin-1")
        self.content: Optional[bytearray] = None
        self.filename: Optional[str] = None
        self.ended = False
        self._capturing = False
        self._header_field = b""
        self._header_value = b""
        self._disposition = b""

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self._capturing = False
        self._disposition = b""

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        if self._header_field.strip().lower() == b"content-disposition":
            self._disposition = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._disposition)
        # First ``file`` part wins
        if options.get(b"name") != self.field_name or self.content is not None:
            return
        self.content = bytearray()
        self._capturing = True
        raw_name = options.get(b"filename")
        if raw_name is not None:
            self.filename = clean_filename(_decode_header_value(raw_name))

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._capturing:
            self.content.extend(data[start:end])

    def on_part_end(self) -> None:
        self._capturing = False

    def on_end(self) -> None:
        self.ended = True


def _check_declared_length(request: Request, max_bytes: int) -> None:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLargeError()


async def _read_raw(request: Request, max_bytes: int) -> bytes:
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise PayloadTooLargeError()
    return bytes(body)


async def _read_multipart(
    request: Request, options: dict, max_bytes: int
) -> tuple[bytes, Optional[str]]:
    boundary = options.get(b"boundary")
    if not boundary:
        raise ValidationError("Missing boundary in multipart Content-Type")

    collector = FilePartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        async for chunk in request.stream():
            parser.write(chunk)
            if collector.content is not None and len(collector.content) > max_bytes:
                raise PayloadTooLargeError()
        parser.finalize()
    except MultipartParseError as e:
        logger.info("Rejected malformed multipart upload: %s", e)
        raise ValidationError("Malformed multipart body") from e

    if not collector.ended:
        logger.info("Rejected truncated multipart upload")
        raise ValidationError("Malformed multipart body")
    if collector.content is None:
        raise ValidationError(f"Missing '{FILE_FIELD}' field in multipart body")
    return bytes(collector.content), collector.filename


async def read_upload(request: Request, max_bytes: int) -> tuple[bytes, Optional[str]]:
    """Return (content, original filename or None) from either encoding.

    Raises PayloadTooLargeError above ``max_bytes`` and EmptyPayloadError
    for a zero-byte upload.
    """
    _check_declared_length(request, max_bytes)

    media_type, options = parse_options_header(request.headers.get("content-type"))
    if media_type.lower() == MULTIPART_FORM_DATA:
        content, filename = await _read_multipart(request, options, max_bytes)
    else:
        content = await _read_raw(request, max_bytes)
        filename = clean_filename(request.headers.get(FILE_NAME_HEADER))

    if not content:
        raise EmptyPayloadError()
    return content, filename


async def store_upload(
    db: AsyncSession,
    content: bytes,
    original_name: Optional[str] = None,
    *,
    store: BlobStore = blob_store,
    salt: bool = settings.HASH_SALT_TIMESTAMP,
) -> FileRecord:
    """Hash ``content``, write the blob and insert its metadata row.

    The blob goes first. If the insert fails the blob is removed again so
    no orphan is left behind; a crash in between is cleaned up by the
    startup reconciliation pass.
    """
    digest = salted_digest(content) if salt else compute_digest(content)
    key = storage_key(digest)
    path = await store.write(key, content)

    try:
        record = await insert_file(
            db,
            file_hash=digest,
            file_name=original_name or key,
            file_path=str(path),
            size=len(content),
            private=True,
        )
    except Exception:
        await store.delete(path)
        raise

    logger.info("Stored upload %s (%d bytes) as file %d", key, record.size, record.id)
    return record
