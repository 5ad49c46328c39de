"""Error taxonomy for the upload/download pipeline.

Every error carries the HTTP status it maps to and a short client-safe
message. Internal detail (paths, OS errors) goes to the log, never into
``detail``.
"""
from fastapi import status


class NetdropError(Exception):
    """Base error for the service."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class ValidationError(NetdropError):
    """Malformed request: bad multipart body, missing boundary or field."""

    def __init__(self, detail: str = "Invalid upload request"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class EmptyPayloadError(ValidationError):
    def __init__(self, detail: str = "No data received: upload is empty"):
        super().__init__(detail)


class PayloadTooLargeError(NetdropError):
    def __init__(self, detail: str = "Upload exceeds the maximum allowed size"):
        super().__init__(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail)


class NotFoundError(NetdropError):
    def __init__(self, detail: str = "File not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class StorageError(NetdropError):
    """Filesystem failure while writing or reading a blob."""

    def __init__(self, detail: str = "Storage error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class BlobNotFoundError(StorageError):
    def __init__(self, detail: str = "Stored file is missing"):
        super().__init__(detail)


class ConsistencyError(StorageError):
    """A metadata row points at a blob that cannot be read."""

    def __init__(self, detail: str = "Stored file is unavailable"):
        super().__init__(detail)


class CollisionError(NetdropError):
    """The storage key is already taken on disk."""

    def __init__(self, detail: str = "Storage key collision, please retry"):
        super().__init__(status.HTTP_409_CONFLICT, detail)
