"""Upload response schemas."""
from typing import Optional

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    message: str = "File uploaded successfully"
    file_id: int
    file_hash: str
    download_url: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
