"""Import all models so SQLAlchemy metadata knows about them."""
from netdrop.models.base import Base
from netdrop.models.file_record import FileRecord

__all__ = ["Base", "FileRecord"]
