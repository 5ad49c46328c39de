"""FileRecord model - upload metadata (actual bytes live under DATA_DIR/uploads)."""
from sqlalchemy import Boolean, Integer, String, BigInteger, true
from sqlalchemy.orm import Mapped, mapped_column
from netdrop.models.base import Base, CreatedAtMixin


class FileRecord(Base, CreatedAtMixin):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Not unique: lookups take the lowest id when hashes repeat
    file_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
