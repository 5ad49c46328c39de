"""Access to the files table."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from netdrop.models.file_record import FileRecord


async def insert_file(
    db: AsyncSession,
    *,
    file_hash: str,
    file_name: str,
    file_path: str,
    size: int,
    private: bool = True,
) -> FileRecord:
    """Insert a row and return it with id and created_at populated.

    Database errors are not caught here; they abort the request.
    """
    record = FileRecord(
        file_hash=file_hash,
        file_name=file_name,
        file_path=file_path,
        size=size,
        private=private,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


async def find_by_hash(db: AsyncSession, file_hash: str) -> Optional[FileRecord]:
    """First record (lowest id) with this hash, or None."""
    result = await db.execute(
        select(FileRecord)
        .where(FileRecord.file_hash == file_hash)
        .order_by(FileRecord.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_all(db: AsyncSession) -> list[FileRecord]:
    result = await db.execute(select(FileRecord).order_by(FileRecord.id))
    return list(result.scalars().all())
