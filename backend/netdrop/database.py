"""Async SQLAlchemy engine and session factory.

Usage in routes:
    from netdrop.database import get_db

    @router.get("/download/{file_hash}")
    async def download_file(file_hash: str, db: AsyncSession = Depends(get_db)):
        record = await find_by_hash(db, file_hash)
"""
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from netdrop.config import settings


def _engine_options(url: str) -> dict:
    # SQLite pools reject pool_size/max_overflow
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 10, "max_overflow": 20}


engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
    **_engine_options(settings.database_url),
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with async_session() as session:
        yield session
