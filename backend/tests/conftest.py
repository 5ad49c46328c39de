"""Shared fixtures.

Settings are read once at import, so the environment has to point at a
scratch directory before anything under ``netdrop`` is imported.
"""
import os
import tempfile

_DATA_DIR = tempfile.mkdtemp(prefix="netdrop-test-")
os.environ["DATA_DIR"] = _DATA_DIR
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DATA_DIR}/netdrop-test.db"
os.environ["RECONCILE_ON_STARTUP"] = "false"
os.environ["HASH_SALT_TIMESTAMP"] = "true"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from netdrop.main import app
from netdrop.models import Base
from netdrop.services.blob_store import BlobStore


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(tmp_path):
    return BlobStore(tmp_path / "uploads")


@pytest_asyncio.fixture
async def db(tmp_path):
    """A session on a throwaway SQLite database with the schema created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'meta.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()
