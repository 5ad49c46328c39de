from netdrop.services.metadata_store import find_by_hash, insert_file, list_all


async def test_insert_assigns_id_and_timestamp(db):
    record = await insert_file(
        db,
        file_hash="test_hash_123456789",
        file_name="test_file",
        file_path="/tmp/test_file",
        size=1024,
    )
    assert record.id > 0
    assert record.created_at is not None
    assert record.file_hash == "test_hash_123456789"
    assert record.file_name == "test_file"
    assert record.file_path == "/tmp/test_file"
    assert record.size == 1024
    assert record.private is True


async def test_ids_increase(db):
    first = await insert_file(db, file_hash="h1", file_name="a", file_path="/tmp/a", size=1)
    second = await insert_file(db, file_hash="h2", file_name="b", file_path="/tmp/b", size=2)
    assert second.id > first.id


async def test_find_by_hash_existing(db):
    created = await insert_file(
        db,
        file_hash="existing_hash_123",
        file_name="existing_file",
        file_path="/tmp/existing_file",
        size=2048,
        private=False,
    )
    found = await find_by_hash(db, "existing_hash_123")
    assert found is not None
    assert found.id == created.id
    assert found.file_name == "existing_file"
    assert found.private is False


async def test_find_by_hash_missing(db):
    assert await find_by_hash(db, "nonexistent_hash") is None


async def test_duplicate_hash_returns_first_row(db):
    first = await insert_file(db, file_hash="dup", file_name="one", file_path="/tmp/1", size=1)
    await insert_file(db, file_hash="dup", file_name="two", file_path="/tmp/2", size=1)
    found = await find_by_hash(db, "dup")
    assert found.id == first.id


async def test_list_all_in_id_order(db):
    for name in ("x", "y", "z"):
        await insert_file(db, file_hash=name, file_name=name, file_path=f"/tmp/{name}", size=1)
    assert [r.file_name for r in await list_all(db)] == ["x", "y", "z"]
