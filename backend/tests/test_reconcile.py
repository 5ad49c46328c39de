import os
import time

from netdrop.services.metadata_store import insert_file
from netdrop.services.reconcile import reconcile_storage


def _age(path, seconds):
    past = time.time() - seconds
    os.utime(path, (past, past))


async def test_reconcile_removes_orphans_and_flags_missing(db, store):
    kept = await store.write("keep000000000000", b"referenced")
    await insert_file(db, file_hash="keep" * 16, file_name="kept", file_path=str(kept), size=10)

    orphan = await store.write("orphan0000000000", b"no row")
    _age(orphan, 3600)
    missing = await insert_file(
        db,
        file_hash="gone" * 16,
        file_name="gone",
        file_path=str(store.path_for("gone000000000000")),
        size=4,
    )

    report = await reconcile_storage(db, store, min_age=300)

    assert report.orphaned_blobs == ["orphan0000000000"]
    assert report.missing_blobs == [missing.id]
    assert kept.exists()
    assert not orphan.exists()


async def test_reconcile_leaves_recent_blobs_alone(db, store):
    # Another worker may have written this and not inserted its row yet
    in_flight = await store.write("inflight00000000", b"row pending")

    report = await reconcile_storage(db, store, min_age=300)

    assert report.orphaned_blobs == []
    assert report.skipped_recent == ["inflight00000000"]
    assert in_flight.exists()


async def test_reconcile_on_empty_storage(db, store):
    report = await reconcile_storage(db, store)
    assert report.orphaned_blobs == []
    assert report.missing_blobs == []
