"""Startup reconciliation between the files table and the upload directory.

Blob writes and metadata inserts are not one transaction. A crash between
them leaves either a blob no row points at, or (after manual tampering) a
row whose blob is gone. Run on startup:

- blobs under the upload directory that no row references are deleted
- rows whose blob is missing are logged, not removed

Blobs modified less than ``min_age`` seconds ago are left alone: with
several workers, another process may have written the blob and not yet
inserted its row.
"""
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles.os
from sqlalchemy.ext.asyncio import AsyncSession

from netdrop.services.blob_store import BlobStore
from netdrop.services.metadata_store import list_all

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    orphaned_blobs: list[str] = field(default_factory=list)
    missing_blobs: list[int] = field(default_factory=list)
    skipped_recent: list[str] = field(default_factory=list)


async def reconcile_storage(
    db: AsyncSession, store: BlobStore, min_age: float = 0
) -> ReconcileReport:
    report = ReconcileReport()
    cutoff = time.time() - min_age
    records = await list_all(db)

    referenced = set()
    for record in records:
        path = Path(record.file_path)
        if store.contains(path):
            referenced.add(path.resolve().name)
        if not await aiofiles.os.path.isfile(path):
            report.missing_blobs.append(record.id)
            logger.warning(
                f"File {record.id} ({record.file_hash[:16]}) has no blob on disk"
            )

    for key in await store.iter_keys():
        if key in referenced:
            continue
        stat = await aiofiles.os.stat(store.path_for(key))
        if stat.st_mtime > cutoff:
            report.skipped_recent.append(key)
            continue
        await store.delete(store.path_for(key))
        report.orphaned_blobs.append(key)
        logger.warning(f"Deleted orphaned blob {key}")

    if report.orphaned_blobs or report.missing_blobs:
        logger.info(
            f"Reconciled storage: {len(report.orphaned_blobs)} orphaned blob(s) removed, "
            f"{len(report.missing_blobs)} record(s) without blob"
        )
    return report
