"""Blob storage on the local filesystem, one file per upload."""
import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from netdrop.config import settings
from netdrop.exceptions import BlobNotFoundError, CollisionError, StorageError

logger = logging.getLogger(__name__)


class BlobStore:
    """Reads and writes raw upload bytes under a single root directory.

    Writes use exclusive create: an existing file at the target path is
    never overwritten and raises ``CollisionError`` instead.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / key

    def contains(self, path: str | Path) -> bool:
        """True when ``path`` resolves to a location under the root."""
        try:
            Path(path).resolve().relative_to(self.root.resolve())
        except ValueError:
            return False
        return True

    async def write(self, key: str, content: bytes) -> Path:
        """Create the root if needed and write ``content`` to ``root/key``."""
        try:
            await aiofiles.os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create upload directory %s: %s", self.root, e)
            raise StorageError("Could not prepare storage") from e

        path = self.path_for(key)
        try:
            async with aiofiles.open(path, "xb") as f:
                await f.write(content)
        except FileExistsError as e:
            logger.warning("Storage key %s already exists on disk", key)
            raise CollisionError() from e
        except OSError as e:
            logger.error("Failed writing blob %s: %s", path, e)
            await self.delete(path)
            raise StorageError("Could not store file") from e
        return path

    async def read(self, path: str | Path) -> bytes:
        """Read back the exact bytes stored at ``path``."""
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise BlobNotFoundError() from e
        except OSError as e:
            logger.error("Failed reading blob %s: %s", path, e)
            raise StorageError("Could not read file") from e

    async def delete(self, path: str | Path) -> None:
        """Remove a blob if it exists."""
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Failed deleting blob %s: %s", path, e)

    async def iter_keys(self) -> list[str]:
        """Names of the regular files currently stored under the root."""
        if not await aiofiles.os.path.isdir(self.root):
            return []
        keys = []
        for name in await aiofiles.os.listdir(self.root):
            if await aiofiles.os.path.isfile(self.root / name):
                keys.append(name)
        return sorted(keys)


blob_store = BlobStore(settings.upload_dir)
