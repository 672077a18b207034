"""Local filesystem storage for uploaded PDFs.

Storage layout:
    <upload_dir>/<user_id>/<uuid>.pdf
"""

import asyncio
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """Result of storing a single file on disk."""

    stored_path: str
    filename: str
    file_size: int


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalFileStorage:
    """Stores uploaded files under per-user directories."""

    def __init__(self, upload_dir: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    async def store_pdf(self, content: bytes, user_id: str) -> StoredFile:
        """Store a PDF under a generated name so uploads never collide."""
        user_dir = self._upload_dir / _sanitise(user_id)
        user_dir.mkdir(parents=True, exist_ok=True)

        stored_name = f"{uuid.uuid4()}.pdf"
        dest_path = user_dir / stored_name
        await asyncio.to_thread(dest_path.write_bytes, content)

        logger.info(f"Stored file: {dest_path} ({len(content)} bytes)")

        return StoredFile(
            stored_path=str(dest_path),
            filename=stored_name,
            file_size=len(content),
        )

    async def read(self, stored_path: str) -> bytes:
        """Read a stored file.

        Raises:
            FileNotFoundError: If the file is missing.
        """
        return await asyncio.to_thread(Path(stored_path).read_bytes)

    async def delete(self, stored_path: str) -> bool:
        """Delete a stored file. Returns False if it was already gone."""
        path = Path(stored_path)
        if not path.exists():
            logger.warning(f"Stored file already missing: {path}")
            return False
        path.unlink()
        logger.info(f"Deleted file: {path}")
        return True


_storage: LocalFileStorage | None = None


def get_file_storage() -> LocalFileStorage:
    """Get or create the global file storage."""
    global _storage
    if _storage is None:
        from studynotes.config import get_app_config

        _storage = LocalFileStorage(get_app_config().upload_dir)
    return _storage
