"""
File Storage

Archive for raw voice clips. Files are grouped by folder id:
- {archive_dir}/{folder_id}/voice_{epoch_ms}_{suffix}.{ext}
"""

import asyncio
import logging
import time
import uuid
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """
    Local file system blob store.

    `folder_id` plays the role of the remote folder identifier; it becomes a
    sub-directory of the archive root.
    """

    def __init__(self, archive_dir: str = "./data/voice", folder_id: str = "inbox"):
        self.archive_dir = Path(archive_dir)
        self.folder_id = folder_id

    @property
    def folder_path(self) -> Path:
        return self.archive_dir / self.folder_id

    async def create_file(self, name: str, content: bytes, mime_type: Optional[str] = None) -> str:
        """
        Store content under name in the configured folder.

        Returns:
            Path of the stored file
        """
        path = await asyncio.to_thread(self._write, name, content)
        logger.info(f"Archived {len(content)} bytes ({mime_type or 'unknown type'}) to {path}")
        return str(path)

    def _write(self, name: str, content: bytes) -> Path:
        self.folder_path.mkdir(parents=True, exist_ok=True)
        path = self.folder_path / name
        with open(path, "wb") as f:
            f.write(content)
        return path

    async def archive_clip(self, content: bytes, extension: str = "m4a") -> str:
        """Store a raw voice clip under a timestamped name."""
        name = f"voice_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}.{extension}"
        return await self.create_file(name, content, mime_type=f"audio/{extension}")
