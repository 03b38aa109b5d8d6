"""
Local blob storage for uploaded files.

Blobs are written to ``UPLOAD_PATH`` under ``<epoch-millis>_<random>_<safe name>`` and
served back by the static mount at ``/uploads``. Record keeping (who uploaded
what, visibility) is not done here.
"""

import re
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from staffhub.core.config import settings
from staffhub.core.exceptions import ValidationError
from staffhub.core.logging_config import logger


CHUNK_SIZE = 1024 * 1024  # 1MB
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


@dataclass
class StoredBlob:
    original_name: str
    file_name: str
    size: int


def safe_file_name(original_name: str) -> str:
    return _UNSAFE_CHARS.sub("_", original_name)


class UploadStorage:
    """Writes and removes upload blobs on local disk"""

    def __init__(self, upload_dir: Optional[Path] = None, max_size: Optional[int] = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def stored_name(self, original_name: str) -> str:
        return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{safe_file_name(original_name)}"

    def path_for(self, file_name: str) -> Path:
        return self.upload_dir / file_name

    async def save(self, upload: UploadFile) -> StoredBlob:
        """Stream an upload to disk; rejects files above ``max_size``"""
        original_name = upload.filename or "upload"
        file_name = self.stored_name(original_name)
        target = self.path_for(file_name)
        size = 0

        async with aiofiles.open(target, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_size:
                    break
                await out.write(chunk)

        if size > self.max_size:
            await self.delete(file_name)
            raise ValidationError(
                f"File too large. Maximum size is {self.max_size // 1024 // 1024}MB",
                field="file",
            )

        logger.debug(f"Stored upload {original_name} as {file_name} ({size} bytes)")
        return StoredBlob(original_name=original_name, file_name=file_name, size=size)

    async def delete(self, file_name: str) -> bool:
        """Best-effort removal; a missing blob is not an error"""
        try:
            await aiofiles.os.remove(self.path_for(file_name))
            return True
        except OSError as e:
            logger.warning(f"Could not remove upload {file_name}: {e}")
            return False

    @staticmethod
    def public_url(base_url: str, file_name: str) -> str:
        return f"{str(base_url).rstrip('/')}/uploads/{file_name}"


upload_storage = UploadStorage()


def get_upload_storage() -> UploadStorage:
    """FastAPI dependency; overridden in tests"""
    return upload_storage
