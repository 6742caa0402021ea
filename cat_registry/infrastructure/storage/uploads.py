"""Local disk storage for cat pictures."""

from __future__ import annotations

import uuid
from pathlib import Path

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from cat_registry.core.config import Settings
from cat_registry.domain.errors import InputValidationError

logger = structlog.get_logger(__name__)


class UploadStore:
    """Saves uploaded images under a generated name and returns that name."""

    def __init__(self, directory: str | Path, *, max_bytes: int) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> UploadStore:
        return cls(settings.upload_dir, max_bytes=settings.max_upload_bytes)

    async def save(self, upload: UploadFile | None) -> str:
        """Persist ``upload`` and return its stored filename, or ``""`` without one."""
        if upload is None or not upload.filename:
            return ""

        content_type = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise InputValidationError.single("file", "only image uploads are accepted")

        # One byte past the limit is enough to reject
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise InputValidationError.single(
                "file", f"file exceeds the {self.max_bytes} byte limit"
            )

        filename = f"{uuid.uuid4().hex}{Path(upload.filename).suffix.lower()}"
        await run_in_threadpool(self._write, filename, content)
        await logger.ainfo("upload_stored", filename=filename, size=len(content))
        return filename

    async def discard(self, filename: str) -> None:
        """Remove a stored upload whose record never made it to the database."""
        await run_in_threadpool((self.directory / filename).unlink, missing_ok=True)
        await logger.ainfo("upload_discarded", filename=filename)

    def _write(self, filename: str, content: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / filename).write_bytes(content)
