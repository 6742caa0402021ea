from __future__ import annotations

import io
from pathlib import Path

import pytest
from starlette.datastructures import Headers, UploadFile

from cat_registry.domain import InputValidationError
from cat_registry.infrastructure.storage import UploadStore

pytestmark = pytest.mark.asyncio


class RecordingBuffer(io.BytesIO):
    """BytesIO that remembers the sizes it was asked to read."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.requested: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.requested.append(size)
        return super().read(size)


def image(data: bytes, filename: str = "mittens.png") -> UploadFile:
    return UploadFile(
        file=RecordingBuffer(data),
        filename=filename,
        headers=Headers({"content-type": "image/png"}),
    )


async def test_save_and_discard(tmp_path: Path) -> None:
    store = UploadStore(tmp_path, max_bytes=64)

    filename = await store.save(image(b"\x89PNG"))
    assert (tmp_path / filename).read_bytes() == b"\x89PNG"

    await store.discard(filename)
    assert not (tmp_path / filename).exists()


async def test_oversized_upload_is_not_read_whole(tmp_path: Path) -> None:
    store = UploadStore(tmp_path, max_bytes=16)
    upload = image(b"\x00" * 4096)

    with pytest.raises(InputValidationError):
        await store.save(upload)

    assert upload.file.requested == [17]
    assert list(tmp_path.iterdir()) == []


async def test_missing_upload_has_no_reference(tmp_path: Path) -> None:
    assert await UploadStore(tmp_path, max_bytes=16).save(None) == ""
