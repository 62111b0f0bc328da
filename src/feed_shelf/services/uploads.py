# ABOUTME: Per-request spooling of uploaded files to a temporary path on disk.
# ABOUTME: The spooled file is deleted on every exit path, success or failure.

import asyncio
import shutil
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import UploadFile

log = structlog.get_logger()


def _spool(upload: UploadFile, directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    upload.file.seek(0)
    with tempfile.NamedTemporaryFile(dir=directory, suffix=".opml", delete=False) as tmp:
        path = Path(tmp.name)
        try:
            shutil.copyfileobj(upload.file, tmp)
        except OSError:
            tmp.close()
            path.unlink(missing_ok=True)
            raise
    return path


def read_text(path: Path) -> str:
    """Read a spooled upload as UTF-8, replacing undecodable bytes."""
    return path.read_text(encoding="utf-8", errors="replace")


@asynccontextmanager
async def spooled_upload(upload: UploadFile, directory: Path) -> AsyncGenerator[Path]:
    """Write an upload under directory and yield its path, removing it afterwards."""
    path = await asyncio.to_thread(_spool, upload, directory)
    log.info("upload_spooled", filename=upload.filename, path=str(path))
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        log.info("upload_removed", path=str(path))
