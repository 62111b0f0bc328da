# ABOUTME: FastAPI route handlers for OPML upload and per-user feed listing.
# ABOUTME: Both routes sit behind the bearer-token gate.

import asyncio

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from feed_shelf.config import Settings
from feed_shelf.errors import OpmlError, UpstreamError
from feed_shelf.services.opml import parse_opml
from feed_shelf.services.storage import FeedStore
from feed_shelf.services.uploads import read_text, spooled_upload
from feed_shelf.web.deps import current_user_id, get_app_settings, get_store

log = structlog.get_logger()
router = APIRouter()


@router.post("/upload")
async def upload_opml(
    file: UploadFile | None = File(None),
    user_id: str = Depends(current_user_id),
    store: FeedStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Import an OPML file as feed records owned by the caller."""
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    try:
        async with spooled_upload(file, settings.upload_dir) as path:
            content = await asyncio.to_thread(read_text, path)
            feeds = parse_opml(content)
            records = [feed.for_user(user_id) for feed in feeds]
            data = await store.insert_feeds(records) if records else []
    except (OpmlError, UpstreamError, OSError) as e:
        log.error("upload_failed", user_id=user_id, filename=file.filename, error=str(e))
        raise HTTPException(status_code=500, detail="Error processing file") from e

    log.info("upload_processed", user_id=user_id, count=len(records))
    return {"message": "File processed successfully", "data": data}


@router.get("/feeds")
async def list_feeds(
    user_id: str = Depends(current_user_id),
    store: FeedStore = Depends(get_store),
):
    """Feed records owned by the caller."""
    try:
        return await store.list_feeds(user_id)
    except UpstreamError as e:
        log.error("feeds_list_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Server Error") from e
