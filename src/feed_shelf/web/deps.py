# ABOUTME: FastAPI dependencies exposing app-scoped services to route handlers.
# ABOUTME: Includes the bearer-token gate that resolves the caller's user id.

import structlog
from fastapi import Depends, Header, HTTPException, Request

from feed_shelf.config import Settings
from feed_shelf.errors import AuthError, AuthMissing
from feed_shelf.services.identity import IdentityService
from feed_shelf.services.storage import FeedStore
from feed_shelf.services.tokens import TokenVerifier, bearer_token

log = structlog.get_logger()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_verifier(request: Request) -> TokenVerifier:
    return request.app.state.verifier


def get_store(request: Request) -> FeedStore:
    return request.app.state.store


def get_identity(request: Request) -> IdentityService:
    return request.app.state.identity


async def current_user_id(
    authorization: str | None = Header(None),
    verifier: TokenVerifier = Depends(get_verifier),
) -> str:
    """Resolve the caller's user id from the bearer token, or fail with 401."""
    try:
        user_id = verifier.verify(bearer_token(authorization))
    except AuthMissing as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except AuthError as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e

    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
