# ABOUTME: Auth passthrough routes: signup and signin via Supabase Auth, plus whoami.
# ABOUTME: Whoami decodes the caller's own token locally without calling Supabase.

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse

from feed_shelf.errors import (
    AuthError,
    AuthExpired,
    AuthMissing,
    IdentityRejected,
    UpstreamError,
)
from feed_shelf.models import Credentials
from feed_shelf.services.identity import IdentityService
from feed_shelf.services.tokens import TokenVerifier, bearer_token
from feed_shelf.web.deps import get_identity, get_verifier

log = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup")
async def signup(credentials: Credentials, identity: IdentityService = Depends(get_identity)):
    """Register a new user with Supabase Auth."""
    try:
        user = await identity.sign_up(credentials.email, credentials.password)
    except IdentityRejected as e:
        return JSONResponse({"error": e.message}, status_code=401)
    except UpstreamError as e:
        raise HTTPException(status_code=500, detail="Internal server error") from e
    return {"user": user}


@router.post("/signin")
async def signin(credentials: Credentials, identity: IdentityService = Depends(get_identity)):
    """Password sign-in; returns the user and its access token."""
    try:
        user, access_token = await identity.sign_in(credentials.email, credentials.password)
    except IdentityRejected as e:
        return JSONResponse({"error": e.message}, status_code=401)
    except UpstreamError as e:
        log.error("signin_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error") from e
    return {"user": user, "session": access_token}


@router.get("/user")
async def whoami(
    authorization: str | None = Header(None),
    verifier: TokenVerifier = Depends(get_verifier),
):
    """Return the caller's verified token claims as the user object."""
    try:
        claims = verifier.decode(bearer_token(authorization))
    except AuthMissing as e:
        raise HTTPException(status_code=401, detail="No token provided") from e
    except AuthExpired as e:
        raise HTTPException(status_code=401, detail="Token expired") from e
    except AuthError as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e
    return {"user": claims}
