"""Session routes: connect, disconnect, me."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import (
    get_current_user_id,
    get_session_manager,
    x_token,
)
from files_manager.auth.sessions import SessionManager
from files_manager.db.session import get_db
from files_manager.errors import InvalidOrExpiredToken
from files_manager.limiter import limiter
from files_manager.users.models import TokenResponse, UserResponse
from files_manager.users.service import get_user_by_id

router = APIRouter(tags=["users"])
log = logging.getLogger(__name__)


@router.get("/connect", response_model=TokenResponse)
@limiter.limit("10/minute")
async def connect(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> TokenResponse:
    """Sign in with ``Authorization: Basic base64(email:password)``; returns a 24h token."""
    token = await manager.login(session, request.headers.get("Authorization"))
    return TokenResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def disconnect(
    token: Annotated[Optional[str], Depends(x_token)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Response:
    """Sign out: the X-Token stops working immediately."""
    await manager.revoke(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/me", response_model=UserResponse)
async def me(
    user_id: Annotated[int, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Return the user behind the X-Token."""
    user = await get_user_by_id(session, user_id)
    if not user:
        log.warning("Token valid but user not found: user_id=%s", user_id)
        raise InvalidOrExpiredToken()
    return UserResponse(id=str(user.id), email=user.email)
