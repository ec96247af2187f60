"""FastAPI dependencies for auth."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from files_manager.auth.cache import TokenCache
from files_manager.auth.sessions import SessionManager
from files_manager.config import get_settings
from files_manager.errors import Unauthorized

TOKEN_HEADER = "X-Token"

x_token = APIKeyHeader(name=TOKEN_HEADER, auto_error=False)
log = logging.getLogger(__name__)


def get_token_cache(request: Request) -> TokenCache:
    """Token cache built in the app lifespan."""
    return request.app.state.token_cache


def get_session_manager(
    cache: Annotated[TokenCache, Depends(get_token_cache)],
) -> SessionManager:
    settings = get_settings()
    return SessionManager(
        cache,
        ttl_seconds=settings.token_ttl_seconds,
        key_prefix=settings.token_key_prefix,
    )


async def get_current_user_id(
    token: Annotated[Optional[str], Depends(x_token)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> int:
    """Resolve X-Token to the caller's user id; raise Unauthorized if missing or invalid."""
    return await manager.resolve(token)


async def get_optional_user_id(
    token: Annotated[Optional[str], Depends(x_token)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> Optional[int]:
    """Like get_current_user_id, but a missing or invalid token means an anonymous caller."""
    if not token:
        return None
    try:
        return await manager.resolve(token)
    except Unauthorized:
        log.debug("Ignoring invalid X-Token on anonymous-capable route")
        return None
