"""Session tokens: login with Basic credentials, resolve and revoke X-Token values."""

import base64
import binascii
import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.cache import TokenCache
from files_manager.auth.passwords import verify_password
from files_manager.errors import (
    AuthenticationFailed,
    InvalidCredentialFormat,
    InvalidOrExpiredToken,
    MissingToken,
)
from files_manager.users.service import get_user_by_email

log = logging.getLogger(__name__)

BASIC_SCHEME = "Basic "


def decode_basic_credentials(authorization: Optional[str]) -> Tuple[str, str]:
    """
    Return (email, password) from an ``Authorization: Basic ...`` header value.
    The decoded text is split on the first colon, so passwords may contain ':'.
    Raises InvalidCredentialFormat for a missing or malformed header.
    """
    if not authorization or not authorization.startswith(BASIC_SCHEME):
        raise InvalidCredentialFormat()
    encoded = authorization[len(BASIC_SCHEME):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise InvalidCredentialFormat()
    email, sep, password = decoded.partition(":")
    if not sep or not email or not password:
        raise InvalidCredentialFormat()
    return email, password


class SessionManager:
    """Issues, resolves and revokes opaque session tokens kept in the token cache."""

    def __init__(self, cache: TokenCache, ttl_seconds: int, key_prefix: str = "auth_") -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}{token}"

    async def login(self, session: AsyncSession, authorization: Optional[str]) -> str:
        """Check Basic credentials against the credential store and issue a new token."""
        email, password = decode_basic_credentials(authorization)
        user = await get_user_by_email(session, email)
        if not user or not verify_password(password, user.password_hash):
            log.warning("Login failed for email=%s", email)
            raise AuthenticationFailed()
        token = str(uuid.uuid4())
        await self.cache.set(self._key(token), str(user.id), self.ttl_seconds)
        log.info("Login successful for email=%s user_id=%s", user.email, user.id)
        return token

    async def resolve(self, token: Optional[str]) -> int:
        """Return the user id bound to token. Does not touch the key's TTL."""
        if not token:
            raise MissingToken()
        value = await self.cache.get(self._key(token))
        if value is None:
            raise InvalidOrExpiredToken()
        try:
            return int(value)
        except ValueError:
            log.error("Token cache holds a non-numeric user id under %s", self.key_prefix)
            raise InvalidOrExpiredToken()

    async def revoke(self, token: Optional[str]) -> None:
        """Delete the token. A token that is already gone is reported as invalid."""
        if not token:
            raise MissingToken()
        removed = await self.cache.delete(self._key(token))
        if not removed:
            raise InvalidOrExpiredToken()
        log.info("Session revoked")
