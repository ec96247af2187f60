"""User service: credential store lookups and bootstrap user."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.passwords import hash_password
from files_manager.config import get_settings
from files_manager.users.models import User

log = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Return user by email or None."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    """Return user by id or None."""
    return await session.get(User, user_id)


async def count_users(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(User))
    return result.scalar_one()


async def create_user(session: AsyncSession, email: str, password: str) -> User:
    """
    Store a user with a hashed password. Raises ValueError if the email is taken.
    Caller must commit session.
    """
    existing = await get_user_by_email(session, email)
    if existing:
        raise ValueError(f"User already exists: {email}")
    user = User(email=email, password_hash=hash_password(password))
    session.add(user)
    await session.flush()
    return user


async def ensure_bootstrap_user(session: AsyncSession) -> None:
    """
    If FILES_MANAGER_BOOTSTRAP_USER_EMAIL and FILES_MANAGER_BOOTSTRAP_USER_PASSWORD
    are set and no user exists with that email, create it.
    """
    settings = get_settings()
    if not settings.bootstrap_user_email or not settings.bootstrap_user_password:
        return
    existing = await get_user_by_email(session, settings.bootstrap_user_email)
    if existing:
        return
    log.info("Creating bootstrap user email=%s", settings.bootstrap_user_email)
    await create_user(
        session, settings.bootstrap_user_email, settings.bootstrap_user_password
    )
