"""User SQLAlchemy model and Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from files_manager.db.session import Base


class User(Base):
    """User table: the credential store. Email is the login identifier."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


# Pydantic schemas for API
class TokenResponse(BaseModel):
    """Login response."""

    token: str


class UserResponse(BaseModel):
    """User as returned by API (no password)."""

    id: str
    email: str
