"""File record SQLAlchemy model and Pydantic schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from files_manager.db.session import Base

FOLDER = "folder"
FILE = "file"
IMAGE = "image"
FILE_TYPES = (FOLDER, FILE, IMAGE)

# parent_id of records at the top of the tree
ROOT_ID = "0"


class File(Base):
    """Metadata for a folder, file or image. Content lives on disk at local_path."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(1024), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parent_id: Mapped[str] = mapped_column(String(32), default=ROOT_ID, index=True, nullable=False)
    # Set for file and image records only
    local_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


# Pydantic schemas for API
class FileCreate(BaseModel):
    """
    POST /files body. Fields are accepted as sent; FileDirectory.create checks
    them in a fixed order so every rejection is a 400 with an error message.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[Any] = None
    type: Optional[Any] = None
    parent_id: Optional[Any] = Field(default=None, alias="parentId")
    is_public: Optional[Any] = Field(default=None, alias="isPublic")
    data: Optional[Any] = None  # base64 content, file and image only


class FileResponse(BaseModel):
    """File record as returned by API (camelCase keys, ids as strings)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: str = Field(alias="parentId")

    @classmethod
    def from_record(cls, record: File) -> "FileResponse":
        return cls(
            id=str(record.id),
            user_id=str(record.user_id),
            name=record.name,
            type=record.type,
            is_public=record.is_public,
            parent_id=record.parent_id,
        )


class FileCreateResponse(FileResponse):
    """Response for POST /files: the full stored record, including localPath for content."""

    local_path: Optional[str] = Field(default=None, alias="localPath")

    @classmethod
    def from_record(cls, record: File) -> "FileCreateResponse":
        data = FileResponse.from_record(record).model_dump()
        return cls(**data, local_path=record.local_path)
