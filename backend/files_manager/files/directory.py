"""File directory: the folder/file metadata tree, scoped by owner and visibility."""

import logging
from typing import List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.errors import (
    MissingData,
    MissingName,
    MissingType,
    NotFound,
    ParentIsNotAFolder,
    ParentNotFound,
)
from files_manager.files.models import FILE_TYPES, FOLDER, ROOT_ID, File, FileCreate
from files_manager.files.storage import ContentStore

log = logging.getLogger(__name__)

PAGE_SIZE = 20


def normalize_parent_id(parent_id: Optional[Union[int, str]]) -> str:
    """Map missing, empty and zero parent ids to the root sentinel; stringify the rest."""
    if parent_id is None:
        return ROOT_ID
    value = str(parent_id).strip()
    if not value or value == ROOT_ID:
        return ROOT_ID
    return value


def _parse_id(file_id: Union[int, str]) -> Optional[int]:
    try:
        return int(file_id)
    except (TypeError, ValueError):
        return None


async def count_files(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(File))
    return result.scalar_one()


class FileDirectory:
    """Create, look up, list and publish file records for an authenticated caller."""

    def __init__(self, session: AsyncSession, content: ContentStore, page_size: int = PAGE_SIZE) -> None:
        self.session = session
        self.content = content
        self.page_size = page_size

    async def _get(self, file_id: Union[int, str]) -> Optional[File]:
        record_id = _parse_id(file_id)
        if record_id is None:
            return None
        return await self.session.get(File, record_id)

    async def create(self, caller_id: int, payload: FileCreate) -> File:
        """
        Validate payload, write content (file/image) and insert the record.
        Checks run in order: name, type, data, parent. The blob is written before
        the record is inserted, so a failed write leaves no record behind.
        """
        if not payload.name or not isinstance(payload.name, str):
            raise MissingName()
        if not isinstance(payload.type, str) or payload.type not in FILE_TYPES:
            raise MissingType()
        if payload.type != FOLDER and not payload.data:
            raise MissingData()
        parent_id = normalize_parent_id(payload.parent_id)
        if parent_id != ROOT_ID:
            parent = await self._get(parent_id)
            if parent is None:
                raise ParentNotFound()
            if parent.type != FOLDER:
                raise ParentIsNotAFolder()
            # Canonical form, so "01" and 1 both list under "1"
            parent_id = str(parent.id)

        record = File(
            user_id=caller_id,
            name=payload.name,
            type=payload.type,
            is_public=bool(payload.is_public),
            parent_id=parent_id,
        )
        if payload.type != FOLDER:
            record.local_path = str(self.content.store(payload.data))
        self.session.add(record)
        await self.session.commit()
        log.info(
            "create user_id=%s id=%s type=%s parent_id=%s",
            caller_id, record.id, record.type, record.parent_id,
        )
        return record

    async def get_owned(self, caller_id: int, file_id: Union[int, str]) -> File:
        """Return the record if it exists and belongs to caller; NotFound otherwise."""
        record = await self._get(file_id)
        if record is None or record.user_id != caller_id:
            raise NotFound()
        return record

    async def list_owned(
        self,
        caller_id: int,
        parent_id: Optional[Union[int, str]] = ROOT_ID,
        page: int = 0,
    ) -> List[File]:
        """One page of the caller's records under parent_id, in insertion order."""
        page = max(page, 0)
        result = await self.session.execute(
            select(File)
            .where(
                File.user_id == caller_id,
                File.parent_id == normalize_parent_id(parent_id),
            )
            .order_by(File.id)
            .offset(page * self.page_size)
            .limit(self.page_size)
        )
        return list(result.scalars().all())

    async def set_visibility(self, caller_id: int, file_id: Union[int, str], is_public: bool) -> File:
        record = await self.get_owned(caller_id, file_id)
        record.is_public = is_public
        await self.session.commit()
        log.info("set_visibility user_id=%s id=%s is_public=%s", caller_id, record.id, is_public)
        return record

    async def resolve_public_or_owned(
        self, caller_id: Optional[int], file_id: Union[int, str]
    ) -> File:
        """
        Return the record if it is public, or if caller owns it. Anonymous callers
        (caller_id None) only see public records. Everything else is NotFound.
        """
        record = await self._get(file_id)
        if record is None:
            raise NotFound()
        if not record.is_public and (caller_id is None or caller_id != record.user_id):
            raise NotFound()
        return record
