"""File API routes: create, show, list, publish, unpublish, data."""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from files_manager.auth.dependencies import get_current_user_id, get_optional_user_id
from files_manager.config import get_settings
from files_manager.db.session import get_db
from files_manager.files.directory import FileDirectory
from files_manager.files.models import ROOT_ID, FileCreate, FileCreateResponse, FileResponse
from files_manager.files.storage import ContentStore

router = APIRouter(prefix="/files", tags=["files"])
log = logging.getLogger(__name__)


def get_content_store() -> ContentStore:
    return ContentStore(get_settings().folder_path)


def get_file_directory(
    session: Annotated[AsyncSession, Depends(get_db)],
    content: Annotated[ContentStore, Depends(get_content_store)],
) -> FileDirectory:
    return FileDirectory(session, content)


def _parse_page(page: Optional[str]) -> int:
    """Return page from query string. Anything but a non-negative integer means page 0."""
    try:
        value = int(page or 0)
    except ValueError:
        return 0
    return max(value, 0)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=FileCreateResponse,
    response_model_exclude_none=True,
)
async def create_file(
    user_id: Annotated[int, Depends(get_current_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
    payload: Optional[FileCreate] = None,
) -> FileCreateResponse:
    """
    Create a folder, or a file/image from base64 ``data``.
    ``parentId`` (default 0, the root) must name a folder; ``isPublic`` defaults to false.
    A missing body is treated as an empty one.
    """
    record = await directory.create(user_id, payload if payload is not None else FileCreate())
    return FileCreateResponse.from_record(record)


@router.get("/{file_id}", response_model=FileResponse)
async def show_file(
    file_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
) -> FileResponse:
    """Return one of the caller's records."""
    record = await directory.get_owned(user_id, file_id)
    return FileResponse.from_record(record)


@router.get("", response_model=List[FileResponse])
async def list_files(
    user_id: Annotated[int, Depends(get_current_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
    parent_id: Annotated[str, Query(alias="parentId")] = ROOT_ID,
    page: Optional[str] = None,
) -> List[FileResponse]:
    """List the caller's records under parentId, 20 per page (page is zero-based)."""
    records = await directory.list_owned(user_id, parent_id, _parse_page(page))
    log.info("list_files user_id=%s parent_id=%s count=%d", user_id, parent_id, len(records))
    return [FileResponse.from_record(r) for r in records]


@router.put("/{file_id}/publish", response_model=FileResponse)
async def publish_file(
    file_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
) -> FileResponse:
    record = await directory.set_visibility(user_id, file_id, True)
    return FileResponse.from_record(record)


@router.put("/{file_id}/unpublish", response_model=FileResponse)
async def unpublish_file(
    file_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
) -> FileResponse:
    record = await directory.set_visibility(user_id, file_id, False)
    return FileResponse.from_record(record)


@router.get("/{file_id}/data")
async def file_data(
    file_id: str,
    user_id: Annotated[Optional[int], Depends(get_optional_user_id)],
    directory: Annotated[FileDirectory, Depends(get_file_directory)],
) -> Response:
    """
    Return the raw content with a Content-Type from the file name.
    Public records are readable without a token; private ones only by their owner.
    """
    record = await directory.resolve_public_or_owned(user_id, file_id)
    content, mime_type = directory.content.read(record)
    log.info("file_data id=%s user_id=%s size=%d", record.id, user_id, len(content))
    return Response(content=content, media_type=mime_type)
