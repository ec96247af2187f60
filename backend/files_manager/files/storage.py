"""Blob storage under the configured folder. Blobs are named by UUID, never by user input."""

import base64
import binascii
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Tuple

from files_manager.errors import InvalidData, NotFound, StorageWriteFailed, UnsupportedForFolder
from files_manager.files.models import FOLDER, File

log = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def decode_content(data: str) -> bytes:
    """Decode a base64 payload; raise InvalidData if it is not a base64 string."""
    if not isinstance(data, str):
        raise InvalidData()
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError):
        raise InvalidData()


def guess_mime_type(name: str) -> str:
    """MIME type from the file name's extension."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


class ContentStore:
    """Writes new blobs and resolves file records to their bytes."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser().absolute()

    def store(self, data: str) -> Path:
        """
        Decode base64 data and write it to <root>/<uuid4>. Creates root if missing.
        Returns the absolute path. Raises StorageWriteFailed on any I/O error.
        """
        content = decode_content(data)
        target = self.root / str(uuid.uuid4())
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # Exclusive create: a blob is never overwritten
            with target.open("xb") as fh:
                fh.write(content)
        except OSError as e:
            log.error("store failed path=%s: %s", target, e)
            raise StorageWriteFailed() from e
        log.debug("store wrote %d bytes to %s", len(content), target)
        return target

    def read(self, record: File) -> Tuple[bytes, str]:
        """Return (content, mime_type) for a file or image record."""
        if record.type == FOLDER:
            raise UnsupportedForFolder()
        if not record.local_path:
            raise NotFound()
        path = Path(record.local_path)
        try:
            content = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            log.warning("read: blob missing for file id=%s path=%s", record.id, path)
            raise NotFound()
        return content, guess_mime_type(record.name)
