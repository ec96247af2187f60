"""Error kinds raised by the session and file layers.

These carry a client-facing message only. Mapping a kind to an HTTP status
happens in ``files_manager.main``; nothing here knows about transports.
"""

from typing import Optional


class FilesManagerError(Exception):
    """Base class for every expected failure of a request."""

    message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


# Authentication; every subclass reports the same message
class Unauthorized(FilesManagerError):
    message = "Unauthorized"


class InvalidCredentialFormat(Unauthorized):
    pass


class AuthenticationFailed(Unauthorized):
    pass


class MissingToken(Unauthorized):
    pass


class InvalidOrExpiredToken(Unauthorized):
    pass


# Client input
class InvalidInput(FilesManagerError):
    message = "Invalid input"


class MissingName(InvalidInput):
    message = "Missing name"


class MissingType(InvalidInput):
    message = "Missing type"


class MissingData(InvalidInput):
    message = "Missing data"


class InvalidData(InvalidInput):
    message = "Invalid data"


class ParentNotFound(InvalidInput):
    message = "Parent not found"


class ParentIsNotAFolder(InvalidInput):
    message = "Parent is not a folder"


# Lookup and content
class NotFound(FilesManagerError):
    message = "Not found"


class UnsupportedForFolder(FilesManagerError):
    message = "A folder doesn't have content"


class StorageWriteFailed(FilesManagerError):
    message = "Could not write file content"
