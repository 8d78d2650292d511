"""Exception classes for the FileHeap development server.

Each exception carries the HTTP status it is reported with; the handler in
server.main turns it into the JSON error envelope.
"""

from typing import Optional


class FileHeapServerError(Exception):
    """
    Base exception class for all server errors.
    """
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class BadRequestError(FileHeapServerError):
    """
    Raised when a request is malformed (bad cursor, missing header).
    """
    status_code = 400


class PackageNotFoundError(FileHeapServerError):
    """
    Raised when a requested package does not exist.
    """
    status_code = 404


class FileMissingError(FileHeapServerError):
    """
    Raised when a requested file does not exist within its package.
    """
    status_code = 404


class PackageReadOnlyError(FileHeapServerError):
    """
    Raised when writing to or deleting from a sealed package.
    """
    status_code = 403


class DigestMismatchError(FileHeapServerError):
    """
    Raised when uploaded content doesn't match its declared digest.
    """
    status_code = 400


class LengthMismatchError(FileHeapServerError):
    """
    Raised when uploaded content doesn't match its declared length.
    """
    status_code = 400


class InvalidRangeError(FileHeapServerError):
    """
    Raised when a Range header can't be satisfied.
    """
    status_code = 416
