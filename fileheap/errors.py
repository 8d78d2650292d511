"""Exception hierarchy for the FileHeap client."""

from typing import Optional


class FileHeapError(Exception):
    """
    Base exception class for all FileHeap client errors.
    """
    pass


class TransportError(FileHeapError):
    """
    Raised when a request fails below the HTTP layer (connection refused,
    reset, timeout). Never retried by the client.
    """
    pass


class Cancelled(TransportError):
    """
    Raised when an upload or download was cancelled by the caller.
    """
    pass


class APIError(FileHeapError):
    """
    An HTTP error decoded from the service's JSON error envelope.
    """

    def __init__(self, code: int, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"APIError(code={self.code!r}, message={self.message!r})"

    def format(self, verbose: bool = False) -> str:
        """Return the message, followed by the detail when verbose."""
        if verbose and self.detail:
            return f"{self.message}\n{self.detail}"
        return self.message


class ResponseDecodeError(FileHeapError):
    """
    Raised when a response carries a body or header that can't be decoded.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class FileNotFound(FileHeapError):
    """
    Raised when a file doesn't exist.
    """

    def __init__(self, message: str = "file not found"):
        super().__init__(message)


class AlreadyUploaded(FileHeapError):
    """
    Raised when an upload is unnecessary because the service already has the
    required data.
    """

    def __init__(self, message: str = "file is already uploaded"):
        super().__init__(message)


class IteratorDone(FileHeapError, StopIteration):
    """
    Raised when an iterator is expended. Subclasses StopIteration so that
    iterators work in for-loops.
    """

    def __init__(self, message: str = "no more items in iterator"):
        super().__init__(message)
