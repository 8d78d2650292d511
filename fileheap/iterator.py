"""Iteration over the paged file manifest of a package."""

from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Deque, Optional

from common.logging_config import get_logger
from common.models import FileInfo, ManifestPage
from fileheap.errors import IteratorDone
from fileheap.responses import parse_response
from fileheap.utils import manifest_path

if TYPE_CHECKING:
    from fileheap.file import FileRef
    from fileheap.package import PackageRef

logger = get_logger(__name__)


class IteratorState(Enum):
    BUFFERED = "buffered"
    NEEDS_FETCH = "needs_fetch"
    EXHAUSTED = "exhausted"


class FileIterator:
    """
    Forward-only iterator over the files in a package, in path order.

    Pages are fetched lazily: the next page is requested only once the
    current one is drained. When no files remain, next raises IteratorDone
    (a StopIteration), and keeps raising it on every later call.
    """

    def __init__(self, package: "PackageRef", path: str = "", timeout: Optional[float] = None):
        self._package = package
        self._path = path
        self._timeout = timeout
        self._files: Deque[FileInfo] = deque()
        self._cursor = ""

        # Whether the final page has been fetched.
        self._last_request = False

    @property
    def state(self) -> IteratorState:
        if self._files:
            return IteratorState.BUFFERED
        if self._last_request:
            return IteratorState.EXHAUSTED
        return IteratorState.NEEDS_FETCH

    def __iter__(self) -> "FileIterator":
        return self

    def __next__(self) -> tuple["FileRef", FileInfo]:
        """
        Get the next file.

        Raises:
            IteratorDone: If the iterator is expended
            TransportError, APIError: If fetching a page fails; the iterator is
                unchanged, so calling next again retries the same page
        """
        while True:
            state = self.state
            if state is IteratorState.BUFFERED:
                info = self._files.popleft()
                return self._package.file(info.path), info
            if state is IteratorState.EXHAUSTED:
                raise IteratorDone()
            self._fetch_page()

    def next(self) -> tuple["FileRef", FileInfo]:
        return self.__next__()

    def _fetch_page(self) -> None:
        params = {"cursor": self._cursor, "path": self._path}
        response = self._package.client.send_request(
            "GET", manifest_path(self._package.id), params=params, timeout=self._timeout
        )
        try:
            page = parse_response(response, ManifestPage)
        finally:
            response.close()

        logger.debug(
            f"Fetched manifest page for {self._package.id} "
            f"[files={len(page.files)} final={not page.cursor}]"
        )
        self._files = deque(page.files)
        self._cursor = page.cursor
        if not page.cursor:
            self._last_request = True
