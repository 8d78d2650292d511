"""Streaming reader over a downloaded file."""

import io
import threading
from typing import Iterator, Optional

import httpx

from common.logging_config import get_logger
from fileheap.errors import Cancelled, TransportError

logger = get_logger(__name__)


class Reader(io.RawIOBase):
    """
    Reads a stored file from an open HTTP response.

    The stream is sequential and can't be rewound. Close the reader (or use it
    as a context manager) on every path to release the connection.
    """

    def __init__(self, response: httpx.Response):
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._buffer = b""
        self._eof = False
        self._cancelled = False
        self._close_lock = threading.Lock()

        content_length = response.headers.get("Content-Length")
        self._size = int(content_length) if content_length is not None else -1

    @property
    def size(self) -> int:
        """Size of the reader's content in bytes, or -1 if unknown."""
        return self._size

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._cancelled:
            raise Cancelled("download cancelled")
        if self.closed:
            raise ValueError("I/O operation on closed reader")

        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0

        while not self._buffer and not self._eof:
            try:
                self._buffer = next(self._chunks)
            except StopIteration:
                self._eof = True
            except (httpx.HTTPError, httpx.StreamError) as e:
                if self._cancelled:
                    raise Cancelled("download cancelled") from e
                if isinstance(e, httpx.TransportError):
                    raise TransportError(f"reading {self._response.url}: {e}") from e
                raise

        n = min(len(view), len(self._buffer))
        view[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n

    def cancel(self) -> None:
        """Abort the download. Later reads raise Cancelled."""
        self._cancelled = True
        self._release()

    def close(self) -> None:
        """Close the reader and release its connection. Safe to call more than once."""
        self._release()
        super().close()

    def _release(self) -> None:
        with self._close_lock:
            if self._response.is_closed:
                return
            self._response.close()
        logger.debug(f"Released connection for {self._response.url}")
