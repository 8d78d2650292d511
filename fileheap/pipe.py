"""Synchronous in-memory pipe connecting a writer thread to a reader thread."""

import threading
from typing import Iterator, Optional


class Pipe:
    """
    Zero-capacity pipe.

    Each write blocks until the reader has consumed all of its data, so at most
    one write is ever held in memory. Reads block until data arrives or the
    write end is closed. The pipe is meant for exactly one writer thread and
    one reader thread.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._pending: Optional[memoryview] = None
        self._write_closed = False
        self._write_error: Optional[BaseException] = None
        self._read_closed = False
        self._read_error: Optional[BaseException] = None

    def write(self, data) -> int:
        """
        Hand data to the reader, blocking until it has all been read.

        Raises:
            ValueError: If the write end is closed
            BaseException: The error the read end was closed with
        """
        view = memoryview(data).cast("B")
        with self._cond:
            if self._write_closed:
                raise ValueError("write to closed pipe")
            if self._read_closed:
                raise self._read_exception()
            if not len(view):
                return 0

            self._pending = view
            self._cond.notify_all()
            while self._pending is not None and not self._read_closed:
                self._cond.wait()

            if self._pending is not None:
                self._pending = None
                raise self._read_exception()
            return len(view)

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size bytes (all of the pending write if size is negative).

        Returns b"" once the write end is closed without error.

        Raises:
            BaseException: The error the write end was closed with
        """
        with self._cond:
            while True:
                if self._read_closed:
                    raise ValueError("read from closed pipe")
                if self._write_error is not None:
                    raise self._write_error
                if self._pending is not None:
                    chunk = self._pending if size < 0 else self._pending[:size]
                    data = chunk.tobytes()
                    rest = self._pending[len(chunk):]
                    self._pending = rest if len(rest) else None
                    if self._pending is None:
                        self._cond.notify_all()
                    return data
                if self._write_closed:
                    return b""
                self._cond.wait()

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read()
            if not chunk:
                return
            yield chunk

    def close_write(self, error: Optional[BaseException] = None) -> None:
        """Close the write end. Readers see EOF, or error if one is given."""
        with self._cond:
            if not self._write_closed:
                self._write_closed = True
                self._write_error = error
            elif error is not None and self._write_error is None:
                # Allows aborting a pipe that was already closed cleanly but not yet drained.
                self._write_error = error
            self._cond.notify_all()

    def close_read(self, error: Optional[BaseException] = None) -> None:
        """Close the read end. Blocked and later writes raise error."""
        with self._cond:
            if not self._read_closed:
                self._read_closed = True
                self._read_error = error
            self._cond.notify_all()

    @property
    def write_closed(self) -> bool:
        with self._cond:
            return self._write_closed

    def _read_exception(self) -> BaseException:
        if self._read_error is not None:
            return self._read_error
        return BrokenPipeError("read end of pipe closed")
