"""Asynchronous, backpressured file upload."""

import threading
from typing import TYPE_CHECKING, Optional

from common.constants import HEADER_DIGEST
from common.digest import encode_digest
from common.logging_config import get_logger
from fileheap.errors import AlreadyUploaded, Cancelled
from fileheap.pipe import Pipe
from fileheap.responses import raise_for_file

if TYPE_CHECKING:
    from fileheap.file import FileRef

logger = get_logger(__name__)


class Writer:
    """
    Writes a file's data.

    Bytes passed to write are streamed as the body of a single PUT request
    issued from a background thread. Each write blocks until that thread has
    taken the bytes, so no more than one write is buffered in memory.

    Because the upload happens asynchronously, write may succeed even though
    the upload will fail. Always call close and check for its exception to
    learn whether the upload succeeded; a caller that never closes the writer
    never learns of a failure.
    """

    def __init__(self, file: "FileRef", length: int, digest: bytes, timeout: Optional[float] = None):
        self._file = file
        self._length = length
        self._digest = digest
        self._timeout = timeout
        self._written = 0

        # Set once under _lock; the background thread owns the read end.
        self._pipe: Optional[Pipe] = None
        self._thread: Optional[threading.Thread] = None
        self._done = threading.Event()

        self._lock = threading.Lock()
        self._err: Optional[BaseException] = None

    @property
    def file(self) -> "FileRef":
        return self._file

    @property
    def done(self) -> bool:
        """Whether the background upload has finished."""
        return self._done.is_set()

    def write(self, data) -> int:
        """
        Append data to the upload.

        Returns:
            Number of bytes written (always len(data))

        Raises:
            The upload's terminal error, if it already failed
            AlreadyUploaded: If the service finished the upload without the data
            ValueError: If the writer is closed or data exceeds the declared length
        """
        err = self._terminal_error()
        if err is not None:
            raise err

        size = memoryview(data).nbytes
        if self._written + size > self._length:
            raise ValueError(
                f"write exceeds declared length: {self._written + size} > {self._length}"
            )

        pipe = self._ensure_open()
        if pipe is None:
            # Cancelled before the upload started.
            raise self._terminal_error()
        if pipe.write_closed:
            # Closed or cancelled: wait for the outcome of the upload.
            self._done.wait()
            err = self._terminal_error()
            if err is not None:
                raise err
            raise ValueError("write to closed writer")

        # Once the background thread stops reading, the pipe raises either
        # the terminal error or AlreadyUploaded.
        n = pipe.write(data)
        self._written += n
        return n

    def close(self) -> None:
        """
        Complete the upload and wait for the service's response.

        The first call opens the connection if nothing was written, so that an
        empty file is still created. Later calls return the same outcome.

        Raises:
            The upload's terminal error
        """
        pipe = self._ensure_open()
        if pipe is not None:
            pipe.close_write()
        self._done.wait()

        err = self._terminal_error()
        if err is not None:
            raise err

    def cancel(self) -> None:
        """
        Abort the upload. The next close raises Cancelled unless the upload
        had already finished.
        """
        err = Cancelled(f"upload of {self._file.path} cancelled")
        with self._lock:
            pipe = self._pipe
            if pipe is None:
                if self._err is None and not self._done.is_set():
                    self._err = err
                    self._done.set()
                return
        pipe.close_write(err)

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.cancel()
            try:
                self.close()
            except Exception:
                logger.debug(f"Upload of {self._file.path} aborted after {exc_type.__name__}")
            return
        self.close()

    def _terminal_error(self) -> Optional[BaseException]:
        with self._lock:
            return self._err

    def _set_error(self, err: BaseException) -> None:
        with self._lock:
            if self._err is None:
                self._err = err

    def _ensure_open(self) -> Optional[Pipe]:
        """
        Start the background upload unless it already started or the writer
        was cancelled first. Returns the pipe, or None if cancelled.
        """
        with self._lock:
            if self._pipe is None and self._err is None:
                self._pipe = Pipe()
                self._thread = threading.Thread(
                    target=self._upload,
                    args=(self._pipe,),
                    name=f"fileheap-upload-{self._file.package.id}",
                    daemon=True,
                )
                self._thread.start()
            return self._pipe

    def _upload(self, pipe: Pipe) -> None:
        """Background unit: stream the pipe as a PUT body and record the outcome."""
        headers = {
            "Content-Length": str(self._length),
            HEADER_DIGEST: encode_digest(self._digest),
        }
        # A zero length with a streaming body is ambiguous to some HTTP stacks;
        # send an explicit empty body instead.
        content = b"" if self._length == 0 else iter(pipe)

        logger.debug(f"Starting upload of {self._file.path} [length={self._length}]")
        try:
            response = self._file.client.send_request(
                "PUT",
                self._file.resource_path,
                headers=headers,
                content=content,
                timeout=self._timeout,
            )
            try:
                raise_for_file(response)
            finally:
                response.close()
        except Exception as e:
            logger.warning(f"Upload of {self._file.path} failed: {e}")
            self._set_error(e)
            pipe.close_read(e)
        else:
            logger.debug(f"Upload of {self._file.path} completed")
            pipe.close_read(AlreadyUploaded())
        finally:
            self._done.set()
