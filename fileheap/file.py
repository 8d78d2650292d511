"""References to single files within a package."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from common.constants import HEADER_DIGEST
from common.digest import parse_digest
from common.logging_config import get_logger
from common.models import FileInfo
from fileheap.errors import ResponseDecodeError
from fileheap.reader import Reader
from fileheap.responses import raise_for_file
from fileheap.utils import file_path, parse_http_time, range_header
from fileheap.writer import Writer

if TYPE_CHECKING:
    from fileheap.package import PackageRef

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class WriteOptions:
    """
    Attributes of a file set during upload.

    Attributes:
        length: Total length of the upload in bytes
        digest: SHA256 hash of the content. If the service has matching data,
            it copies the data internally; the digest also validates the upload.
    """
    length: int
    digest: bytes

    def __post_init__(self):
        if self.length < 0:
            raise ValueError("length must be non-negative")


@dataclass(frozen=True)
class FileRef:
    """
    A reference to a single file within a package.

    Callers should not assume the ref is valid.
    """
    package: "PackageRef"
    path: str

    @property
    def client(self):
        return self.package.client

    @property
    def resource_path(self) -> str:
        """Server path of the file, relative to the base URL."""
        return file_path(self.package.id, self.path)

    @property
    def url(self) -> str:
        return self.client.url(self.resource_path)

    def info(self, timeout: Optional[float] = None) -> FileInfo:
        """
        Fetch metadata about the file with a HEAD request.

        Raises:
            FileNotFound: If the file doesn't exist
            ResponseDecodeError: If the Digest header is malformed
        """
        response = self.client.send_request("HEAD", self.resource_path, timeout=timeout)
        try:
            raise_for_file(response)
        finally:
            response.close()

        size = int(response.headers.get("Content-Length", -1))
        digest = b""
        digest_header = response.headers.get(HEADER_DIGEST)
        if digest_header:
            try:
                _, digest = parse_digest(digest_header)
            except ValueError as e:
                raise ResponseDecodeError(response.status_code, str(e)) from e
        updated = _EPOCH
        last_modified = response.headers.get("Last-Modified")
        if last_modified:
            updated = parse_http_time(last_modified) or _EPOCH
        return FileInfo(path=self.path, size=size, digest=digest, updated=updated)

    def delete(self, timeout: Optional[float] = None) -> None:
        """
        Delete the file. This invalidates the FileRef.

        Raises:
            FileNotFound: If the file doesn't exist
        """
        response = self.client.send_request("DELETE", self.resource_path, timeout=timeout)
        try:
            raise_for_file(response)
        finally:
            response.close()
        logger.debug(f"Deleted file {self.package.id}:{self.path}")

    def new_reader(self, timeout: Optional[float] = None) -> Reader:
        """
        Open the contents of the file for reading.

        The caller must close the returned Reader when finished.

        Raises:
            FileNotFound: If the file doesn't exist
        """
        return self._open_reader({}, timeout)

    def new_range_reader(self, offset: int, length: int, timeout: Optional[float] = None) -> Reader:
        """
        Read at most length bytes of the file starting at offset. If length is
        negative, the file is read until the end.

        The caller must close the returned Reader when finished.

        Raises:
            FileNotFound: If the file doesn't exist
        """
        return self._open_reader({"Range": range_header(offset, length)}, timeout)

    def new_writer(self, opts: WriteOptions, timeout: Optional[float] = None) -> Writer:
        """
        Create a Writer that uploads to this file.

        The file is replaced if it exists or created if not, and becomes
        available when Writer.close returns successfully. No request is made
        until the first write or close.
        """
        return Writer(self, length=opts.length, digest=opts.digest, timeout=timeout)

    def _open_reader(self, headers: dict, timeout: Optional[float]) -> Reader:
        headers = {"Accept-Encoding": "identity", **headers}
        response = self.client.send_request(
            "GET", self.resource_path, headers=headers, timeout=timeout, stream=True
        )
        try:
            raise_for_file(response)
        except BaseException:
            response.close()
            raise
        return Reader(response)
