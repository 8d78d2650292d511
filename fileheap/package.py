"""References to packages: named collections of files."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from common.logging_config import get_logger
from common.models import Package, PackagePatch
from fileheap.file import FileRef
from fileheap.iterator import FileIterator
from fileheap.responses import error_from_response, parse_response
from fileheap.utils import package_path

if TYPE_CHECKING:
    from fileheap.client import Client

logger = get_logger(__name__)


@dataclass(frozen=True)
class PackageRef:
    """
    A reference to a package.

    Callers should not assume the ref is valid.
    """
    client: "Client"
    id: str

    @property
    def name(self) -> str:
        """The package's unique identifier."""
        return self.id

    @property
    def url(self) -> str:
        return self.client.url(package_path(self.id))

    def info(self, timeout: Optional[float] = None) -> Package:
        """Fetch metadata about the package."""
        response = self.client.send_request("GET", package_path(self.id), timeout=timeout)
        try:
            return parse_response(response, Package)
        finally:
            response.close()

    def seal(self, timeout: Optional[float] = None) -> None:
        """Make the package read-only. This operation is not reversible."""
        body = PackagePatch(readonly=True).model_dump()
        response = self.client.send_request("PATCH", package_path(self.id), json=body, timeout=timeout)
        try:
            error_from_response(response)
        finally:
            response.close()
        logger.info(f"Sealed package {self.id}")

    def delete(self, timeout: Optional[float] = None) -> None:
        """
        Delete the package and all of its files.

        This invalidates the PackageRef and all associated file references.
        """
        response = self.client.send_request("DELETE", package_path(self.id), timeout=timeout)
        try:
            error_from_response(response)
        finally:
            response.close()
        logger.info(f"Deleted package {self.id}")

    def file(self, path: str) -> FileRef:
        """Reference a single file by path."""
        return FileRef(package=self, path=path)

    def files(self, path: str = "", timeout: Optional[float] = None) -> FileIterator:
        """Iterate over the files in the package whose paths start with path."""
        return FileIterator(package=self, path=path, timeout=timeout)
