"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class NewPackageCommand:
    """Create a package."""

    command: Literal["new-package"] = "new-package"


@dataclass(frozen=True)
class PackageInfoCommand:
    """Show package metadata."""

    package_id: str
    command: Literal["package"] = "package"


@dataclass(frozen=True)
class SealCommand:
    """Make a package read-only."""

    package_id: str
    command: Literal["seal"] = "seal"


@dataclass(frozen=True)
class DeletePackageCommand:
    """Delete a package."""

    package_id: str
    command: Literal["delete-package"] = "delete-package"


@dataclass(frozen=True)
class ListCommand:
    """List files in a package, optionally under a path prefix."""

    package_id: str
    prefix: str = ""
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class StatCommand:
    """Show file metadata."""

    package_id: str
    path: str
    command: Literal["stat"] = "stat"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file."""

    package_id: str
    local_path: str
    remote_path: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download a file, or a byte range of it when offset or length is given."""

    package_id: str
    remote_path: str
    output_path: str | None = None
    offset: int = 0
    length: int = -1
    command: Literal["download"] = "download"

    @property
    def is_range(self) -> bool:
        return self.offset != 0 or self.length >= 0


@dataclass(frozen=True)
class RemoveCommand:
    """Delete a file."""

    package_id: str
    path: str
    command: Literal["rm"] = "rm"


CommandRequest = (
    NewPackageCommand
    | PackageInfoCommand
    | SealCommand
    | DeletePackageCommand
    | ListCommand
    | StatCommand
    | UploadCommand
    | DownloadCommand
    | RemoveCommand
)
