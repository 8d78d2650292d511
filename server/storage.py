"""In-memory, content-addressed storage backing the development server."""

import base64
import binascii
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from common.digest import sha256_digest
from common.logging_config import get_logger
from server.config import PAGE_SIZE
from server.exceptions import (
    BadRequestError,
    DigestMismatchError,
    FileMissingError,
    LengthMismatchError,
    PackageNotFoundError,
    PackageReadOnlyError,
)

logger = get_logger(__name__)


@dataclass
class StoredFile:
    path: str
    digest: bytes
    size: int
    updated: datetime


@dataclass
class StoredPackage:
    id: str
    created: datetime
    readonly: bool = False
    files: Dict[str, StoredFile] = field(default_factory=dict)


def encode_cursor(path: str) -> str:
    return base64.urlsafe_b64encode(path.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    try:
        return base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise BadRequestError("invalid cursor", detail=str(e)) from e


class MemoryStore:
    """
    Packages and their files, with blob data shared between files by digest.

    Uploading content whose digest is already stored keeps a single copy.
    Blobs no longer referenced by any file are dropped on delete.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self._lock = threading.Lock()
        self._packages: Dict[str, StoredPackage] = {}
        self._blobs: Dict[bytes, bytes] = {}

    @property
    def blob_count(self) -> int:
        with self._lock:
            return len(self._blobs)

    def create_package(self) -> StoredPackage:
        package = StoredPackage(id=secrets.token_hex(12), created=datetime.now(timezone.utc))
        with self._lock:
            self._packages[package.id] = package
        logger.info(f"Created package {package.id}")
        return package

    def get_package(self, package_id: str) -> StoredPackage:
        with self._lock:
            return self._get_package(package_id)

    def seal_package(self, package_id: str) -> StoredPackage:
        with self._lock:
            package = self._get_package(package_id)
            package.readonly = True
        logger.info(f"Sealed package {package_id}")
        return package

    def delete_package(self, package_id: str) -> None:
        with self._lock:
            self._get_package(package_id)
            del self._packages[package_id]
            self._collect_garbage()
        logger.info(f"Deleted package {package_id}")

    def list_files(
        self, package_id: str, prefix: str = "", cursor: str = ""
    ) -> Tuple[List[StoredFile], str]:
        """
        Return one page of files sorted by path, and the cursor of the next
        page ("" on the last page).
        """
        after = decode_cursor(cursor) if cursor else None
        with self._lock:
            package = self._get_package(package_id)
            paths = sorted(
                p for p in package.files
                if p.startswith(prefix) and (after is None or p > after)
            )
            page = [package.files[p] for p in paths[:self.page_size]]

        next_cursor = ""
        if len(paths) > self.page_size:
            next_cursor = encode_cursor(page[-1].path)
        return page, next_cursor

    def stat_file(self, package_id: str, path: str) -> StoredFile:
        with self._lock:
            return self._get_file(package_id, path)

    def read_file(self, package_id: str, path: str) -> Tuple[StoredFile, bytes]:
        with self._lock:
            stored = self._get_file(package_id, path)
            return stored, self._blobs[stored.digest]

    def put_file(
        self, package_id: str, path: str, data: bytes, digest: bytes, length: Optional[int] = None
    ) -> Tuple[StoredFile, bool]:
        """
        Store a file, verifying its length and digest.

        Returns:
            The stored file and whether its blob was already present
        """
        if length is not None and len(data) != length:
            raise LengthMismatchError(f"expected {length} bytes, received {len(data)}")

        actual = sha256_digest(data)
        if actual != digest:
            raise DigestMismatchError(
                "content does not match digest",
                detail=f"expected {digest.hex()}, computed {actual.hex()}",
            )

        with self._lock:
            package = self._get_package(package_id)
            if package.readonly:
                raise PackageReadOnlyError(f"package {package_id} is read-only")

            deduplicated = digest in self._blobs
            if not deduplicated:
                self._blobs[digest] = data
            stored = StoredFile(
                path=path, digest=digest, size=len(data), updated=datetime.now(timezone.utc)
            )
            package.files[path] = stored
            self._collect_garbage()

        logger.info(
            f"Stored {package_id}:{path} [size={len(data)} deduplicated={deduplicated}]"
        )
        return stored, deduplicated

    def delete_file(self, package_id: str, path: str) -> None:
        with self._lock:
            package = self._get_package(package_id)
            if package.readonly:
                raise PackageReadOnlyError(f"package {package_id} is read-only")
            self._get_file(package_id, path)
            del package.files[path]
            self._collect_garbage()

    def _get_package(self, package_id: str) -> StoredPackage:
        package = self._packages.get(package_id)
        if package is None:
            raise PackageNotFoundError(f"package {package_id} not found")
        return package

    def _get_file(self, package_id: str, path: str) -> StoredFile:
        stored = self._get_package(package_id).files.get(path)
        if stored is None:
            raise FileMissingError(f"file {path} not found")
        return stored

    def _collect_garbage(self) -> None:
        referenced = {
            f.digest for package in self._packages.values() for f in package.files.values()
        }
        for digest in list(self._blobs):
            if digest not in referenced:
                del self._blobs[digest]


_store: Optional[MemoryStore] = None


def get_store() -> MemoryStore:
    """
    Get or create the global MemoryStore instance.

    Returns:
        MemoryStore instance
    """
    global _store
    if _store is None:
        _store = MemoryStore()
    return _store


def reset_store(page_size: int = PAGE_SIZE) -> MemoryStore:
    """Replace the global store with an empty one (used by tests)."""
    global _store
    _store = MemoryStore(page_size=page_size)
    return _store
