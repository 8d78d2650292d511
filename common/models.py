"""Pydantic models for the FileHeap wire format (shared by client and server)."""

import base64
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator


class Package(BaseModel):
    """A collection of files."""
    id: str
    created: datetime

    # Whether the package is locked for writes.
    readonly: bool = False


class PackagePatch(BaseModel):
    """Modification of a package's mutable properties."""

    # If true, lock the package for writes. Ignored if false.
    readonly: bool = False


class FileInfo(BaseModel):
    """Describes a single file within a package."""
    path: str
    size: int
    digest: bytes = b""
    updated: datetime

    @field_validator("digest", mode="before")
    @classmethod
    def _decode_digest(cls, value):
        if value is None:
            return b""
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    @field_serializer("digest")
    def _encode_digest(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class ManifestPage(BaseModel):
    """One page of the files within a package, sorted by path."""
    files: List[FileInfo] = Field(default_factory=list)

    # Empty on the final page.
    cursor: str = ""

    @field_validator("files", mode="before")
    @classmethod
    def _null_files(cls, value):
        return [] if value is None else value

    @field_validator("cursor", mode="before")
    @classmethod
    def _null_cursor(cls, value):
        return "" if value is None else value


class ErrorBody(BaseModel):
    """JSON envelope returned with every error status."""

    # HTTP status code, such as 404
    code: int
    message: str

    # Long-form detail, such as a call stack
    detail: Optional[str] = None
