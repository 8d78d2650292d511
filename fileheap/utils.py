"""URL and header helpers shared by the client modules."""

import posixpath
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import quote


def package_path(package_id: str) -> str:
    """Path of a package resource, e.g. /packages/abc."""
    return posixpath.join("/packages", quote(package_id, safe=""))


def manifest_path(package_id: str) -> str:
    return posixpath.join(package_path(package_id), "manifest")


def file_path(package_id: str, path: str) -> str:
    """
    Path of a file resource within a package.

    The file path is normalized (duplicate and trailing slashes, dot
    segments) and percent-encoded, keeping slashes.
    """
    joined = posixpath.normpath("/" + path.lstrip("/"))
    return package_path(package_id) + "/files" + quote(joined, safe="/")


def range_header(offset: int, length: int) -> str:
    """
    Build a Range header value.

    A negative length reads from offset to the end of the file.
    """
    if offset < 0:
        raise ValueError("offset must be non-negative")
    if length < 0:
        return f"bytes={offset}-"
    if length == 0:
        raise ValueError("length must be non-zero; use a negative length to read to the end")
    return f"bytes={offset}-{offset + length - 1}"


def parse_http_time(value: str) -> Optional[datetime]:
    """Parse an HTTP date header (e.g. Last-Modified) into an aware UTC datetime."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
