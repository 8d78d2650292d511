"""File API routes: metadata, download, upload and delete."""

import re

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse

from common.constants import HEADER_DIGEST, HTTP_TIME_FORMAT, SHA256
from common.digest import encode_digest, parse_digest
from common.logging_config import get_logger
from common.models import FileInfo
from server.exceptions import BadRequestError, InvalidRangeError
from server.storage import MemoryStore, StoredFile, get_store

logger = get_logger(__name__)

router = APIRouter(prefix="/packages/{package_id}/files", tags=["Files"])

_RANGE_PATTERN = re.compile(r"^bytes=(\d+)-(\d*)$")


def _file_headers(stored: StoredFile) -> dict:
    return {
        HEADER_DIGEST: encode_digest(stored.digest),
        "Last-Modified": stored.updated.strftime(HTTP_TIME_FORMAT),
        "Accept-Ranges": "bytes",
    }


def parse_range(value: str, size: int) -> tuple[int, int]:
    """
    Parse a single-range Range header into inclusive (start, end) offsets.

    Raises:
        InvalidRangeError: If the range is malformed or starts past the end
    """
    match = _RANGE_PATTERN.match(value.strip())
    if not match:
        raise InvalidRangeError(f"unsupported range {value!r}")

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else size - 1
    if start >= size or end < start:
        raise InvalidRangeError(f"range {value!r} not satisfiable for size {size}")
    return start, min(end, size - 1)


@router.head("/{path:path}")
async def stat_file(package_id: str, path: str, store: MemoryStore = Depends(get_store)):
    """
    File metadata in headers: Content-Length, Digest and Last-Modified.

    Raises:
        - 404: Package or file not found
    """
    stored = store.stat_file(package_id, path)
    headers = _file_headers(stored)
    headers["Content-Length"] = str(stored.size)
    return Response(status_code=status.HTTP_200_OK, headers=headers)


@router.get("/{path:path}")
async def download_file(
    package_id: str,
    path: str,
    range_header: str | None = Header(None, alias="Range"),
    store: MemoryStore = Depends(get_store),
):
    """
    Download a file, or a single byte range of it.

    Raises:
        - 404: Package or file not found
        - 416: Range not satisfiable
    """
    stored, data = store.read_file(package_id, path)
    headers = _file_headers(stored)

    if range_header is None:
        return Response(content=data, media_type="application/octet-stream", headers=headers)

    start, end = parse_range(range_header, stored.size)
    logger.debug(f"Serving bytes {start}-{end} of {package_id}:{path}")
    headers["Content-Range"] = f"bytes {start}-{end}/{stored.size}"
    return Response(
        content=data[start:end + 1],
        status_code=status.HTTP_206_PARTIAL_CONTENT,
        media_type="application/octet-stream",
        headers=headers,
    )


@router.put("/{path:path}", response_model=FileInfo)
async def upload_file(
    package_id: str,
    path: str,
    request: Request,
    digest_header: str | None = Header(None, alias=HEADER_DIGEST),
    content_length: int | None = Header(None, alias="Content-Length"),
    store: MemoryStore = Depends(get_store),
):
    """
    Upload a file, replacing any existing file at the same path.

    Parameters:
        - Digest header: SHA256 <base64> of the content (required)
        - Content-Length header: Total length of the content

    Returns:
        - FileInfo of the stored file; 201 when the content was new, 200 when
          the service already held matching data

    Raises:
        - 400: Missing or mismatched digest, length mismatch
        - 403: Package is read-only
        - 404: Package not found
    """
    if not digest_header:
        raise BadRequestError(f"{HEADER_DIGEST} header is required")
    try:
        algorithm, digest = parse_digest(digest_header)
    except ValueError as e:
        raise BadRequestError(f"invalid {HEADER_DIGEST} header", detail=str(e)) from e
    if algorithm != SHA256:
        raise BadRequestError(f"unsupported digest algorithm {algorithm}")

    chunks = []
    async for chunk in request.stream():
        chunks.append(chunk)
    data = b"".join(chunks)

    stored, deduplicated = store.put_file(package_id, path, data, digest, length=content_length)
    info = FileInfo(path=stored.path, size=stored.size, digest=stored.digest, updated=stored.updated)
    return JSONResponse(
        status_code=status.HTTP_200_OK if deduplicated else status.HTTP_201_CREATED,
        content=info.model_dump(mode="json"),
    )


@router.delete("/{path:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(package_id: str, path: str, store: MemoryStore = Depends(get_store)):
    """
    Delete a file.

    Raises:
        - 403: Package is read-only
        - 404: Package or file not found
    """
    store.delete_file(package_id, path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
