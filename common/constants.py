"""Project-wide constants shared by the client library, the server and the CLI."""

USER_AGENT: str = "fileheap/0.1.0"

# The Digest request and response header carries the name of the digest
# algorithm and the Base64-encoded checksum separated by a space, e.g.
# "SHA256 qj7BbmrMgJ2LKBhmInYlar/S8bRBy1FXSTPz1L0RXRE="
HEADER_DIGEST: str = "Digest"

# Reserved for resumable uploads; not used by the upload path.
HEADER_UPLOAD_EXPIRES: str = "Upload-Expires"
HEADER_UPLOAD_LENGTH: str = "Upload-Length"
HEADER_UPLOAD_OFFSET: str = "Upload-Offset"

HEADER_REQUEST_ID: str = "X-Request-ID"

SHA256: str = "SHA256"

# HTTP date, e.g. "Wed, 01 May 2024 12:30:00 GMT"
HTTP_TIME_FORMAT: str = "%a, %d %b %Y %H:%M:%S GMT"

DEFAULT_TIMEOUT: float = 30.0
DEFAULT_PAGE_SIZE: int = 1000
DEFAULT_CHUNK_SIZE: int = 64 * 1024  # 64 KiB per write in the CLI uploader
