"""Encoding of content digests for the Digest header."""

import base64
import binascii
import hashlib

from common.constants import SHA256


def sha256_digest(data: bytes) -> bytes:
    """Raw SHA256 digest of data."""
    return hashlib.sha256(data).digest()


def encode_digest(digest: bytes, algorithm: str = SHA256) -> str:
    """Encode a digest for the Digest header: "<ALGORITHM> <base64>"."""
    return f"{algorithm} {base64.b64encode(digest).decode('ascii')}"


def parse_digest(value: str) -> tuple[str, bytes]:
    """
    Decode a Digest header value into (algorithm, checksum).

    A bare base64 checksum is accepted and reported as SHA256.

    Raises:
        ValueError: If the checksum isn't valid base64
    """
    value = value.strip()
    algorithm = SHA256
    if " " in value:
        algorithm, value = value.split(" ", 1)
    try:
        return algorithm.upper(), base64.b64decode(value.strip(), validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid digest header: {e}") from e
