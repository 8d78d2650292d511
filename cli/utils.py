"""Utility functions for CLI operations."""

import hashlib
import sys
from pathlib import Path
from typing import Iterator

from cli.constants import GREEN, RESET


class TransferProgress:
    """Displays upload or download progress of a single file on stdout."""

    def __init__(self, action: str, filename: str, total: int, stream=None):
        """
        Initialize the progress display.

        Args:
            action: Verb shown before the file name ("Uploading", "Downloading")
            filename: Display name for the file
            total: Expected number of bytes, or a negative value if unknown
            stream: Output stream (defaults to stdout)
        """
        self.action = action
        self.filename = filename
        self.total = total
        self.stream = stream if stream is not None else sys.stdout
        self.transferred = 0
        self._finished = False

    def update(self, count: int) -> None:
        """Record count more bytes transferred and redraw."""
        self.transferred += count
        if self.total > 0:
            progress = (self.transferred / self.total) * 100
            self.stream.write(
                f"\r{self.action} {self.filename}: {format_file_size(self.transferred)} / "
                f"{format_file_size(self.total)} ({GREEN}{progress:.1f}%{RESET})"
            )
        else:
            self.stream.write(
                f"\r{self.action} {self.filename}: {format_file_size(self.transferred)}"
            )
        self.stream.flush()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._finished:
            return
        self._finished = True
        if self.transferred:
            self.stream.write('\n')
            self.stream.flush()


def iter_file_chunks(path: Path, chunk_size: int) -> Iterator[bytes]:
    """Yield the contents of a local file in chunks."""
    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk


def file_sha256(path: Path, chunk_size: int) -> bytes:
    """Compute the raw SHA256 digest of a local file without loading it whole."""
    hasher = hashlib.sha256()
    for chunk in iter_file_chunks(path, chunk_size):
        hasher.update(chunk)
    return hasher.digest()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"
