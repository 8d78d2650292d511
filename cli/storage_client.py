"""FileHeap operations for the CLI, returning user-facing messages."""

import os
from pathlib import Path
from typing import Optional

from cli.config import Config
from cli.utils import TransferProgress, file_sha256, format_file_size, iter_file_chunks
from common.logging_config import get_logger
from fileheap import (
    AlreadyUploaded,
    APIError,
    Cancelled,
    Client,
    FileHeapError,
    FileNotFound,
    ResponseDecodeError,
    TransportError,
    WriteOptions,
)

logger = get_logger(__name__)


class StorageClient:
    """Runs CLI commands against a FileHeap server through the fileheap library."""

    def __init__(self, config: Config, client: Optional[Client] = None):
        """
        Initialize storage client.

        Args:
            config: Configuration instance
            client: Optional fileheap Client (for tests); built from config if omitted
        """
        self.config = config
        self.client = client or Client(config.get_address(), timeout=config.get_timeout())
        logger.info(f"Initialized StorageClient [address={config.get_address()}]")

    def _format_error(self, error: Exception) -> str:
        """
        Map library errors to user-friendly messages.

        Args:
            error: Exception raised by the fileheap library

        Returns:
            User-friendly error message
        """
        if isinstance(error, FileNotFound):
            return "File not found on server."
        if isinstance(error, Cancelled):
            return "Operation cancelled."
        if isinstance(error, TransportError):
            return f"Cannot reach FileHeap server at {self.config.get_address()}. Is it running? ({error})"
        if isinstance(error, ResponseDecodeError):
            return f"Unexpected response from server (HTTP {error.status_code})."
        if isinstance(error, APIError):
            status_messages = {
                400: 'Bad request',
                403: 'Package is read-only',
                404: 'Not found',
                416: 'Requested range not satisfiable',
                500: 'Server error',
            }
            message = status_messages.get(error.code, 'Request failed')
            return f"{message}: {error.format(verbose=True)} (Code: {error.code})"
        return str(error)

    def new_package(self) -> str:
        """Create a package and report its ID."""
        try:
            package, info = self.client.new_package()
        except FileHeapError as e:
            logger.warning(f"Package creation failed: {e}")
            return f"Error: {self._format_error(e)}"
        return f"Package created!\nID: {package.id}\nCreated: {info.created.isoformat()}"

    def package_info(self, package_id: str) -> str:
        """Show package metadata."""
        try:
            info = self.client.package(package_id).info()
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"
        state = "read-only" if info.readonly else "writable"
        return f"Package {info.id}\nCreated: {info.created.isoformat()}\nState: {state}"

    def seal(self, package_id: str) -> str:
        """Make a package read-only."""
        try:
            self.client.package(package_id).seal()
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"
        return f"Package {package_id} sealed."

    def delete_package(self, package_id: str) -> str:
        """Delete a package and its files."""
        try:
            self.client.package(package_id).delete()
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"
        return f"Package {package_id} deleted."

    def list_files(self, package_id: str, prefix: str = "") -> str:
        """
        List files in a package.

        Returns:
            One line per file (path, size, modification time, digest prefix)
        """
        lines = []
        try:
            for _, info in self.client.package(package_id).files(prefix):
                lines.append(
                    f"  {info.path}  {format_file_size(info.size)}  "
                    f"{info.updated.isoformat()}  {info.digest.hex()[:12]}"
                )
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"

        if not lines:
            return "No files found."
        return f"Found {len(lines)} file(s):\n" + "\n".join(lines)

    def stat(self, package_id: str, path: str) -> str:
        """Show file metadata."""
        try:
            info = self.client.package(package_id).file(path).info()
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"
        return (
            f"Path: {info.path}\n"
            f"Size: {format_file_size(info.size)} ({info.size} bytes)\n"
            f"SHA256: {info.digest.hex()}\n"
            f"Updated: {info.updated.isoformat()}"
        )

    def upload(self, package_id: str, local_path: str, remote_path: Optional[str] = None) -> str:
        """
        Upload a local file, hashing it first and then streaming it in chunks.

        Returns:
            Success or error message
        """
        source = Path(local_path).expanduser()
        if not source.exists():
            return f"Error: File not found: {local_path}"
        if not source.is_file():
            return f"Error: Not a file: {local_path}"

        remote_path = remote_path or source.name
        chunk_size = self.config.get_chunk_size()

        try:
            size = source.stat().st_size
            digest = file_sha256(source, chunk_size)
        except OSError as e:
            return f"Error: Cannot read {local_path}: {e}"

        logger.info(f"Uploading {source} to {package_id}:{remote_path} [size={size}]")
        file = self.client.package(package_id).file(remote_path)
        progress = TransferProgress("Uploading", remote_path, size)
        try:
            with file.new_writer(WriteOptions(length=size, digest=digest)) as writer:
                try:
                    for chunk in iter_file_chunks(source, chunk_size):
                        writer.write(chunk)
                        progress.update(len(chunk))
                except AlreadyUploaded:
                    # The server already holds this content; close reports the outcome.
                    logger.info(f"{package_id}:{remote_path} already stored, skipped sending data")
        except FileHeapError as e:
            logger.warning(f"Upload of {source} failed: {e}")
            return f"Upload failed: {self._format_error(e)}"
        except OSError as e:
            return f"Upload failed: Cannot read {local_path}: {e}"
        finally:
            progress.finish()

        return (
            f"Uploaded {local_path} to {package_id}:{remote_path}\n"
            f"Size: {format_file_size(size)}\nSHA256: {digest.hex()}"
        )

    def download(
        self,
        package_id: str,
        remote_path: str,
        output_path: Optional[str] = None,
        offset: int = 0,
        length: int = -1,
    ) -> str:
        """
        Download a file, or length bytes of it starting at offset.

        A partially written output file is removed if the download fails.

        Returns:
            Success or error message
        """
        destination = Path(output_path or Path(remote_path).name).expanduser()
        if destination.is_dir():
            destination = destination / Path(remote_path).name

        file = self.client.package(package_id).file(remote_path)
        ranged = offset != 0 or length >= 0
        chunk_size = self.config.get_chunk_size()

        logger.info(
            f"Downloading {package_id}:{remote_path} to {destination} [offset={offset} length={length}]"
        )
        try:
            reader = file.new_range_reader(offset, length) if ranged else file.new_reader()
        except (FileHeapError, ValueError) as e:
            message = self._format_error(e) if isinstance(e, FileHeapError) else str(e)
            return f"Download failed: {message}"

        progress = TransferProgress("Downloading", remote_path, reader.size)
        received = 0
        try:
            with reader, open(destination, 'wb') as out:
                while True:
                    chunk = reader.read(chunk_size)
                    if not chunk:
                        break
                    out.write(chunk)
                    received += len(chunk)
                    progress.update(len(chunk))
        except (FileHeapError, OSError) as e:
            logger.warning(f"Download of {package_id}:{remote_path} failed: {e}")
            if destination.exists():
                os.remove(destination)
            message = self._format_error(e) if isinstance(e, FileHeapError) else str(e)
            return f"Download failed: {message}"
        finally:
            progress.finish()

        return f"Downloaded {package_id}:{remote_path} to {destination} ({format_file_size(received)})"

    def remove(self, package_id: str, path: str) -> str:
        """Delete a file."""
        try:
            self.client.package(package_id).file(path).delete()
        except FileHeapError as e:
            return f"Error: {self._format_error(e)}"
        return f"Deleted {package_id}:{path}"

    def close(self) -> None:
        self.client.close()
