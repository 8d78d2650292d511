"""Command handler functions for CLI operations."""

from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    CommandRequest,
    DeletePackageCommand,
    DownloadCommand,
    ListCommand,
    NewPackageCommand,
    PackageInfoCommand,
    RemoveCommand,
    SealCommand,
    StatCommand,
    UploadCommand,
)
from cli.storage_client import StorageClient

logger = get_logger(__name__)


_client: Optional[StorageClient] = None


def get_client() -> StorageClient:
    """
    Get or create global StorageClient instance.

    Returns:
        StorageClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new StorageClient instance")
        _client = StorageClient(Config())
    return _client


def handle_new_package(cmd: NewPackageCommand, client: Optional[StorageClient] = None) -> str:
    """
    Handle 'new-package' command.

    Args:
        cmd: NewPackageCommand
        client: Optional StorageClient for dependency injection (testing)

    Returns:
        Success message with the package ID, or error message
    """
    if client is None:
        client = get_client()
    return client.new_package()


def handle_package_info(cmd: PackageInfoCommand, client: Optional[StorageClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.package_info(cmd.package_id)


def handle_seal(cmd: SealCommand, client: Optional[StorageClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.seal(cmd.package_id)


def handle_delete_package(cmd: DeletePackageCommand, client: Optional[StorageClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.delete_package(cmd.package_id)


def handle_list(cmd: ListCommand, client: Optional[StorageClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with package_id and prefix
        client: Optional StorageClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    logger.info(f"Executing list command: package={cmd.package_id} prefix={cmd.prefix!r}")
    if client is None:
        client = get_client()
    result = client.list_files(cmd.package_id, cmd.prefix)
    logger.debug("List command completed")
    return result


def handle_stat(cmd: StatCommand, client: Optional[StorageClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.stat(cmd.package_id, cmd.path)


def handle_upload(cmd: UploadCommand, client: Optional[StorageClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with package_id, local_path and optional remote_path
        client: Optional StorageClient for dependency injection (testing)

    Returns:
        Success or error message with upload results
    """
    logger.info(f"Executing upload command: {cmd.local_path} -> {cmd.package_id}:{cmd.remote_path}")
    if client is None:
        client = get_client()
    result = client.upload(cmd.package_id, cmd.local_path, cmd.remote_path)
    logger.debug("Upload command completed")
    return result


def handle_download(cmd: DownloadCommand, client: Optional[StorageClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with remote path, optional output path and range
        client: Optional StorageClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    logger.info(
        f"Executing download command: {cmd.package_id}:{cmd.remote_path} output={cmd.output_path}"
    )
    if client is None:
        client = get_client()
    result = client.download(
        cmd.package_id, cmd.remote_path, cmd.output_path, offset=cmd.offset, length=cmd.length
    )
    logger.debug("Download command completed")
    return result


def handle_remove(cmd: RemoveCommand, client: Optional[StorageClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.remove(cmd.package_id, cmd.path)


HANDLERS = {
    NewPackageCommand: handle_new_package,
    PackageInfoCommand: handle_package_info,
    SealCommand: handle_seal,
    DeletePackageCommand: handle_delete_package,
    ListCommand: handle_list,
    StatCommand: handle_stat,
    UploadCommand: handle_upload,
    DownloadCommand: handle_download,
    RemoveCommand: handle_remove,
}


def dispatch_command(cmd_obj: CommandRequest, client: Optional[StorageClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, client=client)
