"""Configuration management for FileHeap CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path

from common.constants import DEFAULT_CHUNK_SIZE, DEFAULT_TIMEOUT
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.fileheap' / 'config.json'


class Config:
    """Manages CLI configuration stored in JSON file."""

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.fileheap/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    @staticmethod
    def defaults() -> dict:
        """Default settings, with the address and timeout taken from the environment."""
        return {
            "address": os.environ.get("FILEHEAP_ADDRESS", "http://localhost:8000"),
            "timeout": float(os.environ.get("FILEHEAP_TIMEOUT", DEFAULT_TIMEOUT)),
            "chunk_size": DEFAULT_CHUNK_SIZE,
        }

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.fileheap' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.defaults()
        if not self.config_path.exists():
            self._write(config)
            return config

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Invalid config file {self.config_path}: {e}; backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Could not back up config file: {copy_error}")
            return config

        config.update(data)
        return config

    def _write(self, data: dict) -> None:
        try:
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write config file {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def get_address(self) -> str:
        """
        Get the FileHeap server address.

        Returns:
            Address string (e.g., "http://localhost:8000")
        """
        return self.data.get('address', 'http://localhost:8000')

    def set_address(self, address: str) -> None:
        """Set the server address and save to file."""
        self.data['address'] = address
        self.save()

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', DEFAULT_TIMEOUT))

    def get_chunk_size(self) -> int:
        """Get the upload and download chunk size in bytes."""
        return int(self.data.get('chunk_size', DEFAULT_CHUNK_SIZE))
