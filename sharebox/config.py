"""Configuration management for the Sharebox client."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.sharebox' / 'config.json'


class Config:
    """Manages client configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "base_url": os.environ.get("SHAREBOX_BASE_URL", "http://localhost:5000"),
        "timeout": float(os.environ.get("SHAREBOX_TIMEOUT", "30")),
        "notification_history": 50,
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.sharebox/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.sharebox' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Config file unreadable ({e}), backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config file: {copy_error}")
                return self.DEFAULT_CONFIG.copy()

        config = self.DEFAULT_CONFIG.copy()
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write default config to {self.config_path}: {e}")
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.error(f"Could not save config to {self.config_path}: {e}")

    def get_token(self) -> Optional[str]:
        """
        Get the stored bearer token.

        Returns:
            Token string or None if not set
        """
        return self.data.get('token')

    def set_token(self, token: str) -> None:
        """Store the bearer token and save to file."""
        self.data['token'] = token
        self.save()

    def clear_token(self) -> None:
        """Remove the bearer token and save to file."""
        if self.data.pop('token', None) is not None:
            self.save()

    def get_base_url(self) -> str:
        """
        Get the file service base URL without a trailing slash.

        Returns:
            Base URL string (e.g., "http://localhost:5000")
        """
        return str(self.data.get('base_url', 'http://localhost:5000')).rstrip('/')

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', 30))

    def get_notification_history(self) -> int:
        """Number of notifications kept for the 'notifications' command."""
        return int(self.data.get('notification_history', 50))

    def get_log_file(self) -> Path:
        """Log file used by the REPL, next to the config file by default."""
        log_file = self.data.get('log_file')
        if log_file:
            return Path(log_file)
        return self.config_path.parent / 'sharebox.log'
