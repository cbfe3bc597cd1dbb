"""Configuration management for s3sync."""

import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import S3SyncConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_THREADS: int = 10
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_TIMEOUT: float = 60.0

LOG_LEVELS = ("error", "warning", "info", "debug")


class Config:
    """Resolves settings from environment variables and the config file.

    Environment variables take precedence over values stored in
    ``~/.config/s3sync/config`` (one ``KEY=VALUE`` per line).
    """

    ENV_PREFIX = "S3SYNC_"

    def __init__(self, config_path: Optional[Path] = None):
        self._config_path = config_path
        self._file_values: Optional[dict[str, str]] = None

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        if self._config_path is not None:
            return self._config_path
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        return Path(base) / "s3sync" / "config"

    def _load_file(self) -> dict[str, str]:
        if self._file_values is not None:
            return self._file_values

        values: dict[str, str] = {}
        path = self.get_config_path()
        if path.is_file():
            try:
                for line in path.read_text(encoding="utf-8").splitlines():
                    line = line.strip()
                    if not line or line.startswith("#") or "=" not in line:
                        continue
                    key, value = line.split("=", 1)
                    values[key.strip().upper()] = value.strip().strip("\"'")
            except OSError as e:
                raise S3SyncConfigError(f"Cannot read config file {path}: {e}") from e
            logger.debug("Loaded %d setting(s) from %s", len(values), path)

        self._file_values = values
        return values

    def get(self, key: str) -> Optional[str]:
        """Look up a setting by name (e.g. ``"endpoint"``).

        Args:
            key: Setting name without the ``S3SYNC_`` prefix

        Returns:
            The configured value or None
        """
        name = f"{self.ENV_PREFIX}{key.upper()}"
        value = os.environ.get(name)
        if value:
            return value
        return self._load_file().get(name) or None

    @property
    def endpoint(self) -> Optional[str]:
        return self.get("endpoint")

    @property
    def region(self) -> Optional[str]:
        return self.get("region")

    @property
    def max_threads(self) -> int:
        value = self.get("max_threads")
        if value is None:
            return DEFAULT_MAX_THREADS
        try:
            threads = int(value)
        except ValueError as e:
            raise S3SyncConfigError(f"Invalid max_threads value: {value!r}") from e
        if threads < 1:
            raise S3SyncConfigError("max_threads must be at least 1")
        return threads

    @property
    def log_level(self) -> str:
        value = (self.get("log_level") or DEFAULT_LOG_LEVEL).lower()
        if value not in LOG_LEVELS:
            raise S3SyncConfigError(
                f"Invalid log level {value!r}, expected one of {', '.join(LOG_LEVELS)}"
            )
        return value


config = Config()
