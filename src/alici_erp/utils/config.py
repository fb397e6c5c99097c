"""
Configuration management for the ALICI ERP client.

This module handles:
- API endpoint configuration
- Network settings (timeout, retries, backoff)
- Local storage location (development vs. production)

Runtime session state (exchange rate, auth token, current user) is not
kept here; it lives on the AppContext so it can be injected per session.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    API_PREFIX,
    APP_NAME,
    APP_VERSION,
    DEFAULT_API_URL,
    DEFAULT_REQUEST_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_BACKOFF,
    STORAGE_DATABASE_FILENAME,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "ALICI_ERP"


def _env_number(name: str, default, cast):
    """Read a numeric environment override, falling back to default on bad input."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using default {default}")
        return default
    if value < 0:
        logger.warning(f"Invalid {name}={raw!r} (negative); using default {default}")
        return default
    return value


class Config:
    """
    Application configuration manager.

    Handles API location, network behaviour and where the local key/value
    storage (token persistence) is kept.
    """

    def __init__(self, environment: str = "production"):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
        """
        self.environment = environment
        self._app_name = APP_NAME
        self._app_version = APP_VERSION

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._storage_path = self._base_dir / STORAGE_DATABASE_FILENAME

    def _get_project_data_dir(self) -> Path:
        """Project data/ directory used in development."""
        project_root = Path(__file__).parent.parent.parent.parent
        return project_root / "data"

    def _get_user_documents_dir(self) -> Path:
        """Per-user application directory used in production."""
        if os.name == "nt":  # Windows
            documents = Path(os.path.expanduser("~")) / "Documents"
        else:
            documents = Path.home() / "Documents"
        return documents / "AliciERP"

    def ensure_directories(self) -> None:
        """Create the storage directory if it doesn't exist."""
        self._base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def app_name(self) -> str:
        """Application name."""
        return self._app_name

    @property
    def app_version(self) -> str:
        """Application version."""
        return self._app_version

    @property
    def api_url(self) -> str:
        """Server root URL (without the /api prefix)."""
        return os.environ.get(f"{ENV_PREFIX}_API_URL", DEFAULT_API_URL).rstrip("/")

    @property
    def api_base_url(self) -> str:
        """Base URL every request path is appended to."""
        return f"{self.api_url}{API_PREFIX}"

    @property
    def request_timeout(self) -> float:
        """Per-request timeout in seconds."""
        return _env_number(f"{ENV_PREFIX}_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float)

    @property
    def request_retries(self) -> int:
        """Retry count for idempotent (GET) requests."""
        return _env_number(f"{ENV_PREFIX}_REQUEST_RETRIES", DEFAULT_REQUEST_RETRIES, int)

    @property
    def retry_backoff(self) -> float:
        """Exponential backoff factor between retries."""
        return _env_number(f"{ENV_PREFIX}_RETRY_BACKOFF", DEFAULT_RETRY_BACKOFF, float)

    @property
    def storage_path(self) -> Path:
        """Full path to the local storage database file."""
        return self._storage_path

    @property
    def storage_url(self) -> str:
        """
        SQLAlchemy URL of the local storage database.

        Returns:
            Database URL string for SQLAlchemy
        """
        path_str = str(self._storage_path).replace("\\", "/")
        return f"sqlite:///{path_str}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(environment='{self.environment}', api_url='{self.api_url}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the application default configuration instance.

    Once created, the instance's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    ALICI_ERP_ENV or defaults to production. Ignored if
                    the instance already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(f"{ENV_PREFIX}_ENV", "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but config "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing config."
        )

    return _config_instance


def reset_config():
    """
    Reset the default configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None
