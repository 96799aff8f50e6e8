"""
Configuration Management.

Loads settings from config/settings/*.yaml and deployment overrides from
the environment (or config/.env). No hardcoded values in code; all
configuration comes from these sources.

Overrides (environment, prefix PLH_):
    PLH_DB_PATH, PLH_UPLOAD_DIR, PLH_HOST, PLH_PORT

Settings (YAML):
    application.yaml   - App identity, server, cors, browser client
    database.yaml      - SQLite database file and connection settings
    logging.yaml       - Logging configuration
    concurrency.yaml   - Thread pool sizing
    storage.yaml       - Attachment upload directory and limits
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notehub.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    LoggingSchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def resolve_project_path(path: str) -> Path:
    """Resolve a configured path; relative paths are anchored at the project root."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return find_project_root() / candidate


class Settings(BaseSettings):
    """Deployment overrides loaded from the environment or config/.env."""

    db_path: str | None = None
    upload_dir: str | None = None
    host: str | None = None
    port: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="PLH_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (thread pool)."""
        return self._concurrency

    @property
    def storage(self) -> StorageSchema:
        """Attachment storage settings."""
        return self._storage


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_path() -> Path:
    """
    Get the SQLite database file path.

    PLH_DB_PATH takes precedence over database.yaml.
    """
    configured = get_settings().db_path or get_app_config().database.path
    return resolve_project_path(configured)


def get_database_url() -> str:
    """
    Construct the SQLAlchemy database URL for the notes database.

    Returns:
        Database connection URL string.
    """
    return f"sqlite:///{get_database_path()}"


def get_upload_dir() -> Path:
    """
    Get the attachment upload directory.

    PLH_UPLOAD_DIR takes precedence over storage.yaml.
    """
    configured = get_settings().upload_dir or get_app_config().storage.upload_dir
    return resolve_project_path(configured)


def get_frontend_dir() -> Path | None:
    """Directory of the browser client, or None when application.yaml disables it."""
    frontend = get_app_config().application.frontend
    if not frontend.enabled:
        return None
    return resolve_project_path(frontend.directory)


def get_server_address() -> tuple[str, int]:
    """
    Get the listen address for the HTTP server.

    PLH_HOST / PLH_PORT take precedence over application.yaml.

    Returns:
        Tuple of (host, port).
    """
    settings = get_settings()
    server = get_app_config().application.server
    return settings.host or server.host, settings.port or server.port
