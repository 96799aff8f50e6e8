"""
Configuration Schemas.

One model per file in config/settings/, validated when AppConfig loads.
Unknown keys are rejected, so a typo in a YAML file stops startup instead
of being silently ignored.

    application.yaml  ApplicationSchema  identity, server, CORS, browser client
    database.yaml     DatabaseSchema     SQLite notes database
    logging.yaml      LoggingSchema      structlog output and the JSONL file
    concurrency.yaml  ConcurrencySchema  thread pool for store and file work
    storage.yaml      StorageSchema      PDF attachment uploads
"""

from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


def _url_path(value: str) -> str:
    if not value.startswith("/") or (value != "/" and value.endswith("/")):
        raise ValueError("must start with '/' and have no trailing '/'")
    return value


# API and attachment mount points, e.g. "/api"
UrlPath = Annotated[str, AfterValidator(_url_path)]


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str]


class FrontendSchema(_StrictBase):
    """Static browser client mounted at '/'."""

    enabled: bool
    directory: str = Field(min_length=1)


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: UrlPath
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    frontend: FrontendSchema


class DatabaseSchema(_StrictBase):
    """
    SQLite notes database.

    journal_mode is written into a PRAGMA on every connection, so only
    SQLite's own mode names are accepted.
    """

    path: str = Field(min_length=1)
    echo: bool
    busy_timeout_seconds: float = Field(gt=0)
    journal_mode: Literal["WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF"]


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(ge=1)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema


class ThreadPoolSchema(_StrictBase):
    max_workers: int = Field(ge=1)


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema


class StorageSchema(_StrictBase):
    """Where uploaded PDFs are kept and the path they are served under."""

    upload_dir: str = Field(min_length=1)
    url_prefix: UrlPath
    max_upload_bytes: int = Field(ge=1)
