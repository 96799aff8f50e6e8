"""
Unit Test Fixtures.

Fixtures for unit tests. Collaborators are mocked; the only real
persistence is the throwaway SQLite file from the root note_store fixture.
"""

from unittest.mock import MagicMock

import pytest


# =============================================================================
# Config Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    Mock YAML application configuration.

    Usage:
        def test_with_config(mock_app_config):
            with patch("module.get_app_config", return_value=mock_app_config):
                # Test code that uses app config
    """
    config = MagicMock()
    config.application.name = "Test App"
    config.application.version = "1.0.0"
    config.application.environment = "test"
    config.application.api_prefix = "/api"
    config.database.echo = False
    config.database.busy_timeout_seconds = 1.0
    config.database.journal_mode = "WAL"
    config.concurrency.thread_pool.max_workers = 4
    config.storage.url_prefix = "/uploads"
    config.storage.max_upload_bytes = 1024
    return config


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
