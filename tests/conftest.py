"""Root pytest configuration for all tests."""

import logging

import pytest

# Sessions in these tests are mocks; keep real connection noise out of the output.
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers the CLI attaches to the package logger."""
    yield
    app_logger = logging.getLogger("confluence_loader")
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.setLevel(logging.NOTSET)
