"""Command-line interface for the Confluence space loader.

This package provides the `confluence-loader` CLI tool: configuration
loading, credential resolution, and terminal output around the loader.
"""

from .config import ConfigLoader
from .models import ExitCode, LoaderConfig
from .errors import (
    CLIError,
    ConfigError,
    ConfigNotFoundError,
)

__all__ = [
    'ConfigLoader',
    'ExitCode',
    'LoaderConfig',
    'CLIError',
    'ConfigError',
    'ConfigNotFoundError',
]
