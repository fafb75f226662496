"""Main CLI entry point for the confluence-loader command.

Loads every page of a Confluence space (optionally filtered by label) and
prints the normalized documents as JSON, or their concatenated text.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from confluence_loader import __version__
from confluence_loader.cli.config import ConfigLoader
from confluence_loader.cli.errors import CLIError
from confluence_loader.cli.models import ExitCode, LoaderConfig
from confluence_loader.cli.output import OutputHandler
from confluence_loader.confluence_client.auth import Authenticator, Credentials
from confluence_loader.confluence_client.errors import InvalidCredentialsError
from confluence_loader.loader import ConfluencePagesLoader, MetadataError, OutputMode, run_pipeline

app = typer.Typer(
    name="confluence-loader",
    help="""Load the pages of a Confluence space as plain-text documents.

Credentials are read from the environment (or a .env file):
  CONFLUENCE_USERNAME + CONFLUENCE_ACCESS_TOKEN     # Confluence Cloud
  CONFLUENCE_PERSONAL_ACCESS_TOKEN                  # Server / Data Center""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'confluence_loader' namespace logger so third-party
    libraries keep their own settings.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("confluence_loader")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-loader_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _build_loader(config: LoaderConfig, credentials: Credentials) -> ConfluencePagesLoader:
    return ConfluencePagesLoader(
        base_url=config.base_url,
        space_key=config.space_key,
        username=credentials.username,
        access_token=credentials.access_token,
        personal_access_token=credentials.personal_access_token,
        label=config.label,
        limit=config.limit,
        expand=config.expand,
        max_retries=config.max_retries,
        retry_backoff=config.retry_backoff,
        timeout=config.request_timeout,
    )


def _load_settings(config_path: Optional[str]) -> dict:
    """Read the config file given on the command line, or the default one if present."""
    if config_path:
        return ConfigLoader.load(config_path)
    if os.path.exists(ConfigLoader.DEFAULT_CONFIG_PATH):
        return ConfigLoader.load(ConfigLoader.DEFAULT_CONFIG_PATH)
    return {}


@app.command()
def main_command(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"YAML config file (default: ./{ConfigLoader.DEFAULT_CONFIG_PATH} if present)",
        metavar="FILE",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Confluence base URL, e.g. https://example.atlassian.net/wiki",
        metavar="URL",
    ),
    space_key: Optional[str] = typer.Option(
        None,
        "--space-key",
        help="Key of the space to load",
        metavar="KEY",
    ),
    label: Optional[str] = typer.Option(
        None,
        "--label",
        help="Only load pages with this label",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        help="Pages per request (0 uses the default of 25)",
    ),
    start: Optional[int] = typer.Option(
        None,
        "--start",
        help="Offset of the first page to load",
    ),
    expand: Optional[str] = typer.Option(
        None,
        "--expand",
        help="Page fields to expand (default: body.storage,version)",
    ),
    max_retries: Optional[int] = typer.Option(
        None,
        "--max-retries",
        help="Attempts per request before giving up (default: 5)",
    ),
    metadata: Optional[str] = typer.Option(
        None,
        "--metadata",
        help="Additional metadata for every document, as a JSON object",
        metavar="JSON",
    ),
    omit_metadata_keys: Optional[str] = typer.Option(
        None,
        "--omit-metadata-keys",
        help="Comma-separated default metadata keys to omit, or * to omit all",
        metavar="KEYS",
    ),
    output_mode: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output mode: document (JSON array) or text",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Load the pages of a Confluence space as plain-text documents.

    \b
    EXAMPLES:
      confluence-loader --base-url https://example.atlassian.net/wiki --space-key TEAM
      confluence-loader -c confluence-loader.yaml --label runbook --output text
      confluence-loader -c confluence-loader.yaml --metadata '{"source": "wiki"}' --omit-metadata-keys '*'
    """
    if version:
        typer.echo(f"confluence-loader version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        settings = _load_settings(config_path)
        config = ConfigLoader.build(
            settings,
            base_url=base_url,
            space_key=space_key,
            label=label,
            limit=limit,
            start=start,
            expand=expand,
            max_retries=max_retries,
            metadata=metadata,
            omit_metadata_keys=omit_metadata_keys,
            output=output_mode,
        )
        credentials = Authenticator().get_credentials()
    except InvalidCredentialsError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.AUTH_ERROR)
    except CLIError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.info(f"Loading space '{config.space_key}' from {config.base_url}")
    output.debug(f"Auth scheme: {credentials.scheme}")

    loader = _build_loader(config, credentials)

    try:
        with output.spinner(f"Fetching pages from space '{config.space_key}'..."):
            result = run_pipeline(
                loader,
                metadata=config.metadata,
                omit_metadata_keys=config.omit_metadata_keys,
                output=config.output,
                start=config.start,
            )
    except MetadataError as e:
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    finally:
        loader.close()

    if config.output == OutputMode.DOCUMENT.value:
        typer.echo(json.dumps([doc.to_dict() for doc in result], indent=2, ensure_ascii=False))
        output.print_summary(config.space_key, len(result))
    else:
        typer.echo(result)

    raise typer.Exit(ExitCode.SUCCESS)


def main() -> None:
    """Main entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
