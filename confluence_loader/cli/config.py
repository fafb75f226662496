"""YAML configuration loading and validation.

Configuration file structure:

    confluence:
      base_url: "https://example.atlassian.net/wiki"
      space_key: "TEAM"
      label: "runbook"
      limit: 25
      start: 0
      expand: "body.storage,version"
      max_retries: 5
      retry_backoff: 0.5
      request_timeout: 30
    output:
      mode: "document"
      metadata: {"source": "confluence"}
      omit_metadata_keys: "updated_by, updated_at"

Every field except base_url and space_key is optional, and both of those may
also come from the command line instead. Credentials never live in this file.
"""

from typing import Any, Dict, Optional

import yaml

from confluence_loader.loader.pipeline import OutputMode
from .errors import ConfigError, ConfigNotFoundError
from .models import LoaderConfig


class ConfigLoader:
    """Handles configuration file loading and validation.

    Values are merged in three layers: built-in defaults, then the YAML file,
    then command-line overrides.
    """

    DEFAULT_CONFIG_PATH = 'confluence-loader.yaml'

    # Allowed keys per section, mapped to LoaderConfig field names
    CONFLUENCE_FIELDS = {
        'base_url': 'base_url',
        'space_key': 'space_key',
        'label': 'label',
        'limit': 'limit',
        'start': 'start',
        'expand': 'expand',
        'max_retries': 'max_retries',
        'retry_backoff': 'retry_backoff',
        'request_timeout': 'request_timeout',
    }
    OUTPUT_FIELDS = {
        'mode': 'output',
        'metadata': 'metadata',
        'omit_metadata_keys': 'omit_metadata_keys',
    }

    REQUIRED_FIELDS = ('base_url', 'space_key')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """Load settings from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Flat dict of LoaderConfig field names to values

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigError: If the file cannot be read or is malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigNotFoundError(config_path)
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            return {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        unknown_sections = set(config_dict) - {'confluence', 'output'}
        if unknown_sections:
            raise ConfigError(
                f"Unknown section(s): {', '.join(sorted(unknown_sections))}"
            )

        settings: Dict[str, Any] = {}
        for section, fields in (('confluence', cls.CONFLUENCE_FIELDS),
                                ('output', cls.OUTPUT_FIELDS)):
            values = config_dict.get(section) or {}
            if not isinstance(values, dict):
                raise ConfigError("must be a dictionary", config_field=section)

            unknown = set(values) - set(fields)
            if unknown:
                raise ConfigError(
                    f"Unknown key(s): {', '.join(sorted(unknown))}",
                    config_field=section,
                )

            for key, value in values.items():
                settings[fields[key]] = value

        return settings

    @classmethod
    def build(cls, settings: Optional[Dict[str, Any]] = None, **overrides: Any) -> LoaderConfig:
        """Merge file settings with overrides and validate the result.

        Overrides whose value is None are ignored, so unset CLI options fall
        through to the file and then to the defaults.

        Raises:
            ConfigError: If a required field is missing or a value is invalid
        """
        merged = dict(settings or {})
        merged.update({key: value for key, value in overrides.items() if value is not None})

        for field_name in cls.REQUIRED_FIELDS:
            value = merged.get(field_name)
            if not value or not str(value).strip():
                raise ConfigError("is required", config_field=field_name)

        for field_name in ('limit', 'start', 'max_retries'):
            if field_name in merged:
                merged[field_name] = cls._as_int(merged[field_name], field_name)
        if merged.get('limit') is not None and merged['limit'] < 0:
            raise ConfigError("must be >= 0", config_field='limit')
        if merged.get('start') is not None and merged['start'] < 0:
            raise ConfigError("must be >= 0", config_field='start')
        if merged.get('max_retries') is not None and merged['max_retries'] < 1:
            raise ConfigError("must be >= 1", config_field='max_retries')

        for field_name in ('retry_backoff', 'request_timeout'):
            if merged.get(field_name) is not None:
                merged[field_name] = cls._as_float(merged[field_name], field_name)

        if 'output' in merged:
            try:
                merged['output'] = OutputMode(merged['output']).value
            except ValueError:
                raise ConfigError(
                    f"must be one of: {', '.join(mode.value for mode in OutputMode)}",
                    config_field='output',
                )

        if merged.get('limit') == 0:
            # 0 means "use the default page size"
            del merged['limit']

        return LoaderConfig(**merged)

    @staticmethod
    def _as_int(value: Any, field_name: str) -> int:
        if isinstance(value, bool):
            raise ConfigError("must be an integer", config_field=field_name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError("must be an integer", config_field=field_name)

    @staticmethod
    def _as_float(value: Any, field_name: str) -> float:
        if isinstance(value, bool):
            raise ConfigError("must be a number", config_field=field_name)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError("must be a number", config_field=field_name)
