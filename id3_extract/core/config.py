"""
Configuration management for id3-extract.

This module handles loading, validating, and providing access to the
optional configuration stored in id3x.yaml.

The configuration file contains:
    - Default artwork output prefix
    - JSON output indentation
    - Console log level and optional log file directory

Configuration File Location:
    id3x.yaml in the current working directory is picked up when present.
    A different file can be passed explicitly (CLI: --config). Without any
    file the defaults below apply.

Example id3x.yaml:
    output:
      art_out: "~/Pictures/covers/cover"   # extension is appended
      indent: 2

    logging:
      level: INFO
      directory: "~/.cache/id3x/logs"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from id3_extract.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "id3x.yaml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_INDENT = 2
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class OutputConfig:
    """
    Output configuration.

    Attributes:
        art_out: Path prefix for extracted artwork, or None to skip writing
                 artwork. The image type is appended as extension.
        indent: JSON indentation; 0 prints compact JSON.
    """
    art_out: Path | None
    indent: int


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        level: Console log level name.
        directory: Directory for log files, or None for console-only logging.
    """
    level: str
    directory: Path | None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Attributes:
        output: Output settings.
        logging: Logging settings.
    """
    output: OutputConfig
    logging: LoggingConfig


def default_config() -> Config:
    """Return the configuration used when no file is present."""
    return Config(
        output=OutputConfig(art_out=None, indent=DEFAULT_INDENT),
        logging=LoggingConfig(level=DEFAULT_LOG_LEVEL, directory=None),
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Optional explicit path to config file.
                     If None, id3x.yaml in the current working directory
                     is used when it exists; otherwise defaults are returned.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or it contains invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return default_config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid, empty configuration
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        output=_parse_output_config(_section(raw_config, "output")),
        logging=_parse_logging_config(_section(raw_config, "logging")),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """
    Return a config section, or an empty dict when it is absent.

    Raises:
        ConfigError: If the section is present but not a dictionary.
    """
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_output_config(output_section: dict[str, Any]) -> OutputConfig:
    """
    Parse and validate the output configuration section.

    Raises:
        ConfigError: If art_out is not a non-empty string or indent is
                     not a non-negative integer.
    """
    art_out = _optional_path(output_section, "art_out", "output.art_out")

    indent = output_section.get("indent", DEFAULT_INDENT)
    # bool is an int subclass; reject it explicitly
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ConfigError(
            "'output.indent' must be a non-negative integer",
            details={"field": "output.indent", "value": indent}
        )

    return OutputConfig(art_out=art_out, indent=indent)


def _parse_logging_config(logging_section: dict[str, Any]) -> LoggingConfig:
    """
    Parse and validate the logging configuration section.

    Raises:
        ConfigError: If level is not a known level name or directory is
                     not a non-empty string.
    """
    level = logging_section.get("level", DEFAULT_LOG_LEVEL)
    if not isinstance(level, str) or level.strip().upper() not in LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    directory = _optional_path(logging_section, "directory", "logging.directory")

    return LoggingConfig(level=level.strip().upper(), directory=directory)


def _optional_path(section: dict[str, Any], key: str, field: str) -> Path | None:
    """Read an optional path value, expanding ~ and making it absolute."""
    raw = section.get(key)
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string or null",
            details={"field": field}
        )
    return Path(raw.strip()).expanduser().resolve()
