"""Configuration management for the Document Retrieval client.

This module provides the Settings dataclass and loading/validation functions.
All configuration values are read from config/settings.yaml.

Design Principles:
    - Config-Driven: All values sourced from settings.yaml
    - Fail-Fast: Missing required fields cause immediate failure
    - Clear Errors: Error messages include field paths (e.g., 'api.base_url')
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Environment variable that overrides api.base_url
API_URL_ENV_VAR = "DOCRETRIEVAL_API_URL"


@dataclass
class APIConfig:
    """Document retrieval service configuration.

    Attributes:
        base_url: Base URL of the retrieval service - REQUIRED
        timeout: Request timeout in seconds for regular calls
        stream_timeout: Read timeout for the ingestion stream (None = no limit)
    """
    base_url: str | None = None
    timeout: float = 30.0
    stream_timeout: float | None = None


@dataclass
class SearchConfig:
    """Search configuration.

    Attributes:
        top_k: Number of results requested per search
        highlight_query: Whether search result previews mark the query
    """
    top_k: int = 10
    highlight_query: bool = True


@dataclass
class ObservabilityConfig:
    """Observability and logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to a log file
    """
    log_level: str = "INFO"
    log_file: str | None = None


@dataclass
class Settings:
    """Application settings container.

    Attributes:
        api: Retrieval service configuration
        search: Search configuration
        observability: Observability configuration
    """
    api: APIConfig = field(default_factory=APIConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


class SettingsError(Exception):
    """Base exception for settings-related errors."""

    pass


class SettingsFileError(SettingsError):
    """Raised when settings file cannot be read or parsed."""

    pass


class SettingsValidationError(SettingsError):
    """Raised when settings validation fails."""

    def __init__(self, message: str, missing_fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing_fields = missing_fields or []


def _flatten_dict(d: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten a nested dictionary to dot-notation keys.

    Args:
        d: Dictionary to flatten
        prefix: Prefix for nested keys

    Returns:
        Flattened dictionary with dot-notation keys
    """
    result: dict[str, Any] = {}
    for key, value in d.items():
        new_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            result.update(_flatten_dict(value, new_key))
        else:
            result[new_key] = value
    return result


def _get_required_fields() -> list[str]:
    """Return dot-notation paths of fields that must not be None."""
    return [
        "api.base_url",
        "api.timeout",
        "search.top_k",
        "observability.log_level",
    ]


def validate_settings(settings: Settings) -> None:
    """Validate required fields and value ranges in settings.

    Args:
        settings: Settings object to validate

    Raises:
        SettingsValidationError: If required fields are missing or invalid

    Example:
        >>> settings = load_settings("config/settings.yaml")
        >>> validate_settings(settings)  # May raise if required fields missing
    """
    missing: list[str] = []

    for field_path in _get_required_fields():
        current: Any = settings
        for part in field_path.split("."):
            current = getattr(current, part, None)
            if current is None:
                break
        if current is None or current == "":
            missing.append(field_path)

    if missing:
        field_list = ", ".join(missing)
        raise SettingsValidationError(
            f"Missing required configuration fields: {field_list}",
            missing_fields=missing
        )

    for field_path, value, expected, description in (
        ("search.top_k", settings.search.top_k, int, "an integer"),
        ("api.timeout", settings.api.timeout, (int, float), "a number"),
        ("search.highlight_query", settings.search.highlight_query, bool, "true or false"),
        ("observability.log_level", settings.observability.log_level, str, "a string"),
    ):
        # YAML booleans are ints in Python
        if (isinstance(value, bool) and expected is not bool) or not isinstance(value, expected):
            raise SettingsValidationError(f"{field_path} must be {description}, got {value!r}")

    stream_timeout = settings.api.stream_timeout
    if stream_timeout is not None and (
        isinstance(stream_timeout, bool)
        or not isinstance(stream_timeout, (int, float))
        or stream_timeout <= 0
    ):
        raise SettingsValidationError(
            f"api.stream_timeout must be a positive number or null, got {stream_timeout!r}"
        )

    if settings.search.top_k < 1:
        raise SettingsValidationError(
            f"search.top_k must be >= 1, got {settings.search.top_k}"
        )
    if settings.api.timeout <= 0:
        raise SettingsValidationError(
            f"api.timeout must be > 0, got {settings.api.timeout}"
        )


def _yaml_to_settings(data: dict[str, Any]) -> Settings:
    """Convert YAML dictionary to Settings object.

    Args:
        data: Parsed YAML dictionary

    Returns:
        Settings object
    """
    def _build_api(data: dict[str, Any]) -> APIConfig:
        return APIConfig(
            base_url=data.get("base_url"),
            timeout=data.get("timeout", 30.0),
            stream_timeout=data.get("stream_timeout"),
        )

    def _build_search(data: dict[str, Any]) -> SearchConfig:
        return SearchConfig(
            top_k=data.get("top_k", 10),
            highlight_query=data.get("highlight_query", True),
        )

    def _build_observability(data: dict[str, Any]) -> ObservabilityConfig:
        return ObservabilityConfig(
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
        )

    return Settings(
        api=_build_api(data.get("api") or {}),
        search=_build_search(data.get("search") or {}),
        observability=_build_observability(data.get("observability") or {}),
    )


def load_settings(path: str | Path = "config/settings.yaml") -> Settings:
    """Load settings from a YAML file.

    The ``DOCRETRIEVAL_API_URL`` environment variable, when set, takes
    precedence over ``api.base_url``.

    Args:
        path: Path to the settings YAML file (default: config/settings.yaml)

    Returns:
        Settings object with all configuration loaded

    Raises:
        SettingsFileError: If the file cannot be read or parsed
        SettingsValidationError: If required fields are missing

    Example:
        >>> settings = load_settings()
        >>> print(settings.api.base_url)
        http://localhost:8000
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise SettingsFileError(f"Settings file not found: {path}") from e
    except yaml.YAMLError as e:
        raise SettingsFileError(f"Invalid YAML in settings file: {e}") from e

    if not isinstance(data, dict):
        raise SettingsFileError(f"Settings file must contain a mapping: {path}")

    settings = _yaml_to_settings(data)

    env_url = os.environ.get(API_URL_ENV_VAR)
    if env_url:
        settings.api.base_url = env_url

    validate_settings(settings)

    return settings


def get_effective_settings(
    path: str | Path = "config/settings.yaml",
    overrides: dict[str, Any] | None = None
) -> Settings:
    """Load settings with optional runtime overrides.

    Args:
        path: Path to the settings YAML file
        overrides: Optional dictionary of field paths to override.
                   Use dot-notation (e.g., {"search.top_k": 5})

    Returns:
        Settings object with overrides applied

    Example:
        >>> settings = get_effective_settings(
        ...     overrides={"api": {"base_url": "http://search:8000"}}
        ... )
        >>> settings.api.base_url
        http://search:8000
    """
    settings = load_settings(path)

    if overrides:
        flat_overrides = _flatten_dict(overrides)
        for field_path, value in flat_overrides.items():
            parts = field_path.split(".")
            obj = settings
            for part in parts[:-1]:
                obj = getattr(obj, part)
            setattr(obj, parts[-1], value)
        validate_settings(settings)

    return settings
