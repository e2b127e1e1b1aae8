"""Tests for configuration loading and validation.

These tests verify that:
1. Settings can be loaded from YAML files
2. Required fields are validated
3. Error messages are clear and include field paths
"""

import tempfile
from pathlib import Path

import pytest

from core.settings import (
    API_URL_ENV_VAR,
    APIConfig,
    Settings,
    get_effective_settings,
    load_settings,
    validate_settings,
    SettingsError,
    SettingsFileError,
    SettingsValidationError,
)


def _write_yaml(content: str) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
    return Path(f.name)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)


class TestSettingsLoading:
    """Test loading settings from YAML files."""

    def test_load_default_settings(self, config_path: Path) -> None:
        """Test loading the shipped settings.yaml file."""
        settings = load_settings(config_path / "settings.yaml")
        assert isinstance(settings, Settings)
        assert settings.api.base_url == "http://localhost:8000"
        assert settings.api.stream_timeout is None
        assert settings.search.top_k == 10

    def test_load_minimal_settings(self) -> None:
        """Test only api.base_url is needed; the rest defaults."""
        path = _write_yaml("api:\n  base_url: http://search:8000\n")
        try:
            settings = load_settings(path)
        finally:
            path.unlink()

        assert settings.api.base_url == "http://search:8000"
        assert settings.api.timeout == 30.0
        assert settings.search.highlight_query is True
        assert settings.observability.log_level == "INFO"

    def test_load_nonexistent_file(self) -> None:
        """Test that loading a nonexistent file raises SettingsFileError."""
        with pytest.raises(SettingsFileError) as exc_info:
            load_settings("/nonexistent/settings.yaml")
        assert "not found" in str(exc_info.value)

    def test_load_invalid_yaml(self) -> None:
        """Test that malformed YAML raises SettingsFileError."""
        path = _write_yaml("api: [unclosed\n")
        try:
            with pytest.raises(SettingsFileError):
                load_settings(path)
        finally:
            path.unlink()

    def test_non_mapping_yaml(self) -> None:
        """Test a YAML list at top level is rejected."""
        path = _write_yaml("- a\n- b\n")
        try:
            with pytest.raises(SettingsFileError):
                load_settings(path)
        finally:
            path.unlink()

    def test_env_overrides_base_url(self, monkeypatch, config_path: Path) -> None:
        """Test the environment variable takes precedence."""
        monkeypatch.setenv(API_URL_ENV_VAR, "http://from-env:9000")
        settings = load_settings(config_path / "settings.yaml")
        assert settings.api.base_url == "http://from-env:9000"

    def test_env_satisfies_missing_base_url(self, monkeypatch) -> None:
        """Test the environment can supply a base URL absent from the file."""
        monkeypatch.setenv(API_URL_ENV_VAR, "http://from-env:9000")
        path = _write_yaml("search:\n  top_k: 3\n")
        try:
            settings = load_settings(path)
        finally:
            path.unlink()
        assert settings.api.base_url == "http://from-env:9000"


class TestSettingsValidation:
    """Test validation of required fields and ranges."""

    def test_missing_base_url(self) -> None:
        """Test the error lists the dotted field path."""
        path = _write_yaml("search:\n  top_k: 5\n")
        try:
            with pytest.raises(SettingsValidationError) as exc_info:
                load_settings(path)
        finally:
            path.unlink()

        assert "api.base_url" in str(exc_info.value)
        assert exc_info.value.missing_fields == ["api.base_url"]

    def test_invalid_top_k(self) -> None:
        settings = Settings(api=APIConfig(base_url="http://x"))
        settings.search.top_k = 0
        with pytest.raises(SettingsValidationError, match="top_k"):
            validate_settings(settings)

    def test_invalid_timeout(self) -> None:
        settings = Settings(api=APIConfig(base_url="http://x", timeout=0))
        with pytest.raises(SettingsValidationError, match="timeout"):
            validate_settings(settings)

    @pytest.mark.parametrize("section,value,field_path", [
        ("search", 'top_k: "10"', "search.top_k"),
        ("search", "top_k: true", "search.top_k"),
        ("search", "highlight_query: maybe", "search.highlight_query"),
        ("api", 'timeout: "30"', "api.timeout"),
        ("api", "stream_timeout: 0", "api.stream_timeout"),
        ("api", "stream_timeout: slow", "api.stream_timeout"),
    ])
    def test_ill_typed_values_rejected(self, section: str, value: str, field_path: str) -> None:
        """Test wrongly typed YAML values raise a validation error with the field path."""
        sections = {"api": ["base_url: http://x"], "search": []}
        sections[section].append(value)
        content = "".join(
            f"{name}:\n" + "".join(f"  {line}\n" for line in lines)
            for name, lines in sections.items() if lines
        )
        path = _write_yaml(content)
        try:
            with pytest.raises(SettingsValidationError, match=field_path.replace(".", r"\.")):
                load_settings(path)
        finally:
            path.unlink()

    def test_numeric_stream_timeout_accepted(self) -> None:
        settings = Settings(api=APIConfig(base_url="http://x", timeout=5, stream_timeout=120))
        validate_settings(settings)

    def test_errors_share_base_class(self) -> None:
        assert issubclass(SettingsFileError, SettingsError)
        assert issubclass(SettingsValidationError, SettingsError)


class TestEffectiveSettings:
    """Test runtime overrides."""

    def test_overrides_applied(self, config_path: Path) -> None:
        settings = get_effective_settings(
            config_path / "settings.yaml",
            overrides={"search": {"top_k": 3}, "api.timeout": 5.0},
        )
        assert settings.search.top_k == 3
        assert settings.api.timeout == 5.0

    def test_invalid_override_rejected(self, config_path: Path) -> None:
        with pytest.raises(SettingsValidationError):
            get_effective_settings(config_path / "settings.yaml", overrides={"search.top_k": 0})
