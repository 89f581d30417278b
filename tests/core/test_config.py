from __future__ import annotations

from pathlib import Path

import pytest

from foldertidy.core.config import (
    DEFAULT_CLASSIFY_URL,
    FolderTidyConfig,
    load_config_from_env,
)
from foldertidy.errors import ConfigError


class TestLoadConfigFromEnv:
    def test_defaults_with_only_api_key(self, api_env: None) -> None:
        config = load_config_from_env()

        expected = FolderTidyConfig(api_key="test-key")
        assert config == expected
        assert config.classify_url == DEFAULT_CLASSIFY_URL
        assert config.batch_size == 90
        assert config.confidence_threshold == 0.5
        assert config.model is None

    def test_missing_api_key(self, api_env: None, monkeypatch) -> None:
        monkeypatch.delenv("COHERE_API_KEY")

        with pytest.raises(ConfigError, match="COHERE_API_KEY"):
            load_config_from_env()

    def test_blank_api_key(self, api_env: None, monkeypatch) -> None:
        monkeypatch.setenv("COHERE_API_KEY", "   ")

        with pytest.raises(ConfigError, match="COHERE_API_KEY"):
            load_config_from_env()

    def test_reads_optional_settings(self, api_env: None, monkeypatch) -> None:
        monkeypatch.setenv("COHERE_CLASSIFY_URL", "http://localhost:9999/classify")
        monkeypatch.setenv("COHERE_CLASSIFY_MODEL", "embed-english-v3.0")
        monkeypatch.setenv("FOLDERTIDY_BATCH_SIZE", "50")
        monkeypatch.setenv("FOLDERTIDY_CONFIDENCE_THRESHOLD", "0.7")
        monkeypatch.setenv("FOLDERTIDY_EXAMPLES_PATH", "/tmp/examples.yaml")
        monkeypatch.setenv("FOLDERTIDY_REQUEST_TIMEOUT", "12.5")

        config = load_config_from_env()

        assert config.classify_url == "http://localhost:9999/classify"
        assert config.model == "embed-english-v3.0"
        assert config.batch_size == 50
        assert config.confidence_threshold == 0.7
        assert config.examples_path == Path("/tmp/examples.yaml")
        assert config.request_timeout == 12.5

    @pytest.mark.parametrize(
        ("var", "value"),
        [
            ("FOLDERTIDY_BATCH_SIZE", "lots"),
            ("FOLDERTIDY_BATCH_SIZE", "0"),
            ("FOLDERTIDY_BATCH_SIZE", "97"),
            ("FOLDERTIDY_CONFIDENCE_THRESHOLD", "high"),
            ("FOLDERTIDY_CONFIDENCE_THRESHOLD", "1.5"),
            ("FOLDERTIDY_REQUEST_TIMEOUT", "-1"),
        ],
    )
    def test_invalid_values(self, api_env: None, monkeypatch, var, value) -> None:
        monkeypatch.setenv(var, value)

        with pytest.raises(ConfigError):
            load_config_from_env()


class TestWithOverrides:
    def test_none_overrides_keep_values(self) -> None:
        config = FolderTidyConfig(api_key="k", batch_size=40)

        result = config.with_overrides(batch_size=None, confidence_threshold=None)

        assert result is config

    def test_overrides_are_validated(self) -> None:
        config = FolderTidyConfig(api_key="k")

        assert config.with_overrides(batch_size=10).batch_size == 10
        with pytest.raises(ConfigError):
            config.with_overrides(batch_size=500)

    def test_config_is_frozen(self) -> None:
        config = FolderTidyConfig(api_key="k")

        with pytest.raises(AttributeError):
            config.batch_size = 3  # type: ignore[misc]
