# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for normalizer configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest

from mailnorm.config import (
    DEFAULT_CONFIG,
    ConfigError,
    NormalizerConfig,
    get_config_path,
    get_dotenv_path,
)


class TestDefaults:
    """Tests for default values and validation."""

    def test_defaults(self) -> None:
        """Defaults match the tuned thresholds."""
        config = NormalizerConfig()
        assert config.max_quote_depth == 20
        assert config.reflow_min_length == 65
        assert config.reflow_max_length == 82
        assert config.reflow_ratio == 0.6
        assert config.section_header_max_length == 80
        assert config.rich_text_min_length == 20
        assert config.preview_length == 120
        assert DEFAULT_CONFIG == config

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_quote_depth": 0},
            {"reflow_min_length": 90},
            {"reflow_ratio": 0.0},
            {"reflow_ratio": 1.5},
            {"section_header_max_length": -1},
            {"preview_length": -5},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Inconsistent thresholds raise ConfigError."""
        with pytest.raises(ConfigError):
            NormalizerConfig(**kwargs)

    def test_ratio_of_one_allowed(self) -> None:
        """A ratio of exactly 1 is valid."""
        assert NormalizerConfig(reflow_ratio=1.0).reflow_ratio == 1.0


class TestPaths:
    """Tests for XDG path resolution."""

    def test_config_path(self, config_dir: Path) -> None:
        """The config file lives in the app's config directory."""
        expected = config_dir / "mailnorm" / "mailnorm.yaml"
        assert get_config_path() == expected

    def test_dotenv_path(self, config_dir: Path) -> None:
        """The .env file sits next to the config file."""
        assert get_dotenv_path() == config_dir / "mailnorm" / ".env"


class TestFromYaml:
    """Tests for NormalizerConfig.from_yaml."""

    def test_full_file(self, config_file) -> None:
        """All settings are read from the file."""
        path = config_file(
            "max_quote_depth: 8\n"
            "reflow:\n"
            "  min_length: 60\n"
            "  max_length: 78\n"
            "  ratio: 0.5\n"
            "section_header_max_length: 40\n"
            "rich_text_min_length: 10\n"
            "preview_length: 80\n"
        )
        config = NormalizerConfig.from_yaml(path)
        assert config == NormalizerConfig(
            max_quote_depth=8,
            reflow_min_length=60,
            reflow_max_length=78,
            reflow_ratio=0.5,
            section_header_max_length=40,
            rich_text_min_length=10,
            preview_length=80,
        )

    def test_partial_file(self, config_file) -> None:
        """Missing settings keep their defaults."""
        path = config_file("max_quote_depth: 5\n")
        config = NormalizerConfig.from_yaml(path)
        assert config.max_quote_depth == 5
        assert config.reflow_max_length == 82

    def test_empty_file(self, config_file) -> None:
        """An empty file yields the defaults."""
        path = config_file("")
        assert NormalizerConfig.from_yaml(path) == NormalizerConfig()

    def test_default_path_missing(self) -> None:
        """A missing default config file yields the defaults."""
        assert NormalizerConfig.from_yaml() == NormalizerConfig()

    def test_default_path_used(self, config_dir: Path) -> None:
        """The XDG config file is read when no path is given."""
        path = config_dir / "mailnorm" / "mailnorm.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("preview_length: 60\n")
        assert NormalizerConfig.from_yaml().preview_length == 60

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        """A missing explicit config file is an error."""
        with pytest.raises(ConfigError, match="not found"):
            NormalizerConfig.from_yaml(tmp_path / "nope.yaml")

    def test_env_tag(self, config_file, monkeypatch) -> None:
        """!env tags resolve from the environment."""
        monkeypatch.setenv("MAILNORM_TEST_DEPTH", "7")
        monkeypatch.setenv("MAILNORM_TEST_RATIO", "0.75")
        path = config_file(
            "max_quote_depth: !env MAILNORM_TEST_DEPTH\n"
            "reflow:\n"
            "  ratio: !env MAILNORM_TEST_RATIO\n"
        )
        config = NormalizerConfig.from_yaml(path)
        assert config.max_quote_depth == 7
        assert config.reflow_ratio == 0.75

    def test_env_tag_unset(self, config_file, monkeypatch) -> None:
        """An unset env var falls back to the default."""
        monkeypatch.delenv("MAILNORM_TEST_UNSET", raising=False)
        path = config_file("preview_length: !env MAILNORM_TEST_UNSET\n")
        assert NormalizerConfig.from_yaml(path).preview_length == 120

    def test_loads_dotenv_first(self, config_file) -> None:
        """The .env files are loaded before the config is parsed."""
        path = config_file("max_quote_depth: 3\n")
        with patch("mailnorm.config.load_dotenv_once") as mock_load:
            NormalizerConfig.from_yaml(path)
        mock_load.assert_called_once_with()

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("max_quote_depth: [\n", "Invalid YAML"),
            ("- a\n- b\n", "must be a YAML mapping"),
            ("colour: red\n", "Unknown config keys: colour"),
            ("reflow:\n  width: 70\n", "Unknown reflow keys: width"),
            ("reflow: 5\n", "'reflow' must be a mapping"),
            ("max_quote_depth: deep\n", "must be int"),
            ("max_quote_depth: true\n", "must be int"),
            ("reflow:\n  ratio: most\n", "must be float"),
            ("reflow:\n  min_length: 100\n", "exceeds"),
        ],
    )
    def test_invalid_files(
        self, config_file, content: str, message: str
    ) -> None:
        """Malformed or invalid files raise ConfigError."""
        with pytest.raises(ConfigError, match=message):
            NormalizerConfig.from_yaml(config_file(content))


class TestFromDict:
    """Tests for NormalizerConfig.from_dict."""

    def test_string_numbers_coerced(self) -> None:
        """Quoted numbers are coerced to the setting type."""
        config = NormalizerConfig.from_dict(
            {"max_quote_depth": "4", "reflow": {"ratio": "0.9"}}
        )
        assert config.max_quote_depth == 4
        assert config.reflow_ratio == 0.9

    def test_null_reflow(self) -> None:
        """A null reflow section keeps the reflow defaults."""
        config = NormalizerConfig.from_dict({"reflow": None})
        assert config.reflow_min_length == 65
