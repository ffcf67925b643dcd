# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tunable thresholds for the email content normalizer.

Every threshold has a default equal to the value the heuristics were
tuned with, so most callers never need a config file. Deployments that
want to adjust them can provide a YAML file.  The default location
follows the XDG Base Directory Specification:

    ``$XDG_CONFIG_HOME/mailnorm/mailnorm.yaml``
    (typically ``~/.config/mailnorm/mailnorm.yaml``)

Example::

    max_quote_depth: 10
    reflow:
      min_length: 65
      max_length: 82
      ratio: 0.6
    section_header_max_length: !env MAILNORM_HEADER_MAX

``!env`` tags resolve values from environment variables.  ``.env`` files
are loaded once before the first config load.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_path

from mailnorm.dotenv_loader import load_dotenv_once


logger = logging.getLogger(__name__)

#: Application name for XDG path resolution.
_APP_NAME = "mailnorm"

_TOP_LEVEL_KEYS = frozenset(
    {
        "max_quote_depth",
        "reflow",
        "section_header_max_length",
        "rich_text_min_length",
        "preview_length",
    }
)
_REFLOW_KEYS = frozenset({"min_length", "max_length", "ratio"})


def get_config_path() -> Path:
    """Return the default config file path.

    Returns:
        Path to ``mailnorm.yaml`` inside the XDG config directory.
    """
    return user_config_path(_APP_NAME) / "mailnorm.yaml"


def get_dotenv_path() -> Path:
    """Return the default ``.env`` file path inside the XDG config directory.

    Returns:
        Path to the ``.env`` file.
    """
    return user_config_path(_APP_NAME) / ".env"


class ConfigError(Exception):
    """Base exception for configuration errors."""


@dataclass(frozen=True)
class NormalizerConfig:
    """Thresholds used by the parser, reflow normalizer and classifier.

    Attributes:
        max_quote_depth: Deepest ``>`` nesting parsed recursively. Deeper
            regions are kept as a single preformatted block.
        reflow_min_length: Shortest line treated as hard-wrapped.
        reflow_max_length: Longest line treated as hard-wrapped.
        reflow_ratio: Fraction of wrap-length lines above which a
            paragraph is considered hard-wrapped.
        section_header_max_length: Longest line that may become a
            section header.
        rich_text_min_length: Plain text longer than this (trimmed) is
            parsed into blocks even when HTML is present.
        preview_length: Length of collapsed quoted-message previews.
    """

    max_quote_depth: int = 20
    reflow_min_length: int = 65
    reflow_max_length: int = 82
    reflow_ratio: float = 0.6
    section_header_max_length: int = 80
    rich_text_min_length: int = 20
    preview_length: int = 120

    def __post_init__(self) -> None:
        if self.max_quote_depth < 1:
            raise ConfigError(
                "max_quote_depth must be at least 1, "
                f"got {self.max_quote_depth}"
            )
        if self.reflow_min_length > self.reflow_max_length:
            raise ConfigError(
                f"reflow min_length ({self.reflow_min_length}) exceeds "
                f"max_length ({self.reflow_max_length})"
            )
        if not 0 < self.reflow_ratio <= 1:
            raise ConfigError(
                f"reflow ratio must be in (0, 1], got {self.reflow_ratio}"
            )
        for name in (
            "section_header_max_length",
            "rich_text_min_length",
            "preview_length",
        ):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")

    @classmethod
    def from_yaml(cls, config_path: Path | None = None) -> "NormalizerConfig":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to YAML config file.  Defaults to
                ``~/.config/mailnorm/mailnorm.yaml`` (XDG).  A missing
                default file yields the built-in defaults.

        Returns:
            NormalizerConfig instance.

        Raises:
            ConfigError: If an explicit file is missing, the file is not
                a mapping, or a value is invalid.
        """
        load_dotenv_once()

        if config_path is None:
            config_path = get_config_path()
            if not config_path.exists():
                logger.debug("No config at %s, using defaults", config_path)
                return cls()
        elif not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path) as f:
                raw = yaml.load(f, Loader=_make_loader())
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(
                f"Config file must be a YAML mapping: {config_path}"
            )

        config = cls.from_dict(raw)
        logger.info("Normalizer config loaded from %s", config_path)
        return config

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "NormalizerConfig":
        """Build config from a parsed (but unresolved) YAML mapping."""
        unknown = set(raw) - _TOP_LEVEL_KEYS
        if unknown:
            raise ConfigError(
                f"Unknown config keys: {', '.join(sorted(unknown))}"
            )

        reflow = raw.get("reflow") or {}
        if not isinstance(reflow, dict):
            raise ConfigError("'reflow' must be a mapping")
        unknown = set(reflow) - _REFLOW_KEYS
        if unknown:
            raise ConfigError(
                f"Unknown reflow keys: {', '.join(sorted(unknown))}"
            )

        defaults = cls()
        return cls(
            max_quote_depth=_resolve(
                raw.get("max_quote_depth"),
                int,
                default=defaults.max_quote_depth,
                name="max_quote_depth",
            ),
            reflow_min_length=_resolve(
                reflow.get("min_length"),
                int,
                default=defaults.reflow_min_length,
                name="reflow.min_length",
            ),
            reflow_max_length=_resolve(
                reflow.get("max_length"),
                int,
                default=defaults.reflow_max_length,
                name="reflow.max_length",
            ),
            reflow_ratio=_resolve(
                reflow.get("ratio"),
                float,
                default=defaults.reflow_ratio,
                name="reflow.ratio",
            ),
            section_header_max_length=_resolve(
                raw.get("section_header_max_length"),
                int,
                default=defaults.section_header_max_length,
                name="section_header_max_length",
            ),
            rich_text_min_length=_resolve(
                raw.get("rich_text_min_length"),
                int,
                default=defaults.rich_text_min_length,
                name="rich_text_min_length",
            ),
            preview_length=_resolve(
                raw.get("preview_length"),
                int,
                default=defaults.preview_length,
                name="preview_length",
            ),
        )


#: Shared default instance used when callers pass no config.
DEFAULT_CONFIG = NormalizerConfig()


# ---------------------------------------------------------------------------
# YAML tag placeholders
# ---------------------------------------------------------------------------


class _EnvVar:
    """Placeholder for an unresolved ``!env VAR_NAME`` tag."""

    def __init__(self, var_name: str) -> None:
        self.var_name = var_name


def _env_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _EnvVar:
    """Handle ``!env VAR_NAME`` in YAML."""
    value = loader.construct_scalar(node)  # type: ignore[arg-type]
    return _EnvVar(str(value))


def _make_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that understands ``!env``."""

    class EnvLoader(yaml.SafeLoader):
        pass

    EnvLoader.add_constructor("!env", _env_constructor)
    return EnvLoader


def _resolve(value: object, coerce: type, *, default: Any, name: str) -> Any:
    """Resolve a YAML value, handling ``!env`` tags and type coercion.

    Args:
        value: Raw value from YAML (may be ``_EnvVar``, None, or a
            literal already parsed by PyYAML).
        coerce: Target type (``int`` or ``float``).
        default: Value used when the setting or env var is absent.
        name: Dotted setting name for error messages.

    Returns:
        The resolved, coerced value.
    """
    if isinstance(value, _EnvVar):
        value = os.environ.get(value.var_name)
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ConfigError(f"Config '{name}' must be {coerce.__name__}")
    try:
        return coerce(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            f"Config '{name}' must be {coerce.__name__}, got {value!r}"
        ) from e
