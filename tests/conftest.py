# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Shared pytest fixtures for normalizer tests."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from mailnorm.dotenv_loader import reset_dotenv_state


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path) -> Iterator[Path]:
    """Redirect the XDG config directory into ``tmp_path``.

    Keeps tests from reading a real ``~/.config/mailnorm`` and resets
    the dotenv loader so every test starts from a clean state.
    """
    config_root = tmp_path / "xdg-config"
    config_root.mkdir()
    reset_dotenv_state()
    with patch(
        "mailnorm.config.user_config_path",
        side_effect=lambda name: config_root / name,
    ):
        yield config_root
    reset_dotenv_state()


@pytest.fixture
def config_file(tmp_path: Path):
    """Write a YAML config file and return its path."""

    def _write(content: str) -> Path:
        path = tmp_path / "mailnorm.yaml"
        path.write_text(content)
        return path

    return _write
