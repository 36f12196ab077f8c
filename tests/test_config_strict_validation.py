from __future__ import annotations

from pathlib import Path

import pytest

from config import (
    CONFIG_FILENAME,
    ConfigError,
    GroupStreamConfig,
    load_config,
    resolve_exec_root,
)
from contract.artifacts import BUILD_EVENTS_JSONL


def _write_config(root: Path, toml_content: str) -> None:
    (root / CONFIG_FILENAME).write_text(toml_content, encoding="utf-8")


def test_defaults_without_config_file(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == GroupStreamConfig()
    assert config.output == BUILD_EVENTS_JSONL
    assert config.uri_prefix is None
    assert config.expand_trees is True


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
output = "out/events.jsonl"
exec_root = "execroot"
uri_prefix = "bytestream://cas"
check_exists = true
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.output == "out/events.jsonl"
    assert config.exec_root == "execroot"
    assert config.uri_prefix == "bytestream://cas"
    assert config.check_exists is True


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)


def test_wrong_value_type_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'check_exists = "sometimes"')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "output = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_resolve_exec_root_relative_to_root(tmp_path: Path) -> None:
    assert resolve_exec_root(tmp_path, "execroot") == (tmp_path / "execroot").resolve()


def test_resolve_exec_root_absolute_kept(tmp_path: Path) -> None:
    other = tmp_path / "elsewhere"

    assert resolve_exec_root(tmp_path / "root", str(other)) == other.resolve()


def test_resolve_exec_root_empty_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="non-empty"):
        resolve_exec_root(tmp_path, "")
