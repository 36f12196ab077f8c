from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field

from contract.artifacts import BUILD_EVENTS_JSONL

CONFIG_FILENAME = "groupstream.toml"


class GroupStreamConfig(BaseModel):
    """Configuration for encoding artifact groups to an event stream."""

    model_config = ConfigDict(extra="forbid")

    output: str = Field(
        default=BUILD_EVENTS_JSONL,
        description="Event stream file written by `encode`",
    )
    exec_root: str = Field(
        default=".",
        description="Directory that artifact exec paths are relative to",
    )
    uri_prefix: str | None = Field(
        default=None,
        description=(
            "Publish files under this URI prefix; files outside exec_root are "
            "then omitted (default: file:// URIs for everything)"
        ),
    )
    check_exists: bool = Field(
        default=False,
        description="Fail when a referenced output is missing on disk",
    )
    expand_trees: bool = Field(
        default=True,
        description="List tree artifacts file by file",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_exec_root(root: Path, exec_root: str) -> Path:
    """Resolve a config-provided exec_root relative to ``root``."""
    if not exec_root:
        msg = "exec_root must be a non-empty path"
        raise ConfigError(msg)
    path = Path(exec_root).expanduser()
    if not path.is_absolute():
        path = root / path
    try:
        return path.resolve()
    except OSError as exc:
        msg = f"Failed to resolve exec_root '{exec_root}': {exc}"
        raise ConfigError(msg) from exc


def load_config(root: Path) -> GroupStreamConfig:
    """Load configuration from groupstream.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return GroupStreamConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return GroupStreamConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
