"""Typed configuration loading and access.

This module provides dataclasses for the optional `.cutrel.toml` file that
lives at the workspace root. Every key has a default, so a workspace without
the file releases with the stock changesets + pnpm + GitHub setup.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "GateDefaults",
    "load_config",
    "load_workspace_config",
]

CONFIG_FILENAME = ".cutrel.toml"

DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"
DEFAULT_CHANGELOG_FILENAME = "CHANGELOG.md"
DEFAULT_COMMIT_MESSAGE = "Version packages"
DEFAULT_REMOTE = "origin"
DEFAULT_DEV_TAG_MESSAGE = "dev-release"
DEFAULT_CHANGESET_COMMAND = ("pnpm", "changeset")
DEFAULT_WORKSPACE_LIST_COMMAND = ("pnpm", "ls", "--recursive", "--depth", "-1", "--json")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GateDefaults:
    """Answer assumed when the operator just presses enter at a gate."""

    commit: bool = True
    tag: bool = True
    push: bool = True
    publish: bool = False


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    token_env: str = DEFAULT_TOKEN_ENV
    changelog_filename: str = DEFAULT_CHANGELOG_FILENAME
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    default_remote: str = DEFAULT_REMOTE
    dev_tag_message: str = DEFAULT_DEV_TAG_MESSAGE
    changeset_command: tuple[str, ...] = DEFAULT_CHANGESET_COMMAND
    workspace_list_command: tuple[str, ...] = DEFAULT_WORKSPACE_LIST_COMMAND
    gates: GateDefaults = field(default_factory=GateDefaults)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        gates: StrDict = get_table(data, "gates") or {}

        def gate(key: str, default: bool) -> bool:
            value = get_bool(gates, key)
            return default if value is None else value

        return cls(
            token_env=get_str(data, "token_env") or DEFAULT_TOKEN_ENV,
            changelog_filename=get_str(data, "changelog_filename") or DEFAULT_CHANGELOG_FILENAME,
            commit_message=get_str(data, "commit_message") or DEFAULT_COMMIT_MESSAGE,
            default_remote=get_str(data, "default_remote") or DEFAULT_REMOTE,
            dev_tag_message=get_str(data, "dev_tag_message") or DEFAULT_DEV_TAG_MESSAGE,
            changeset_command=get_str_list(data, "changeset_command")
            or DEFAULT_CHANGESET_COMMAND,
            workspace_list_command=get_str_list(data, "workspace_list_command")
            or DEFAULT_WORKSPACE_LIST_COMMAND,
            gates=GateDefaults(
                commit=gate("commit", True),
                tag=gate("tag", True),
                push=gate("push", True),
                publish=gate("publish", False),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_workspace_config(workspace_root: Path) -> Result[Config, ConfigError]:
    """Load `.cutrel.toml` from the workspace root, defaults if it is absent.

    A present but broken file is an error rather than a silent fallback.
    """
    path = workspace_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
