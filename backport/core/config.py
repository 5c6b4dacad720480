"""Project defaults loaded from ``.backport.toml``.

The file is optional. Keys may live at the top level or under a
``[backport]`` table:

    base = "main"
    upstream = "upstream"
    remote = "origin"
    title_template = "{title} ({release} patch)"
    preview_body = "This is a preview"
    recovery_dir = "."

Command-line flags take precedence over values read here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_BASE_BRANCH",
    "DEFAULT_PREVIEW_BODY",
    "DEFAULT_PUSH_REMOTE",
    "DEFAULT_TITLE_TEMPLATE",
    "DEFAULT_UPSTREAM_REMOTE",
    "ConfigError",
    "ProjectConfig",
    "load_project_config",
    "load_project_config_or_default",
]

CONFIG_FILENAME = ".backport.toml"

DEFAULT_BASE_BRANCH = "main"
DEFAULT_UPSTREAM_REMOTE = "upstream"
DEFAULT_PUSH_REMOTE = "origin"
DEFAULT_TITLE_TEMPLATE = "{title} ({release} patch)"
DEFAULT_PREVIEW_BODY = "This is a preview"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the project config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Per-repository defaults for a backport run."""

    base: str = DEFAULT_BASE_BRANCH
    upstream: str = DEFAULT_UPSTREAM_REMOTE
    remote: str = DEFAULT_PUSH_REMOTE
    title_template: str = DEFAULT_TITLE_TEMPLATE
    preview_body: str = DEFAULT_PREVIEW_BODY
    recovery_dir: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ProjectConfig:
        """Create a ProjectConfig from parsed TOML."""
        table: StrDict = get_table(data, "backport") or dict(data)

        template = get_str(table, "title_template") or DEFAULT_TITLE_TEMPLATE
        # Fail early on unknown placeholders instead of once per release.
        template.format(title="", release="")

        return cls(
            base=get_str(table, "base") or DEFAULT_BASE_BRANCH,
            upstream=get_str(table, "upstream") or DEFAULT_UPSTREAM_REMOTE,
            remote=get_str(table, "remote") or DEFAULT_PUSH_REMOTE,
            title_template=template,
            preview_body=get_str(table, "preview_body") or DEFAULT_PREVIEW_BODY,
            recovery_dir=get_str(table, "recovery_dir"),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
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


def load_project_config(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load and parse ``.backport.toml``.

    Args:
        path: Path to the config file

    Returns:
        Ok(ProjectConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ProjectConfig.from_dict(result.value))
    except (AttributeError, KeyError, IndexError, ValueError) as e:
        return Err(ConfigError(f"Invalid title_template: {e}", path=path))


def load_project_config_or_default(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Like load_project_config, but a missing file yields the defaults."""
    if not path.exists():
        return Ok(ProjectConfig())
    return load_project_config(path)
