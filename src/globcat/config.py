"""
TOML-based config file loading for globcat.

Searches for `.globcat.toml`, `globcat.toml`, or `pyproject.toml [tool.globcat]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from globcat.logging import get_logger

log = get_logger("config")


@dataclass
class GlobcatConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    exclude: list[str] | None = None
    max_file_size: int | None = None
    respect_gitignore: bool | None = None
    default_excludes: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".globcat.toml", "globcat.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(GlobcatConfig)}

_SIZE_UNITS = {
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
}


def parse_size(value: str) -> int:
    """
    Parse a size like `1024`, `64k`, `64KB`, `1m` or `2gb` into bytes.
    Suffixes are case-insensitive powers of 1024.
    """
    text = value.strip().lower()
    if not text:
        raise ValueError("empty size value")

    multiplier = 1
    number = text
    for suffix, factor in _SIZE_UNITS.items():
        if text.endswith(suffix):
            multiplier = factor
            number = text[: -len(suffix)]
            break
    else:
        if not text[-1].isdigit():
            raise ValueError(f"invalid size suffix: {value!r}")

    try:
        n = int(number)
    except ValueError:
        raise ValueError(f"invalid numeric value: {value!r}") from None
    if n < 0:
        raise ValueError("size cannot be negative")
    return n * multiplier


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.globcat.toml` >
    `globcat.toml` > `pyproject.toml` (only if it has `[tool.globcat]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_globcat_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_globcat_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.globcat] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "globcat" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> GlobcatConfig:
    """
    Load a `GlobcatConfig` from a TOML file. Supports both standalone
    `globcat.toml` / `.globcat.toml` and `pyproject.toml` (extracts
    `[tool.globcat]`). Malformed TOML yields an empty config.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        log.warning("ignoring malformed config file %s: %s", config_path, e)
        return GlobcatConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("globcat", {})

    return _parse_config_data(data, config_path)


def _parse_config_data(data: dict[str, Any], source: Path) -> GlobcatConfig:
    """Parse a flat or sectioned TOML dict into GlobcatConfig."""
    # Flatten sections: [file-discovery] merges into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            log.warning("unrecognized config key %r in %s", key, source)
            continue
        if snake_key == "max_file_size" and isinstance(value, str):
            try:
                value = parse_size(value)
            except ValueError as e:
                log.warning("ignoring max-file-size in %s: %s", source, e)
                continue
        if snake_key == "exclude" and isinstance(value, str):
            value = [value]
        mapped[snake_key] = value

    return GlobcatConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: GlobcatConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults. Config
    `exclude` patterns are appended after the CLI ones rather than replacing
    them.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(GlobcatConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name == "exclude":
            current = list(getattr(cli_opts, "exclude", []))
            setattr(cli_opts, "exclude", current + [p for p in cfg_value if p not in current])
            continue

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
