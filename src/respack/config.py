"""
TOML-based config file loading for respack.

Searches for `.respack.toml`, `respack.toml`, or `pyproject.toml [tool.respack]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from respack.errors import ConfigError
from respack.spec_parser import parse_patterns

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class RespackConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".

    `base_dir` is the directory holding the config file; relative patterns and
    output paths in the file are resolved against it.
    """

    patterns: list[str] | None = None
    exclude: list[str] | None = None
    exclude_from: str | None = None
    sort: bool | None = None
    output: str | None = None
    depfile: str | None = None
    base_dir: Path | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".respack.toml", "respack.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(RespackConfig)} - {"base_dir"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.respack.toml` >
    `respack.toml` > `pyproject.toml` (only if it has `[tool.respack]`).
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml" or _has_respack_table(candidate):
                return candidate
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    return tomllib.loads(path.read_text(encoding="utf-8"))


def _has_respack_table(pyproject: Path) -> bool:
    """A `pyproject.toml` only counts if it parses and has `[tool.respack]`."""
    try:
        data = _read_toml(pyproject)
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False
    return isinstance(data.get("tool", {}).get("respack"), dict)


def load_config(config_path: Path) -> RespackConfig:
    """
    Load a `RespackConfig` from a TOML file. Supports both standalone
    `respack.toml` / `.respack.toml` and `pyproject.toml` (extracts
    `[tool.respack]`). Kebab-case keys are mapped to snake_case.
    """
    try:
        data = _read_toml(config_path)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"invalid TOML in {config_path}: {e}", path=config_path) from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("respack", {})

    config = _parse_config_data(data, config_path)
    config.base_dir = config_path.resolve().parent
    return config


def _parse_config_data(data: dict[str, Any], config_path: Path) -> RespackConfig:
    """Map TOML keys onto `RespackConfig`, checking value types."""
    mapped: dict[str, Any] = {}
    for key, value in data.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    if "patterns" in mapped:
        # Same shape rules as the build-time argument: a string or a list of strings.
        try:
            mapped["patterns"] = list(parse_patterns(mapped["patterns"]))
        except ConfigError as e:
            raise ConfigError(f"{config_path}: `patterns`: {e}", path=config_path) from e
    if "exclude" in mapped:
        exclude = mapped["exclude"]
        if not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude):
            raise ConfigError(
                f"{config_path}: `exclude` must be a list of strings", path=config_path
            )
    if "sort" in mapped and not isinstance(mapped["sort"], bool):
        raise ConfigError(f"{config_path}: `sort` must be true or false", path=config_path)
    for key in ("output", "depfile", "exclude_from"):
        if key in mapped and not isinstance(mapped[key], str):
            raise ConfigError(f"{config_path}: `{key}` must be a string", path=config_path)

    return RespackConfig(**cast(dict[str, Any], mapped))


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: RespackConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults. Paths from
    the config file are made relative to the config file's directory.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(RespackConfig):
        if cfg_field.name == "base_dir":
            continue
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if config.base_dir is not None and cfg_field.name in ("output", "depfile", "exclude_from"):
            cfg_value = str(config.base_dir / cfg_value)

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    # Patterns in a config file are relative to the file, not to the working directory.
    if "patterns" not in explicit_flags and config.patterns is not None:
        if config.base_dir is not None and hasattr(cli_opts, "unit_dir"):
            if "unit_dir" not in explicit_flags:
                setattr(cli_opts, "unit_dir", str(config.base_dir))

    return cli_opts
