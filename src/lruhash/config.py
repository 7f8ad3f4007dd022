"""Configuration loading for lruhash.

This module is intentionally small and deterministic: it only reads
`lruhash.toml` and validates the values it finds there.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lruhash.cache import DEFAULT_CAPACITY
from lruhash.errors import LRUHashCapacityError, LRUHashConfigError

CONFIG_FILENAME = "lruhash.toml"


@dataclass(frozen=True)
class CacheConfig:
    capacity: int


@dataclass(frozen=True)
class LRUHashConfig:
    version: int
    cache: CacheConfig


def find_project_root(start: Path) -> Path:
    """Return the nearest directory at or above `start` that holds `lruhash.toml`."""

    try:
        base = start.parent if start.is_file() else start
    except OSError:
        base = start.parent
    base = base.resolve()

    for candidate in (base, *base.parents):
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate

    raise LRUHashConfigError(f"No {CONFIG_FILENAME} found in {base} or any parent directory.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LRUHashConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise LRUHashConfigError(f"Expected {name} to be an integer.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> LRUHashConfig:
    """Load and validate `lruhash.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LRUHashConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise LRUHashConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LRUHashConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LRUHashConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise LRUHashConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise LRUHashConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")

    if "capacity" in cache_tbl:
        capacity = _as_int(cache_tbl["capacity"], name="cache.capacity")
    else:
        capacity = DEFAULT_CAPACITY

    if capacity < 0:
        raise LRUHashCapacityError("Invalid config: cache.capacity must be >= 0.")

    return LRUHashConfig(version=version_i, cache=CacheConfig(capacity=capacity))
