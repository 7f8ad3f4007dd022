from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from lruhash.cache import DEFAULT_CAPACITY, LRUHash
from lruhash.config import CacheConfig, LRUHashConfig, find_project_root, load_config
from lruhash.errors import (
    LRUHashCapacityError,
    LRUHashConfigError,
    LRUHashError,
    LRUHashStructureError,
)
from lruhash.index import Index
from lruhash.locked import LockedLRUHash
from lruhash.recency import Entry, RecencyList


def _package_version() -> str:
    try:
        return version("lruhash")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "DEFAULT_CAPACITY",
    "CacheConfig",
    "Entry",
    "Index",
    "LRUHash",
    "LRUHashCapacityError",
    "LRUHashConfig",
    "LRUHashConfigError",
    "LRUHashError",
    "LRUHashStructureError",
    "LockedLRUHash",
    "RecencyList",
    "__version__",
    "find_project_root",
    "load_config",
]
