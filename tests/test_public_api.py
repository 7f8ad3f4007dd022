from __future__ import annotations

import lruhash


def test_version_is_a_string() -> None:
    assert isinstance(lruhash.__version__, str)
    assert lruhash.__version__


def test_core_types_are_exported() -> None:
    assert lruhash.DEFAULT_CAPACITY == 256
    cache = lruhash.LRUHash()
    assert cache.capacity == lruhash.DEFAULT_CAPACITY
    assert callable(lruhash.load_config)
    assert callable(lruhash.find_project_root)
    for name in ("Entry", "Index", "RecencyList", "LockedLRUHash", "CacheConfig", "LRUHashConfig"):
        assert name in lruhash.__all__
        assert getattr(lruhash, name) is not None


def test_exceptions_are_exported() -> None:
    from lruhash import (  # noqa: PLC0415
        LRUHashCapacityError,
        LRUHashConfigError,
        LRUHashError,
        LRUHashStructureError,
    )

    for exc in (
        LRUHashError,
        LRUHashConfigError,
        LRUHashCapacityError,
        LRUHashStructureError,
    ):
        assert issubclass(exc, Exception)
