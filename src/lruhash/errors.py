"""lruhash exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module in the package and by tests.
"""


class LRUHashError(Exception):
    """Base exception for all lruhash errors."""


class LRUHashConfigError(LRUHashError):
    """Raised for invalid user configuration."""


class LRUHashCapacityError(LRUHashConfigError, ValueError):
    """Raised when a capacity is negative or not an integer."""


class LRUHashStructureError(LRUHashError):
    """Raised by the invariant checker when the index and recency list disagree."""
