"""Service layer namespace."""

__all__ = [
    "board",
    "interval_math",
    "lanes",
    "overlap",
    "timeline",
]
