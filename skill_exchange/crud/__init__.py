"""CRUD package exports with lazy module loading.

Keeps router imports light when a test only needs one table's helpers.
"""

from importlib import import_module

__all__ = ["profile", "skill", "request", "session", "credit", "conversation", "review"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
