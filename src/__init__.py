# src/__init__.py - v1
"""lpcsheet: layered character spritesheet compositor with two-tier caching."""

from lpcsheet.version import __version__

__all__ = ["__version__"]
