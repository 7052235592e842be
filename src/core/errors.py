# src/core/errors.py - v1
"""Error taxonomy for compositing and caching.

Missing assets are deliberately absent from this module: a layer that lacks
an animation is a normal outcome and is skipped, never raised.
"""

from __future__ import annotations


class SpritesheetError(Exception):
    """Base class for all lpcsheet errors."""


class InvalidDefinition(SpritesheetError, ValueError):
    """Malformed character definition (caller error, never retried)."""


class StorageFailure(SpritesheetError):
    """Disk cache I/O failed for a specific operation and entry."""

    def __init__(self, operation: str, key: str | None, cause: BaseException):
        self.operation = operation
        self.key = key
        self.cause = cause
        target = f" '{key}'" if key else ""
        super().__init__(f"Disk cache {operation}{target} failed: {cause}")


class GenerationFailure(SpritesheetError):
    """Compositing failed for a definition, identified by its body type tag."""

    def __init__(self, body_type_tag: str, cause: BaseException):
        self.body_type_tag = body_type_tag
        self.cause = cause
        super().__init__(
            f"Spritesheet generation failed for '{body_type_tag}': {cause}"
        )


class GenerationCancelled(SpritesheetError):
    """Compositing was aborted between animation rows."""


class BatchTooLarge(SpritesheetError, ValueError):
    """A batch exceeds the configured maximum size."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Maximum {limit} spritesheets per batch, got {size}")
