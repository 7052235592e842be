# src/cache/models.py - v2
"""Cache domain models: CacheTier, ResolutionResult, DiskCacheStats, BatchResolveReport."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CacheTier(str, Enum):
    """Which tier served a resolution."""

    DISK_HIT = "DISK_HIT"
    MEMORY_HIT = "MEMORY_HIT"
    GENERATED = "GENERATED"


class ResolutionResult(BaseModel):
    """Spritesheet bytes plus provenance."""

    data: bytes = Field(repr=False)
    tier: CacheTier
    fingerprint: str
    render_time_ms: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size_bytes(self) -> int:
        return len(self.data)


class DiskCacheStats(BaseModel):
    """Aggregate over valid disk cache artifacts."""

    count: int = 0
    total_bytes: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size_mb(self) -> float:
        return round(self.total_bytes / 1024 / 1024, 2)


class BatchResolveItem(BaseModel):
    """Outcome of resolving one definition inside a batch."""

    body_type_tag: str
    success: bool
    cache_status: Literal["DISK_HIT", "MEMORY_HIT", "GENERATED", "ERROR"]
    fingerprint: str | None = None
    data: bytes | None = Field(default=None, repr=False)
    size_bytes: int = 0
    render_time_ms: float = 0.0
    error: str | None = None


class BatchResolveReport(BaseModel):
    """Per-item results and tier counts for a batch resolution."""

    total: int
    disk_hits: int = 0
    memory_hits: int = 0
    generated: int = 0
    failed: int = 0
    total_time_ms: float = 0.0
    results: list[BatchResolveItem] = Field(default_factory=list)
