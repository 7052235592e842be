# src/admin/models.py - v1
"""Administrative report models: PregenerateItem, PregenerateReport, WarmReport, ClearReport."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PregenerateItem(BaseModel):
    """Outcome for one definition of a pre-generation batch."""

    body_type_tag: str
    status: Literal["already_cached", "generated", "failed"]
    fingerprint: str | None = None
    size_bytes: int | None = None
    error: str | None = None


class PregenerateReport(BaseModel):
    """Summary of a pre-generation batch, results in input order."""

    total: int
    generated: int = 0
    already_cached: int = 0
    failed: int = 0
    results: list[PregenerateItem] = Field(default_factory=list)


class WarmReport(BaseModel):
    count: int


class ClearReport(BaseModel):
    deleted_count: int
