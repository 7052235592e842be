# src/admin/manager.py - v2
"""Administrative cache operations built on the disk tier and the compositor.

Callers are expected to have passed the administrative authorization check
before reaching this module; nothing here re-checks it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from lpcsheet.admin.models import ClearReport, PregenerateItem, PregenerateReport, WarmReport
from lpcsheet.cache.base_cache_store import BaseSheetStore
from lpcsheet.cache.fingerprint import fingerprint_definition
from lpcsheet.cache.models import DiskCacheStats
from lpcsheet.core.errors import BatchTooLarge, GenerationFailure, SpritesheetError
from lpcsheet.core.models import CharacterDefinition, parse_definition, payload_tag
from lpcsheet.logging.context import request_context
from lpcsheet.render.compositor import SpritesheetCompositor

logger = logging.getLogger(__name__)


class CacheAdministrator:
    """Pre-generate, warm, inspect and purge the disk tier.

    Pre-generation bypasses the memory tier entirely: an entry counts as
    cached only if it is on disk.
    """

    def __init__(
        self,
        disk_store: BaseSheetStore,
        compositor: SpritesheetCompositor,
        max_batch_size: int = 200,
        concurrency: int = 4,
    ) -> None:
        self._disk = disk_store
        self._compositor = compositor
        self._max_batch_size = max_batch_size
        self._concurrency = max(1, concurrency)

    async def pre_generate(
        self, definitions: Sequence[CharacterDefinition | Mapping[str, Any]]
    ) -> PregenerateReport:
        """Render and persist every definition not already on disk.

        One item's failure is recorded in its result and never aborts the
        rest of the batch.

        Raises:
            BatchTooLarge: More items than ``max_batch_size``.
        """
        if len(definitions) > self._max_batch_size:
            raise BatchTooLarge(len(definitions), self._max_batch_size)

        semaphore = asyncio.Semaphore(self._concurrency)

        async def bounded(payload: CharacterDefinition | Mapping[str, Any]) -> PregenerateItem:
            async with semaphore:
                return await self._pregenerate_one(payload)

        items = await asyncio.gather(*(bounded(p) for p in definitions))

        report = PregenerateReport(total=len(items), results=list(items))
        for item in items:
            if item.status == "generated":
                report.generated += 1
            elif item.status == "already_cached":
                report.already_cached += 1
            else:
                report.failed += 1

        logger.info(
            "Pre-generation complete: total=%d, generated=%d, already_cached=%d, failed=%d",
            report.total, report.generated, report.already_cached, report.failed,
        )
        return report

    async def _pregenerate_one(
        self, payload: CharacterDefinition | Mapping[str, Any]
    ) -> PregenerateItem:
        tag = payload_tag(payload)
        try:
            definition = parse_definition(payload)
            fingerprint = fingerprint_definition(definition)
            with request_context("pre_generate", tag, fingerprint):
                if await self._disk.contains(fingerprint):
                    return PregenerateItem(
                        body_type_tag=tag, status="already_cached", fingerprint=fingerprint,
                    )
                data = await self._render(definition)
                await self._disk.put(fingerprint, data)
                logger.info("[Pre-cached] %s - %s", tag, fingerprint)
                return PregenerateItem(
                    body_type_tag=tag,
                    status="generated",
                    fingerprint=fingerprint,
                    size_bytes=len(data),
                )
        except SpritesheetError as e:
            logger.warning("Pre-generation failed for %s: %s", tag, e)
            return PregenerateItem(body_type_tag=tag, status="failed", error=str(e))
        except Exception as e:
            # Stores outside the error taxonomy still fail one item only.
            logger.error("Pre-generation failed for %s: %s", tag, e, exc_info=True)
            return PregenerateItem(body_type_tag=tag, status="failed", error=str(e))

    async def _render(self, definition: CharacterDefinition) -> bytes:
        try:
            return await self._compositor.render_async(definition)
        except SpritesheetError:
            raise
        except Exception as e:
            raise GenerationFailure(definition.body_type_tag, e) from e

    async def warm(self) -> WarmReport:
        """Report how many entries the disk tier holds.

        Observational only: disk is always consulted before memory, so
        nothing is loaded. An empty or missing cache directory is count 0.
        """
        count = len(await self._disk.list_entries())
        logger.info("Warmed up %d cached spritesheets", count)
        return WarmReport(count=count)

    async def stats(self) -> DiskCacheStats:
        return await self._disk.stats()

    async def list_entries(self) -> list[str]:
        return await self._disk.list_entries()

    async def clear(self) -> ClearReport:
        return ClearReport(deleted_count=await self._disk.clear())

    async def delete(self, fingerprint: str) -> bool:
        """Delete one entry. Returns False when it was not found."""
        found = await self._disk.delete(fingerprint)
        if found:
            logger.info("Deleted cached spritesheet: %s", fingerprint)
        else:
            logger.info("Cached spritesheet not found: %s", fingerprint)
        return found
