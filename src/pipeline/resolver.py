# src/pipeline/resolver.py - v1
"""Resolution protocol for a single character definition.

Tiers are consulted in a fixed order:
  1. Disk tier: curated, pre-generated entries, zero recompute cost.
  2. Memory tier: recent generations of this process, TTL-bounded.
  3. Compositor: full render; the result goes to the memory tier only.

Organic traffic never writes to disk. Persisting is an administrative
decision (see admin.manager.CacheAdministrator.pre_generate).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from lpcsheet.cache.base_cache_store import BaseSheetStore
from lpcsheet.cache.fingerprint import fingerprint_definition, request_key
from lpcsheet.cache.memory_store import MemoryCacheStore
from lpcsheet.cache.models import (
    BatchResolveItem,
    BatchResolveReport,
    CacheTier,
    ResolutionResult,
)
from lpcsheet.core.errors import (
    BatchTooLarge,
    GenerationCancelled,
    GenerationFailure,
    SpritesheetError,
)
from lpcsheet.core.models import (
    CharacterDefinition,
    parse_definition,
    payload_tag,
    validate_definition,
)
from lpcsheet.logging.context import request_context
from lpcsheet.render.compositor import SpritesheetCompositor

logger = logging.getLogger(__name__)

MemoryKeyMode = Literal["fingerprint", "request"]


class ResolutionOrchestrator:
    """Serve spritesheets from disk, memory, or a fresh render.

    Args:
        disk_store: Persistent tier, checked first.
        memory_store: Transient tier shared by all requests of the process.
        compositor: Engine used on a full miss.
        memory_key_mode: "fingerprint" keys the memory tier by the
            order-insensitive fingerprint; "request" keys it by the
            order-sensitive serialization of the definition as received.
        memory_ttl_s: TTL for generated entries (store default if None).
        max_batch_size: Upper bound for ``resolve_many``.
    """

    def __init__(
        self,
        disk_store: BaseSheetStore,
        memory_store: MemoryCacheStore,
        compositor: SpritesheetCompositor,
        memory_key_mode: MemoryKeyMode = "fingerprint",
        memory_ttl_s: float | None = None,
        max_batch_size: int = 200,
    ) -> None:
        if memory_key_mode not in ("fingerprint", "request"):
            raise ValueError(f"Unsupported memory key mode: {memory_key_mode!r}")
        self._disk = disk_store
        self._memory = memory_store
        self._compositor = compositor
        self._memory_key_mode = memory_key_mode
        self._memory_ttl_s = memory_ttl_s
        self._max_batch_size = max_batch_size

    def memory_key(self, definition: CharacterDefinition, fingerprint: str) -> str:
        if self._memory_key_mode == "request":
            return request_key(definition)
        return fingerprint

    async def resolve(self, definition: CharacterDefinition) -> ResolutionResult:
        """Resolve one definition through disk, memory, then generation.

        Raises:
            InvalidDefinition: Definition fails the compositing preconditions.
            StorageFailure: The disk tier could not be read.
            GenerationFailure: Compositing failed; nothing was cached.
        """
        validate_definition(definition)
        start = time.perf_counter()
        fingerprint = fingerprint_definition(definition)
        tag = definition.body_type_tag

        with request_context("resolve", tag, fingerprint):
            data = await self._disk.get(fingerprint)
            if data is not None:
                logger.info(
                    "[Disk Cache Hit] %s - %d layers - %s",
                    tag, len(definition.layers), fingerprint,
                )
                return ResolutionResult(
                    data=data, tier=CacheTier.DISK_HIT, fingerprint=fingerprint,
                    render_time_ms=_elapsed_ms(start),
                )

            key = self.memory_key(definition, fingerprint)
            data = self._memory.get(key)
            if data is not None:
                logger.info("[Memory Cache Hit] %s - %d layers", tag, len(definition.layers))
                return ResolutionResult(
                    data=data, tier=CacheTier.MEMORY_HIT, fingerprint=fingerprint,
                    render_time_ms=_elapsed_ms(start),
                )

            try:
                data = await self._compositor.render_async(definition)
            except GenerationCancelled:
                raise
            except Exception as e:
                logger.error("Generation failed for %s: %s", tag, e)
                raise GenerationFailure(tag, e) from e

            self._memory.put(key, data, self._memory_ttl_s)
            elapsed = _elapsed_ms(start)
            logger.info(
                "[Generated] %s - %d layers - %.0fms - %d bytes",
                tag, len(definition.layers), elapsed, len(data),
            )
            return ResolutionResult(
                data=data, tier=CacheTier.GENERATED, fingerprint=fingerprint,
                render_time_ms=elapsed,
            )

    async def resolve_many(
        self, definitions: Sequence[CharacterDefinition | Mapping[str, Any]]
    ) -> BatchResolveReport:
        """Resolve several definitions, isolating per-item failures.

        Raises:
            BatchTooLarge: More items than ``max_batch_size``.
        """
        if len(definitions) > self._max_batch_size:
            raise BatchTooLarge(len(definitions), self._max_batch_size)

        start = time.perf_counter()
        report = BatchResolveReport(total=len(definitions))

        for payload in definitions:
            item_start = time.perf_counter()
            tag = payload_tag(payload)
            try:
                result = await self.resolve(parse_definition(payload))
            except SpritesheetError as e:
                report.failed += 1
                report.results.append(
                    BatchResolveItem(
                        body_type_tag=tag, success=False, cache_status="ERROR",
                        error=str(e),
                    )
                )
                logger.error("[Batch ERROR] %s - %s", tag, e)
                continue

            if result.tier is CacheTier.DISK_HIT:
                report.disk_hits += 1
            elif result.tier is CacheTier.MEMORY_HIT:
                report.memory_hits += 1
            else:
                report.generated += 1

            report.results.append(
                BatchResolveItem(
                    body_type_tag=tag,
                    success=True,
                    cache_status=result.tier.value,
                    fingerprint=result.fingerprint,
                    data=result.data,
                    size_bytes=result.size_bytes,
                    render_time_ms=_elapsed_ms(item_start),
                )
            )

        report.total_time_ms = _elapsed_ms(start)
        logger.info(
            "[Batch Complete] Total: %d, Disk: %d, Memory: %d, Generated: %d, Failed: %d - %.0fms",
            report.total, report.disk_hits, report.memory_hits,
            report.generated, report.failed, report.total_time_ms,
        )
        return report


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
