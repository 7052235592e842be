# src/api/facade.py - v2
"""Public API facade: one service object per process.

Usage:
    from lpcsheet.api.facade import create_service

    async with create_service() as service:
        result = await service.resolve({"bodyTypeName": "male", "layers": [...]})
        result.data, result.tier, result.fingerprint

The memory tier is owned by the service: it is created with it, swept while
it runs, and emptied by ``close()``. Transport layers (HTTP routes, auth,
rate limiting) wrap this object and are not part of the package.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from lpcsheet.admin.manager import CacheAdministrator
from lpcsheet.admin.models import ClearReport, PregenerateReport, WarmReport
from lpcsheet.cache.base_cache_store import BaseSheetStore
from lpcsheet.cache.cache_factory import create_disk_store, create_memory_store
from lpcsheet.cache.memory_store import MemoryCacheStore
from lpcsheet.cache.models import BatchResolveReport, DiskCacheStats, ResolutionResult
from lpcsheet.config.settings import Settings
from lpcsheet.core.models import CharacterDefinition, parse_definition
from lpcsheet.pipeline.resolver import ResolutionOrchestrator
from lpcsheet.render.assets import AssetResolver, FileSystemAssetResolver
from lpcsheet.render.compositor import SpritesheetCompositor

logger = logging.getLogger(__name__)

DefinitionInput = CharacterDefinition | Mapping[str, Any]


class SpritesheetService:
    """Resolution and administrative operations over shared cache tiers."""

    def __init__(
        self,
        disk_store: BaseSheetStore,
        memory_store: MemoryCacheStore,
        compositor: SpritesheetCompositor,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._memory = memory_store
        self.resolver = ResolutionOrchestrator(
            disk_store=disk_store,
            memory_store=memory_store,
            compositor=compositor,
            memory_key_mode=settings.memory_key_mode,
            memory_ttl_s=settings.memory_cache_ttl_s,
            max_batch_size=settings.max_batch_size,
        )
        self.admin = CacheAdministrator(
            disk_store=disk_store,
            compositor=compositor,
            max_batch_size=settings.max_batch_size,
            concurrency=settings.pregenerate_concurrency,
        )

    # --- lifecycle ---

    async def start(self) -> None:
        self._memory.start()
        logger.info("Spritesheet service started")

    async def close(self) -> None:
        await self._memory.close()
        logger.info("Spritesheet service stopped")

    async def __aenter__(self) -> SpritesheetService:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # --- resolution ---

    async def resolve(self, definition: DefinitionInput) -> ResolutionResult:
        """Resolve one character to PNG bytes, tier label and fingerprint.

        Raises:
            InvalidDefinition: Malformed definition.
            StorageFailure: Disk tier read failed.
            GenerationFailure: Compositing failed.
        """
        return await self.resolver.resolve(parse_definition(definition))

    async def resolve_many(self, definitions: Sequence[DefinitionInput]) -> BatchResolveReport:
        return await self.resolver.resolve_many(definitions)

    # --- administration (caller has already authorized) ---

    async def pre_generate(self, definitions: Sequence[DefinitionInput]) -> PregenerateReport:
        return await self.admin.pre_generate(definitions)

    async def warm_cache(self) -> WarmReport:
        return await self.admin.warm()

    async def list_disk_cache(self) -> list[str]:
        return await self.admin.list_entries()

    async def disk_cache_stats(self) -> DiskCacheStats:
        return await self.admin.stats()

    async def clear_disk_cache(self) -> ClearReport:
        return await self.admin.clear()

    async def delete_disk_entry(self, fingerprint: str) -> bool:
        """Returns True if deleted, False if no such entry."""
        return await self.admin.delete(fingerprint)


def create_service(
    settings: Settings | None = None,
    asset_resolver: AssetResolver | None = None,
) -> SpritesheetService:
    """Build a service from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        asset_resolver: Layer asset lookup. Defaults to a filesystem
            resolver rooted at ``settings.spritesheet_root``.
    """
    settings = settings or Settings()
    resolver = asset_resolver or FileSystemAssetResolver(settings.spritesheet_root)
    return SpritesheetService(
        disk_store=create_disk_store(settings),
        memory_store=create_memory_store(settings),
        compositor=SpritesheetCompositor(resolver),
        settings=settings,
    )
