# src/render/compositor.py - v2
"""Spritesheet compositing engine.

Stacks layer sprites per animation row onto a transparent canvas of the
fixed sheet size, lowest z_order first, using Pillow alpha compositing.
A layer that has no asset for an animation is skipped: most layers only
provide a subset of the animations, so a miss never aborts the sheet.
"""

from __future__ import annotations

import asyncio
import io
import logging
import threading
import time

from PIL import Image

from lpcsheet.core.errors import GenerationCancelled
from lpcsheet.core.layout import animation_rows, sheet_size
from lpcsheet.core.models import CharacterDefinition, LayerDescriptor, validate_definition
from lpcsheet.render.assets import AssetResolver

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


class SpritesheetCompositor:
    """Render CharacterDefinitions into PNG spritesheets.

    Stateless apart from the resolver, so one instance can serve concurrent
    renders from several threads.
    """

    def __init__(self, resolver: AssetResolver) -> None:
        self._resolver = resolver

    def render(
        self,
        definition: CharacterDefinition,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        """Composite a definition and return PNG bytes.

        Args:
            definition: Character to render.
            cancel_event: Checked before each animation row; once set,
                rendering stops with GenerationCancelled.

        Raises:
            InvalidDefinition: Definition fails the compositing preconditions.
            GenerationCancelled: ``cancel_event`` was set mid-render.
        """
        validate_definition(definition)
        start = time.perf_counter()

        sheet = Image.new("RGBA", sheet_size(), TRANSPARENT)
        # sorted() is stable: equal z_order keeps input order.
        ordered = sorted(definition.layers, key=lambda layer: layer.z_order)

        drawn = 0
        for animation, y in animation_rows():
            if cancel_event is not None and cancel_event.is_set():
                raise GenerationCancelled(
                    f"Rendering of '{definition.body_type_tag}' cancelled before '{animation}'"
                )
            for layer in ordered:
                sprite = self._load_sprite(layer, animation)
                if sprite is None:
                    continue
                _draw(sheet, sprite, y)
                drawn += 1

        data = encode_png(sheet)
        logger.debug(
            "Composited %s: %d layers, %d sprites drawn, %.1fms",
            definition.body_type_tag,
            len(ordered),
            drawn,
            (time.perf_counter() - start) * 1000,
        )
        return data

    async def render_async(self, definition: CharacterDefinition) -> bytes:
        """Render in a worker thread; cancelling the caller stops the render."""
        cancel_event = threading.Event()
        try:
            return await asyncio.to_thread(self.render, definition, cancel_event)
        except asyncio.CancelledError:
            cancel_event.set()
            raise

    def _load_sprite(self, layer: LayerDescriptor, animation: str) -> Image.Image | None:
        try:
            raw = self._resolver(layer.identifier, animation)
        except Exception:
            logger.debug(
                "Asset lookup failed for %s/%s, skipping",
                layer.identifier, animation, exc_info=True,
            )
            return None
        if raw is None:
            logger.debug("Skipping %s for %s (not found)", layer.identifier, animation)
            return None
        try:
            with Image.open(io.BytesIO(raw)) as img:
                return img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.debug(
                "Skipping %s for %s (undecodable: %s)", layer.identifier, animation, e
            )
            return None


def _draw(sheet: Image.Image, sprite: Image.Image, y: int) -> None:
    """Alpha-composite ``sprite`` at (0, y), clipped to the sheet bounds."""
    width = min(sprite.width, sheet.width)
    height = min(sprite.height, sheet.height - y)
    if width <= 0 or height <= 0:
        return
    if (width, height) != sprite.size:
        sprite = sprite.crop((0, 0, width, height))
    sheet.alpha_composite(sprite, dest=(0, y))


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
