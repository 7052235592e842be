# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides sprite PNG factories, dict-backed asset resolvers, sample
definitions and temp cache directories. No network, no real asset tree.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from lpcsheet.cache.disk_store import DiskCacheStore
from lpcsheet.cache.memory_store import MemoryCacheStore
from lpcsheet.core.layout import FRAME_SIZE
from lpcsheet.core.models import CharacterDefinition
from lpcsheet.render.compositor import SpritesheetCompositor


def make_png(
    color: tuple[int, int, int, int],
    size: tuple[int, int] = (FRAME_SIZE, FRAME_SIZE),
) -> bytes:
    """Solid-color RGBA PNG."""
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


class DictResolver:
    """Asset resolver backed by a {(identifier, animation): bytes} dict.

    Records every lookup so tests can assert on call order.
    """

    def __init__(self, assets: dict[tuple[str, str], bytes] | None = None) -> None:
        self.assets = dict(assets or {})
        self.calls: list[tuple[str, str]] = []

    def __call__(self, identifier: str, animation: str) -> bytes | None:
        self.calls.append((identifier, animation))
        return self.assets.get((identifier, animation))


class CountingCompositor(SpritesheetCompositor):
    """Compositor that counts renders."""

    def __init__(self, resolver: Callable[[str, str], bytes | None]) -> None:
        super().__init__(resolver)
        self.render_count = 0

    def render(self, definition, cancel_event=None):  # type: ignore[override]
        self.render_count += 1
        return super().render(definition, cancel_event)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === FIXTURES: Isolation ===


@pytest.fixture(autouse=True)
def _reset_lpcsheet_logging():
    """Drop handlers installed by setup_logging() so they never outlive a test."""
    yield
    root = logging.getLogger("lpcsheet")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)


# === FIXTURES: Factories ===


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    return make_png


@pytest.fixture
def resolver_factory() -> type[DictResolver]:
    return DictResolver


@pytest.fixture
def compositor_factory() -> type[CountingCompositor]:
    return CountingCompositor


# === FIXTURES: Sample data ===


@pytest.fixture
def red_png() -> bytes:
    return make_png((255, 0, 0, 255))


@pytest.fixture
def blue_png() -> bytes:
    return make_png((0, 0, 255, 255))


@pytest.fixture
def male_payload() -> dict:
    """The reference male body + brown hair definition, wire form."""
    return {
        "bodyTypeName": "male",
        "layers": [
            {"fileName": "body/light", "zPos": 10},
            {"fileName": "hair/brown", "zPos": 120},
        ],
    }


@pytest.fixture
def male_definition(male_payload: dict) -> CharacterDefinition:
    return CharacterDefinition.model_validate(male_payload)


@pytest.fixture
def male_definition_swapped(male_payload: dict) -> CharacterDefinition:
    payload = dict(male_payload, layers=list(reversed(male_payload["layers"])))
    return CharacterDefinition.model_validate(payload)


@pytest.fixture
def resolver(red_png: bytes, blue_png: bytes) -> DictResolver:
    """Body has walk + idle, hair only walk."""
    return DictResolver(
        {
            ("body/light", "walk"): red_png,
            ("body/light", "idle"): red_png,
            ("hair/brown", "walk"): blue_png,
        }
    )


@pytest.fixture
def compositor(resolver: DictResolver) -> CountingCompositor:
    return CountingCompositor(resolver)


# === FIXTURES: Stores ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary (not yet created) cache directory."""
    return tmp_path / "cache"


@pytest.fixture
def disk_store(tmp_cache_dir: Path) -> DiskCacheStore:
    return DiskCacheStore(cache_root=tmp_cache_dir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(default_ttl_s=3600, check_period_s=0, clock=clock)
