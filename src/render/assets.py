# src/render/assets.py - v1
"""Asset resolution: (layer identifier, animation name) -> raster bytes.

The compositor only sees the ``AssetResolver`` callable. The filesystem
implementation follows the LPC spritesheets layout, where each layer family
keeps one file per animation in a sub-directory named after the animation:

    identifier  body/bodies/male/fur_grey.png  +  animation  walk
    ->  <root>/body/bodies/male/walk/fur_grey.png
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

AssetResolver = Callable[[str, str], bytes | None]


class FileSystemAssetResolver:
    """Resolve layer assets from a spritesheets directory tree.

    Returns None for anything that does not exist, is not a file, or would
    resolve outside the root.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    def asset_path(self, identifier: str, animation: str) -> Path | None:
        parts = PurePosixPath(identifier.replace("\\", "/"))
        if parts.is_absolute() or not parts.name:
            return None
        candidate = (self._root / parts.parent / animation / parts.name).resolve()
        if not candidate.is_relative_to(self._root):
            logger.warning("Rejected asset path outside root: %s", identifier)
            return None
        return candidate

    def __call__(self, identifier: str, animation: str) -> bytes | None:
        path = self.asset_path(identifier, animation)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            return None
