from __future__ import annotations

import logging
from typing import Dict, Optional

from tilebrot.rendering.tile import Tile, TileResult

logger = logging.getLogger(__name__)


class TileCache:
    """
    Tile -> TileResult memo owned by a single engine.
    Entries never expire; the owner clears everything whenever zoom or
    max_iter change, since keys built with the old values are unreachable.

    hits / misses count get() outcomes over the cache's lifetime and are
    not reset by clear(). Only the owning engine's render thread touches
    the cache.
    """

    def __init__(self) -> None:
        self._entries: Dict[Tile, TileResult] = {}
        self.hits = 0
        self.misses = 0

    def get(self, tile: Tile) -> Optional[TileResult]:
        result = self._entries.get(tile)
        if result is None:
            self.misses += 1
        else:
            self.hits += 1
        return result

    def put(self, tile: Tile, result: TileResult) -> None:
        self._entries[tile] = result

    def clear(self) -> None:
        if self._entries:
            logger.debug("Clearing tile cache (%d entries)", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tile: Tile) -> bool:
        return tile in self._entries
