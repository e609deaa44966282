from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple

import numpy as np

from tilebrot.coloring.base import ColoringStrategy
from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.rendering.cache import TileCache
from tilebrot.rendering.engines.base import BaseRenderEngine
from tilebrot.rendering.events import RenderStats
from tilebrot.rendering.executor import RenderExecutor
from tilebrot.rendering.tile import Tile, TileResult

logger = logging.getLogger(__name__)


class TileEngine(BaseRenderEngine):
    """
    Incremental tiled rendering:
      - Covers the viewport with grid-aligned tiles (plus one leading tile).
      - Looks every tile up in the cache, then resolves the misses in
        parallel with Tile.resolve.
      - Writes the cache and scatters the tiles into the framebuffer in a
        sequential join, clipping to the visible rectangle.

    The cache belongs to this engine alone and is cleared whenever the
    zoom or the iteration bound differs from the previous render. Panning
    keeps it, tile coordinates being absolute.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        *,
        coloring: Optional[ColoringStrategy] = None,
        executor: Optional[RenderExecutor] = None,
    ) -> None:
        super().__init__(settings, coloring=coloring, executor=executor)
        self.cache = TileCache()
        self._cache_key: Optional[Tuple[int, int]] = None

    def invalidate(self) -> None:
        self.cache.clear()
        self._cache_key = None

    def tiles_for(self, viewport: Viewport) -> List[Tile]:
        top_x, top_y = viewport.top_left
        return Tile.covering(top_x, top_y, viewport.width, viewport.height,
                             self.settings.tile_size, viewport.zoom, viewport.max_iter)

    # ---- Public API -----------------------------------------------------

    def render(self, viewport: Viewport, out: Optional[np.ndarray] = None) -> np.ndarray:
        t0 = time.perf_counter()
        canvas = self._framebuffer(viewport, out)

        key = (viewport.zoom, viewport.max_iter)
        if key != self._cache_key:
            self.cache.clear()
            self._cache_key = key

        tiles = self.tiles_for(viewport)
        lookups = [(tile, self.cache.get(tile)) for tile in tiles]
        missing = [tile for tile, cached in lookups if cached is None]
        computed = dict(zip(missing, self.executor.map(self._compute, missing)))

        stats = RenderStats(tiles=len(tiles))
        top_x, top_y = viewport.top_left
        for tile, result in lookups:
            if result is not None:
                stats.cache_hits += 1
            else:
                result = computed[tile]
                self.cache.put(tile, result)
                stats.computed += 1
                stats.uniform += int(result.is_uniform)
                stats.evaluations += result.evaluations
            self._scatter(canvas, result, top_x, top_y)

        stats.elapsed_ms = (time.perf_counter() - t0) * 1000.0
        self.evaluations += stats.evaluations
        self.last_stats = stats
        logger.debug("Rendered %dx%d: %d tiles, %d hits, %d computed (%d uniform), "
                     "%d evaluations in %.2f ms",
                     viewport.width, viewport.height, stats.tiles, stats.cache_hits,
                     stats.computed, stats.uniform, stats.evaluations, stats.elapsed_ms)
        return canvas

    # ---- Helpers --------------------------------------------------------

    def _compute(self, tile: Tile) -> TileResult:
        # Runs on a worker thread; touches nothing shared.
        return tile.resolve(self.coloring,
                            border_stride=self.settings.border_stride,
                            uniform_check=self.settings.uniform_check)

    @staticmethod
    def _scatter(canvas: np.ndarray, result: TileResult, top_x: int, top_y: int) -> None:
        H, W = canvas.shape[:2]
        x0 = result.grid_x - top_x
        y0 = result.grid_y - top_y
        fx0, fx1 = max(0, x0), min(W, x0 + result.size)
        fy0, fy1 = max(0, y0), min(H, y0 + result.size)
        if fx0 >= fx1 or fy0 >= fy1:
            return
        rgb = result.to_rgb()
        canvas[fy0:fy1, fx0:fx1] = rgb[fy0 - y0:fy1 - y0, fx0 - x0:fx1 - x0]
