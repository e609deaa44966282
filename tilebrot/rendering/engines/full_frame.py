from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import numpy as np

from tilebrot.fractals.base import Viewport
from tilebrot.fractals.mandelbrot import escape_grid, kernel_origin
from tilebrot.rendering.engines.base import BaseRenderEngine
from tilebrot.rendering.events import RenderStats

logger = logging.getLogger(__name__)


class FullFrameEngine(BaseRenderEngine):
    """
    Full-frame rendering strategy:
      - Evaluates every visible pixel, no cache and no uniformity shortcut.
      - Splits the frame into row bands mapped over the executor.
    Used as a reference for the tiled engine and by the benchmark.
    """

    band_height = 32

    def render(self, viewport: Viewport, out: Optional[np.ndarray] = None) -> np.ndarray:
        t0 = time.perf_counter()
        canvas = self._framebuffer(viewport, out)
        top_x, top_y = viewport.top_left
        W, H = viewport.width, viewport.height

        def band(y0: int) -> Tuple[int, np.ndarray]:
            h = min(self.band_height, H - y0)
            x, y, zoom, unit = kernel_origin(top_x, top_y + y0, viewport.zoom)
            return y0, escape_grid(x, y, W, h, zoom, unit, viewport.max_iter)

        for y0, counts in self.executor.map(band, range(0, H, self.band_height)):
            canvas[y0:y0 + counts.shape[0]] = self.coloring.colorize(counts)

        stats = RenderStats(evaluations=W * H,
                            elapsed_ms=(time.perf_counter() - t0) * 1000.0)
        self.evaluations += stats.evaluations
        self.last_stats = stats
        logger.debug("Full-frame %dx%d in %.2f ms", W, H, stats.elapsed_ms)
        return canvas
