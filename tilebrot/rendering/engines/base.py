from __future__ import annotations

from typing import Optional

import numpy as np

from tilebrot.coloring.base import ColoringStrategy
from tilebrot.coloring.hue_cycle import HueCycleColoring
from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.rendering.events import RenderStats
from tilebrot.rendering.executor import RenderExecutor


class BaseRenderEngine:
    """
    Base class for render engines (tiled, full-frame).

    Responsibilities:
      - Decide *how* to decompose a viewport into work (strategy),
      - Delegate *execution* to a RenderExecutor,
      - Fill an (H, W, 3) uint8 framebuffer.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        *,
        coloring: Optional[ColoringStrategy] = None,
        executor: Optional[RenderExecutor] = None,
    ) -> None:
        self.settings = settings or RenderSettings()
        self.coloring: ColoringStrategy = coloring or HueCycleColoring()
        self.executor = executor or RenderExecutor(self.settings.max_workers)
        self.last_stats = RenderStats()
        # Cumulative across renders
        self.evaluations = 0

    # ---- Lifecycle ------------------------------------------------------

    def invalidate(self) -> None:
        """Drop memoized state. Stateless engines have nothing to drop."""

    def close(self) -> None:
        self.executor.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---- Helpers --------------------------------------------------------

    @staticmethod
    def _framebuffer(viewport: Viewport, out: Optional[np.ndarray]) -> np.ndarray:
        shape = (viewport.height, viewport.width, 3)
        if out is None:
            return np.zeros(shape, dtype=np.uint8)
        if out.shape != shape or out.dtype != np.uint8:
            raise ValueError(f"Framebuffer must be uint8 {shape}, got {out.dtype} {out.shape}")
        return out

    # ---- Abstract entry point ------------------------------------------

    def render(self, viewport: Viewport, out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Fill `out` (or a new buffer) with the image of `viewport` and
        return it. Every pixel is overwritten.
        """
        raise NotImplementedError("BaseRenderEngine.render() must be implemented by subclasses.")
