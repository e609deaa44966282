from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from tilebrot.coloring.base import ColoringStrategy
from tilebrot.coloring.hue_cycle import HueCycleColoring
from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.rendering.engines.base import BaseRenderEngine
from tilebrot.rendering.engines.full_frame import FullFrameEngine
from tilebrot.rendering.engines.tile import TileEngine
from tilebrot.rendering.events import FrameEvent, LogEvent
from tilebrot.utils.enums import EngineMode

logger = logging.getLogger(__name__)


class RenderService:
    """
    Platform-facing facade that owns:
      - the live viewport and the engine rendering it,
      - the dirty flag (render once per changed frame),
      - event dispatch (frame/log),
      - high-resolution exports on a separate engine.

    Input handlers call pan/zoom_at/resize/adjust_max_iter, the display
    loop calls render() and uploads FrameEvent.data.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        center_x: int = 0,
        center_y: int = 0,
        zoom: int = 250,
        max_iter: int = 256,
        settings: Optional[RenderSettings] = None,
        coloring: Optional[ColoringStrategy] = None,
        engine_mode: EngineMode = EngineMode.TILED,
    ) -> None:
        self.viewport = Viewport(width=width, height=height,
                                 center_x=center_x, center_y=center_y,
                                 zoom=zoom, max_iter=max_iter)
        self.settings = settings or RenderSettings()
        self.coloring = coloring or HueCycleColoring()
        self.engine_mode = engine_mode
        self.engine: BaseRenderEngine = self._make_engine(engine_mode)

        self._render_seq = 0
        self._dirty = True
        self._last_frame: Optional[FrameEvent] = None

        # Callbacks
        self.on_frame: Optional[Callable[[FrameEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Configuration
    # ---------------------------------------------------------------------

    def _make_engine(self, mode: EngineMode) -> BaseRenderEngine:
        if mode == EngineMode.TILED:
            return TileEngine(self.settings, coloring=self.coloring)
        if mode == EngineMode.FULL_FRAME:
            return FullFrameEngine(self.settings, coloring=self.coloring)
        raise ValueError(f"Unsupported engine mode: {mode}")

    def set_engine_mode(self, mode: EngineMode) -> None:
        if mode == self.engine_mode:
            return
        self.engine.close()
        self.engine = self._make_engine(mode)
        self.engine_mode = mode
        self._dirty = True
        logger.info("Engine mode set to %s", mode.name)
        self._log(f"Engine mode set to {mode.name}")

    @property
    def dirty(self) -> bool:
        return self._dirty

    # ---------------------------------------------------------------------
    # Viewport mutations
    # ---------------------------------------------------------------------

    def pan(self, dx: int, dy: int) -> None:
        if dx or dy:
            self.viewport.pan(dx, dy)
            self._dirty = True

    def zoom_at(self, wheel_delta: int, cursor_px: int, cursor_py: int) -> None:
        old = self.viewport.zoom
        self.viewport.zoom_at(wheel_delta, cursor_px, cursor_py)
        if self.viewport.zoom != old:
            self.engine.invalidate()
        self._dirty = True

    def resize(self, width: int, height: int, *, keep_scale: bool = True) -> None:
        old = self.viewport.zoom
        self.viewport.resize(width, height, keep_scale=keep_scale)
        if self.viewport.zoom != old:
            self.engine.invalidate()
        self._dirty = True

    def adjust_max_iter(self, delta: int) -> None:
        old = self.viewport.max_iter
        self.viewport.adjust_max_iter(delta)
        if self.viewport.max_iter != old:
            self.engine.invalidate()
            self._dirty = True
            logger.info("max_iter set to %d", self.viewport.max_iter)
            self._log(f"max_iter set to {self.viewport.max_iter}")

    # ---------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------

    def render(self, *, force: bool = False) -> FrameEvent:
        """Render the current viewport; a clean frame is returned as-is."""
        if not (self._dirty or force) and self._last_frame is not None:
            return self._last_frame

        vp = self.viewport
        try:
            data = self.engine.render(vp)
        except Exception as e:
            logger.exception("Render failed")
            self._log(f"[RenderService] Render error: {e}", level="error")
            raise

        self._render_seq += 1
        evt = FrameEvent(data, vp.width, vp.height, self._render_seq, self.engine.last_stats)
        self._last_frame = evt
        self._dirty = False
        if self.on_frame:
            self.on_frame(evt)
        self._log(f"Render time: {evt.stats.elapsed_ms:.1f} ms "
                  f"({evt.stats.cache_hits}/{evt.stats.tiles} tiles cached)", level=None)
        return evt

    def export(self, width: int, height: int) -> np.ndarray:
        """
        Render the current view at another resolution. The zoom is scaled
        with the height so the same region is shown; the export uses its own
        engine so the live cache is left untouched.
        """
        vp = self.viewport.copy()
        vp.resize(width, height, keep_scale=False)
        logger.info("Exporting %dx%d at zoom %d", width, height, vp.zoom)
        with TileEngine(self.settings, coloring=self.coloring) as engine:
            return engine.render(vp)

    def shutdown(self) -> None:
        self.engine.close()

    # ---------------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------------

    def _log(self, message: str, level: Optional[str] = "info") -> None:
        if self.on_log:
            self.on_log(LogEvent(message, level=level))
