"""Tile-based incremental Mandelbrot renderer."""

from tilebrot.coloring.hue_cycle import HueCycleColoring
from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.fractals.mandelbrot import iterations
from tilebrot.rendering.cache import TileCache
from tilebrot.rendering.engines.full_frame import FullFrameEngine
from tilebrot.rendering.engines.tile import TileEngine
from tilebrot.rendering.service import RenderService
from tilebrot.rendering.tile import Tile, TileResult

__all__ = [
    "FullFrameEngine",
    "HueCycleColoring",
    "RenderService",
    "RenderSettings",
    "Tile",
    "TileCache",
    "TileEngine",
    "TileResult",
    "Viewport",
    "iterations",
]
