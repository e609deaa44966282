import pytest

from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.rendering.engines.tile import TileEngine


@pytest.fixture
def small_viewport():
    return Viewport(width=64, height=64, center_x=0, center_y=0, zoom=16, max_iter=50)


@pytest.fixture
def tile_engine():
    engine = TileEngine(RenderSettings(tile_size=32, max_workers=4))
    yield engine
    engine.close()
