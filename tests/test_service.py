import numpy as np
import pytest

from tilebrot.fractals.base import RenderSettings
from tilebrot.rendering.engines.full_frame import FullFrameEngine
from tilebrot.rendering.engines.tile import TileEngine
from tilebrot.rendering.service import RenderService
from tilebrot.utils.enums import EngineMode


@pytest.fixture
def service():
    svc = RenderService(96, 64, center_x=-60, center_y=0, zoom=32, max_iter=64,
                        settings=RenderSettings(tile_size=32, max_workers=2))
    yield svc
    svc.shutdown()


def test_render_emits_frame(service):
    frames, logs = [], []
    service.on_frame = frames.append
    service.on_log = logs.append

    evt = service.render()
    assert evt.seq == 1
    assert evt.data.shape == (64, 96, 3)
    assert (evt.width, evt.height) == (96, 64)
    assert frames == [evt]
    assert logs and "Render time" in logs[-1].message
    assert not service.dirty


def test_clean_frame_is_not_rendered_again(service):
    first = service.render()
    assert service.render() is first
    forced = service.render(force=True)
    assert forced.seq == 2
    assert forced.stats.evaluations == 0
    np.testing.assert_array_equal(forced.data, first.data)


def test_pan_keeps_cache(service):
    service.render()
    cached = len(service.engine.cache)
    service.pan(16, 0)
    assert service.dirty
    assert len(service.engine.cache) == cached
    evt = service.render()
    assert evt.stats.cache_hits > 0


def test_zero_pan_is_not_a_change(service):
    service.render()
    service.pan(0, 0)
    assert not service.dirty


def test_zoom_invalidates(service):
    service.render()
    service.zoom_at(1, 10, 10)
    assert len(service.engine.cache) == 0
    evt = service.render()
    assert evt.stats.cache_hits == 0


def test_max_iter_change_invalidates(service):
    logs = []
    service.on_log = logs.append
    service.render()
    service.adjust_max_iter(-16)
    assert service.viewport.max_iter == 48
    assert len(service.engine.cache) == 0
    assert any("max_iter" in e.message for e in logs)
    assert service.render().stats.cache_hits == 0


def test_resize_keeps_cache_when_scale_is_kept(service):
    service.render()
    service.resize(128, 64)
    assert len(service.engine.cache) > 0
    evt = service.render()
    assert evt.data.shape == (64, 128, 3)
    assert evt.stats.cache_hits > 0


def test_export_leaves_live_cache_alone(service):
    live = service.render()
    cached = len(service.engine.cache)
    evaluations = service.engine.evaluations

    same = service.export(96, 64)
    np.testing.assert_array_equal(same, live.data)

    big = service.export(192, 128)
    assert big.shape == (128, 192, 3)
    assert len(service.engine.cache) == cached
    assert service.engine.evaluations == evaluations
    assert service.viewport.width == 96
    assert service.viewport.zoom == 32


def test_engine_mode_switch(service):
    tiled = service.render().data
    service.set_engine_mode(EngineMode.FULL_FRAME)
    assert isinstance(service.engine, FullFrameEngine)
    assert service.dirty
    assert service.render().data.shape == tiled.shape
    service.set_engine_mode(EngineMode.TILED)
    assert isinstance(service.engine, TileEngine)


def test_render_failure_is_reported_and_raised(service, monkeypatch):
    logs = []
    service.on_log = logs.append

    def boom(viewport, out=None):
        raise RuntimeError("kernel failed")

    monkeypatch.setattr(service.engine, "render", boom)
    with pytest.raises(RuntimeError):
        service.render()
    assert logs[-1].level == "error"
    assert "kernel failed" in logs[-1].message
    assert service.dirty
