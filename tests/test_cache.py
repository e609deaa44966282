from tilebrot.rendering.cache import TileCache
from tilebrot.rendering.tile import Tile, TileResult


def _result(tile):
    return TileResult.uniform(tile.grid_x, tile.grid_y, tile.size, 0, (0, 0, 0))


def test_get_put_clear():
    cache = TileCache()
    tile = Tile(0, 32, 16, 32, 50)
    assert cache.get(tile) is None
    assert tile not in cache

    result = _result(tile)
    cache.put(tile, result)
    assert cache.get(tile) is result
    assert cache.get(Tile(0, 32, 16, 32, 50)) is result
    assert tile in cache
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0
    assert cache.get(tile) is None


def test_keys_differing_in_iteration_bound_are_distinct():
    cache = TileCache()
    a = Tile(0, 0, 16, 32, 50)
    b = Tile(0, 0, 16, 32, 60)
    cache.put(a, _result(a))
    assert cache.get(b) is None


def test_put_is_idempotent():
    cache = TileCache()
    tile = Tile(0, 0, 16, 32, 50)
    result = _result(tile)
    cache.put(tile, result)
    cache.put(tile, result)
    assert len(cache) == 1


def test_get_counts_hits_and_misses():
    cache = TileCache()
    tile = Tile(0, 0, 16, 32, 50)
    cache.get(tile)
    cache.put(tile, _result(tile))
    cache.get(tile)
    cache.get(tile)
    cache.get(Tile(32, 0, 16, 32, 50))
    assert (cache.hits, cache.misses) == (2, 2)
    # counters outlive clear()
    cache.clear()
    cache.get(tile)
    assert (cache.hits, cache.misses) == (2, 3)
