import csv

from tilebrot.benchmarking.benchmark import main, parse_resolution_list


def test_parse_resolution_list():
    assert parse_resolution_list("800x600, 64X48,") == [(800, 600), (64, 48)]
    assert parse_resolution_list("") == [(800, 600), (1280, 720)]


def test_benchmark_writes_csv(tmp_path, capsys):
    out = tmp_path / "bench.csv"
    rc = main(["--res", "48x32", "--runs", "1", "--max-iter", "20",
               "--tile-size", "16", "--workers", "2", "--csv", str(out)])
    assert rc == 0
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][:3] == ["resolution", "engine", "step"]
    assert len(rows) == 1 + 2 * 4
    tiled = {r[2]: r for r in rows[1:] if r[1] == "tiled"}
    # warm re-render is served from the cache
    assert tiled["warm"][8] == "0"
    assert tiled["warm"][5] == tiled["warm"][4]
    assert "48x32" in capsys.readouterr().out
