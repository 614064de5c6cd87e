import csv

from flood_route.main import EXIT_REJECTED, EXIT_UNREACHABLE, main


def read_rows(path):
    with open(path, newline='') as f:
        return list(csv.DictReader(f))


def test_plays_whole_route_to_csv(tmp_path):
    code = main(["--start", "0,0", "--end", "1,12", "--out-dir", str(tmp_path),
                 "--no-snapshot", "--quiet"])
    assert code == 0
    rows = read_rows(tmp_path / "playback_log.csv")
    assert len(rows) == 20
    assert (rows[-1]["x"], rows[-1]["y"]) == ("1", "12")
    assert {r["tile"] for r in rows} == {"road"}


def test_cancel_after_two_ticks(tmp_path):
    code = main(["--start", "0,0", "--end", "1,12", "--cancel-after", "2",
                 "--out-dir", str(tmp_path), "--no-snapshot", "--quiet"])
    assert code == 0
    assert len(read_rows(tmp_path / "playback_log.csv")) == 2


def test_building_endpoint_is_rejected(tmp_path, capsys):
    code = main(["--start", "0,0", "--end", "7,12", "--out-dir", str(tmp_path),
                 "--no-snapshot", "--quiet"])
    assert code == EXIT_REJECTED
    assert "road cell" in capsys.readouterr().err
    assert read_rows(tmp_path / "playback_log.csv") == []


def test_missing_endpoints_are_rejected(tmp_path):
    code = main(["--out-dir", str(tmp_path), "--no-csv", "--no-snapshot", "--quiet"])
    assert code == EXIT_REJECTED


def test_unknown_variant_is_rejected(tmp_path):
    code = main(["--variant", "drought", "--start", "0,0", "--end", "1,12",
                 "--out-dir", str(tmp_path), "--no-csv", "--no-snapshot", "--quiet"])
    assert code == EXIT_REJECTED


def test_config_file_with_flood_variant(tmp_path, capsys):
    config = tmp_path / "flood.yaml"
    config.write_text(
        "scenario:\n  variant: flood\n  start: [0, 0]\n  end: [1, 12]\n"
        "export:\n  csv: true\n  snapshot: true\n"
    )
    out_dir = tmp_path / "out"
    code = main(["--config", str(config), "--out-dir", str(out_dir)])
    assert code == 0
    assert (out_dir / "final_state.png").exists()
    rows = read_rows(out_dir / "playback_log.csv")
    assert ("4", "9") in {(r["x"], r["y"]) for r in rows}
    report = capsys.readouterr().out
    assert "FLOOD ROUTE SCENARIO REPORT" in report
    assert "Map Variant:   flood (8x13)" in report


def test_missing_config_file(tmp_path):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == 1


def test_unreachable_exit_code(tmp_path, monkeypatch):
    import numpy as np
    from flood_route.model import grid as grid_module

    walled = {"normal": np.array([
        [0, 0, 0],
        [0, 1, 1],
        [0, 1, 0],
    ])}
    monkeypatch.setattr(grid_module, "MAP_PRESETS", walled)
    code = main(["--start", "0,0", "--end", "2,2", "--out-dir", str(tmp_path),
                 "--no-csv", "--no-snapshot", "--quiet"])
    assert code == EXIT_UNREACHABLE


def test_cancel_after_with_zero_interval(tmp_path):
    code = main(["--start", "0,0", "--end", "1,12", "--interval", "0",
                 "--cancel-after", "2", "--out-dir", str(tmp_path),
                 "--no-snapshot", "--quiet"])
    assert code == 0
    rows = read_rows(tmp_path / "playback_log.csv")
    assert [(r["x"], r["y"]) for r in rows] == [("0", "0"), ("1", "0")]
