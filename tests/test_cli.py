"""Tests for the CLI entry point."""

import json

import pytest

from bora_stats.cli import main
from bora_stats.db.connection import get_connection
from bora_stats.db.queries import get_streaks

HEADER = "mesec;dan;ura;povp. hitrost vetra (km/h);maks. hitrost vetra (km/h);smer vetra (°);temperatura (°C)"


def _seed_dir(tmp_path):
    lines_2020 = [HEADER] + [
        f"1;{day};6;50;70;45;2,5" for day in (10, 11, 12)
    ] + ["1;20;6;5;10;200;8,0", "2;1;-;-;-;-;-"]
    lines_2021 = [HEADER, "3;3;12;40;60;60;9,0", "3;4;0;10;15;10;7,5"]
    (tmp_path / "station_2020.csv").write_text("\n".join(lines_2020) + "\n", encoding="utf-8")
    (tmp_path / "station_2021.csv").write_text("\n".join(lines_2021) + "\n", encoding="utf-8")
    return tmp_path


def test_analyze_json(tmp_path, capsys):
    data_dir = _seed_dir(tmp_path)

    main(["analyze", "--data-dir", str(data_dir), "--json"])

    out = json.loads(capsys.readouterr().out)
    assert len(out) == 1
    summary = out[0]
    assert summary["predicate"] == "kmh36"
    assert summary["n_event_hours"] == 4
    assert summary["n_streaks"] == 2
    assert summary["parity"]["odd_count"] == 2
    assert summary["trend"]["insufficient_data"] is True


def test_analyze_all_predicates_to_db(tmp_path, capsys):
    data_dir = _seed_dir(tmp_path)
    db_path = tmp_path / "out" / "bora.duckdb"

    main(["analyze", "--data-dir", str(data_dir), "--predicate", "all", "--db", str(db_path)])

    out = capsys.readouterr().out
    assert "== kmh36 ==" in out
    assert "== gust_ms10 ==" in out

    conn = get_connection(db_path, read_only=True)
    try:
        assert get_streaks(conn, "kmh36")["length"].tolist() == [3, 1]
        assert not get_streaks(conn, "gust_ms10").empty
    finally:
        conn.close()


def test_predicates(capsys):
    main(["predicates"])
    out = capsys.readouterr().out
    assert "kmh36" in out
    assert "gust_ms10" in out


def test_missing_data_dir_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["analyze", "--data-dir", str(tmp_path / "empty")])
    assert exc.value.code == 1


def test_unknown_predicate_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["analyze", "--data-dir", str(_seed_dir(tmp_path)), "--predicate", "foehn"])
    assert exc.value.code == 1


def test_no_command_prints_help():
    with pytest.raises(SystemExit):
        main([])
