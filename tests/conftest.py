"""Shared test fixtures."""

import duckdb
import pandas as pd
import pytest

from bora_stats.config import CALENDAR_FIELDS, MEASUREMENT_FIELDS
from bora_stats.db.schema import create_all_tables
from bora_stats.ingest.normalize import RawYearTable, normalize_tables


def raw_row(month=1, day=1, hour=0, speed="", gust="", direction="", temp="", **extra) -> dict:
    """One raw hourly row; every field a string, blanks mean missing."""
    row = {name: "" for name in CALENDAR_FIELDS + MEASUREMENT_FIELDS}
    row.update({
        "month": str(month),
        "day": str(day),
        "hour": str(hour),
        "wind_speed_kmh": str(speed),
        "wind_speed_kmh_max": str(gust),
        "wind_direction_deg": str(direction),
        "temperature_c": str(temp),
    })
    row.update({k: str(v) for k, v in extra.items()})
    return row


def raw_table(year, rows: list[dict], source: str = "") -> RawYearTable:
    return RawYearTable(year=year, frame=pd.DataFrame(rows), source=source)


def make_records(year_rows: dict) -> pd.DataFrame:
    """Normalized hourly records from {year: [raw_row, ...]}."""
    tables = [raw_table(year, rows) for year, rows in year_rows.items()]
    return normalize_tables(tables).records


def bora_day(month, day, hours=(6,), speed=50, direction=45, temp=5.0) -> list[dict]:
    """Raw rows for one day with Bora hours at the given UTC hours."""
    return [
        raw_row(month, day, h, speed=speed, gust=speed + 20, direction=direction, temp=temp)
        for h in hours
    ]


@pytest.fixture
def db():
    """In-memory DuckDB with all tables created."""
    conn = duckdb.connect(":memory:")
    create_all_tables(conn)
    yield conn
    conn.close()


@pytest.fixture
def sample_tables() -> list[RawYearTable]:
    """Two years of raw rows with a few Bora days and calm hours."""
    rows_2020 = (
        bora_day(1, 10, hours=(3, 4))
        + bora_day(1, 11)
        + bora_day(1, 12)
        + bora_day(2, 1)
        + bora_day(2, 2)
        + [raw_row(1, 10, 12, speed=5, gust=10, direction=200, temp=8.0)]
        + [raw_row(3, 1, 0, speed="-", gust="-", direction="-", temp="-")]
    )
    rows_2021 = (
        bora_day(12, 30)
        + [raw_row(6, 15, 10, speed=12, gust=20, direction=270, temp=24.0)]
    )
    return [
        raw_table(2020, rows_2020, source="station_2020.csv"),
        raw_table(2021, rows_2021, source="station_2021.csv"),
    ]
