"""Yearly CSV extract reader.

Reads one semicolon-delimited station export per year into a RawYearTable.
Every field is kept as a raw string; typing happens in the normalizer.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

from bora_stats.config import COLUMN_MAP, CSV_DELIMITER, DATA_DIR, YEAR_FILE_PATTERN
from bora_stats.errors import NoInputDataError
from bora_stats.ingest.normalize import RawYearTable

logger = logging.getLogger(__name__)


def discover_year_files(data_dir: Path = DATA_DIR) -> list[tuple[int, Path]]:
    """Find *.csv files whose name carries a four-digit year.

    Returns (year, path) pairs sorted by year, then file name.
    """
    pattern = re.compile(YEAR_FILE_PATTERN)
    found = []
    for path in Path(data_dir).glob("*.csv"):
        match = pattern.search(path.stem)
        if match is None:
            logger.debug("Ignoring %s: no year in file name", path.name)
            continue
        found.append((int(match.group(1)), path))
    return sorted(found, key=lambda item: (item[0], item[1].name))


def translate_columns(columns) -> dict[str, str]:
    """Map raw header labels to semantic names via the static COLUMN_MAP."""
    mapping = {}
    for label in columns:
        key = str(label).strip().lower()
        if key in COLUMN_MAP:
            mapping[label] = COLUMN_MAP[key]
        else:
            logger.debug("Dropping unknown column %r", label)
    return mapping


def read_year_table(path: Path, year: object) -> RawYearTable:
    """Read one yearly extract; all fields stay strings."""
    path = Path(path)
    df = pd.read_csv(
        path,
        sep=CSV_DELIMITER,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
    )

    mapping = translate_columns(df.columns)
    df = df[list(mapping)].rename(columns=mapping)
    # Two labels mapping to the same field: keep the first
    df = df.loc[:, ~df.columns.duplicated()]

    logger.info("Read %d rows from %s (year %s)", len(df), path.name, year)
    return RawYearTable(year=year, frame=df, source=path.name)


def load_year_tables(data_dir: Path = DATA_DIR) -> list[RawYearTable]:
    """Read every yearly extract in data_dir."""
    files = discover_year_files(data_dir)
    if not files:
        raise NoInputDataError(f"No yearly CSV extracts found in {data_dir}")
    return [read_year_table(path, year) for year, path in files]
