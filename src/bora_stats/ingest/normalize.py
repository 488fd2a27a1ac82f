"""Record normalizer: raw per-year tables -> one typed hourly table.

Every field except the year tag is parsed to a number. Missing markers and
unparseable values become absent (pandas <NA>), never zero, and the row is
kept. Rows whose year tag is unparseable or out of range are skipped and
counted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math

import numpy as np
import pandas as pd

from bora_stats.config import (
    CALENDAR_FIELDS,
    FIELD_RANGES,
    HOURLY_FIELDS,
    MAX_YEAR,
    MEASUREMENT_FIELDS,
    MIN_YEAR,
    MISSING_MARKERS,
)

logger = logging.getLogger(__name__)

KEY_FIELDS = ["year", "month", "day", "hour"]


@dataclass
class RawYearTable:
    """One source extract: raw string fields plus the year it belongs to."""

    year: object
    frame: pd.DataFrame
    source: str = ""


@dataclass
class NormalizeReport:
    rows_in: int = 0
    rows_out: int = 0
    invalid_year_rows: int = 0
    unparsed_fields: dict[str, int] = field(default_factory=dict)
    out_of_range_fields: dict[str, int] = field(default_factory=dict)
    duplicate_rows: int = 0
    conflicting_keys: int = 0


@dataclass
class NormalizedTable:
    records: pd.DataFrame
    report: NormalizeReport


def parse_year_tag(tag: object) -> int | None:
    """Return the year tag as an int, or None if unparseable/out of range."""
    if tag is None:
        return None
    if isinstance(tag, bool):
        return None
    if isinstance(tag, (int, np.integer)):
        year = int(tag)
    elif isinstance(tag, (float, np.floating)):
        if not math.isfinite(tag) or tag % 1 != 0:
            return None
        year = int(tag)
    else:
        text = str(tag).strip()
        if not text.isdigit():
            return None
        year = int(text)
    if year < MIN_YEAR or year > MAX_YEAR:
        return None
    return year


def parse_numeric(series: pd.Series) -> tuple[pd.Series, int]:
    """Parse raw strings to nullable Float64.

    Returns (parsed, n_unparsed) where n_unparsed counts values that were
    present but not numeric. Missing markers are absent without counting.
    Decimal commas are accepted.
    """
    text = series.astype("string").str.strip().str.replace(",", ".", regex=False)
    missing = text.isna() | text.isin(MISSING_MARKERS)
    candidates = text.astype(object).where(~missing, None)
    parsed = pd.to_numeric(candidates, errors="coerce").astype("Float64")
    # inf/-inf parse as numbers but are not measurements
    finite = parsed.notna() & np.isfinite(parsed.fillna(0.0).to_numpy(dtype=float))
    parsed = parsed.where(finite)
    n_unparsed = int((parsed.isna() & ~missing.fillna(True)).sum())
    return parsed, n_unparsed


def _to_calendar_int(values: pd.Series) -> tuple[pd.Series, int]:
    """Convert parsed Float64 to Int64; non-integral values become absent."""
    integral = values.notna() & (values.fillna(0.0) % 1 == 0)
    n_bad = int((values.notna() & ~integral).sum())
    return values.where(integral).astype("Int64"), n_bad


def _apply_range(name: str, values: pd.Series) -> tuple[pd.Series, int]:
    low, high = FIELD_RANGES.get(name, (None, None))
    if low is None and high is None:
        return values, 0

    ok = pd.Series(True, index=values.index)
    if name == "wind_direction_deg":
        # 360 and 0 are both north
        values = values.mask((values == 360.0).fillna(False), 0.0)
        ok &= (values < 360.0).fillna(True)
    elif high is not None:
        ok &= (values <= high).fillna(True)
    if low is not None:
        ok &= (values >= low).fillna(True)

    n_bad = int((~ok).sum())
    return values.where(ok), n_bad


def normalize_table(table: RawYearTable, report: NormalizeReport) -> pd.DataFrame:
    """Normalize one raw year table, updating report counters in place."""
    raw = table.frame
    report.rows_in += len(raw)

    year = parse_year_tag(table.year)
    if year is None:
        report.invalid_year_rows += len(raw)
        if len(raw):
            logger.warning(
                "Skipped %d rows from %s with invalid year tag %r",
                len(raw), table.source or "<table>", table.year,
            )
        return _empty_records()

    out = pd.DataFrame(index=raw.index)
    out["year"] = pd.Series(year, index=raw.index, dtype="Int64")

    for name in CALENDAR_FIELDS + MEASUREMENT_FIELDS:
        if name in raw.columns:
            parsed, n_unparsed = parse_numeric(raw[name])
        else:
            parsed, n_unparsed = pd.Series(pd.NA, index=raw.index, dtype="Float64"), 0

        if name in CALENDAR_FIELDS:
            parsed, n_nonint = _to_calendar_int(parsed)
            n_unparsed += n_nonint
        else:
            parsed, n_out = _apply_range(name, parsed)
            if n_out:
                report.out_of_range_fields[name] = report.out_of_range_fields.get(name, 0) + n_out

        if n_unparsed:
            report.unparsed_fields[name] = report.unparsed_fields.get(name, 0) + n_unparsed
        out[name] = parsed

    return out.reset_index(drop=True)


def normalize_tables(tables: list[RawYearTable]) -> NormalizedTable:
    """Normalize and concatenate raw year tables, preserving row order."""
    report = NormalizeReport()
    frames = [normalize_table(t, report) for t in tables]
    frames = [f for f in frames if not f.empty]

    records = pd.concat(frames, ignore_index=True) if frames else _empty_records()
    report.rows_out = len(records)

    for name, n in report.unparsed_fields.items():
        logger.warning("Field %s: %d unparseable values set to absent", name, n)
    for name, n in report.out_of_range_fields.items():
        logger.warning("Field %s: %d out-of-range values set to absent", name, n)
    logger.info(
        "Normalized %d of %d rows from %d tables",
        report.rows_out, report.rows_in, len(tables),
    )
    return NormalizedTable(records=records, report=report)


def merge_hourly_records(table: NormalizedTable) -> NormalizedTable:
    """Enforce one record per (year, month, day, hour).

    Exact duplicate rows collapse to one. Keys whose copies disagree are
    dropped entirely, so the result does not depend on input order. Rows
    with an absent calendar key are kept but never collide.
    """
    records = table.records
    keyed = records[KEY_FIELDS].notna().all(axis=1)
    complete = records[keyed]
    unkeyed = records[~keyed]

    deduped = complete.drop_duplicates()
    duplicate_rows = len(complete) - len(deduped)

    conflict = deduped.duplicated(subset=KEY_FIELDS, keep=False)
    conflicting_keys = len(deduped.loc[conflict, KEY_FIELDS].drop_duplicates())

    if duplicate_rows:
        logger.warning("Collapsed %d exact duplicate hourly rows", duplicate_rows)
    if conflicting_keys:
        logger.warning(
            "Dropped %d hourly keys with conflicting duplicate rows (%d rows)",
            conflicting_keys, int(conflict.sum()),
        )

    merged = pd.concat([deduped[~conflict], unkeyed], ignore_index=True)
    merged = merged.sort_values(
        HOURLY_FIELDS, na_position="last", kind="mergesort",
    ).reset_index(drop=True)

    report = replace(
        table.report,
        rows_out=len(merged),
        duplicate_rows=duplicate_rows,
        conflicting_keys=conflicting_keys,
    )
    return NormalizedTable(records=merged, report=report)


def _empty_records() -> pd.DataFrame:
    frame = pd.DataFrame({name: pd.Series(dtype="Float64") for name in HOURLY_FIELDS})
    for name in KEY_FIELDS:
        frame[name] = frame[name].astype("Int64")
    return frame
