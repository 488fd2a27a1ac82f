"""Grouped aggregations over the hourly and event tables.

All functions return new DataFrames sorted by their grouping key. Rows with
an absent or out-of-range grouping key are skipped and logged.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from bora_stats.compute.events import EventPredicate, classify_events
from bora_stats.compute.streaks import event_day_set
from bora_stats.config import STATION_TIMEZONE

logger = logging.getLogger(__name__)

MONTHS = list(range(1, 13))
HOURS = list(range(24))
CATEGORIES = ["event", "non-event"]

_KEY_RANGES = {
    "month": (1, 12),
    "day": (1, 31),
    "hour": (0, 23),
}


def _valid_keys(records: pd.DataFrame, keys: list[str], label: str) -> pd.DataFrame:
    """Drop rows with absent or out-of-range grouping keys."""
    mask = records[keys].notna().all(axis=1)
    for key in keys:
        if key in _KEY_RANGES:
            low, high = _KEY_RANGES[key]
            mask &= records[key].between(low, high).fillna(False)
    n_skipped = int((~mask).sum())
    if n_skipped:
        logger.warning("%s: skipped %d rows with invalid %s", label, n_skipped, "/".join(keys))
    return records[mask.to_numpy(dtype=bool)]


def count_by_year(events: pd.DataFrame, years=None) -> pd.DataFrame:
    """Event hours per year.

    If years is given, every listed year appears, with 0 when it has data
    but no events.
    """
    valid = _valid_keys(events, ["year"], "count_by_year")
    counts = valid.groupby("year").size()
    if years is not None:
        all_years = sorted(set(int(y) for y in years) | set(int(y) for y in counts.index))
        counts = counts.reindex(all_years, fill_value=0)
    counts = counts.sort_index()
    return pd.DataFrame({
        "year": counts.index.astype(int),
        "count": counts.to_numpy(dtype=int),
    })


def count_by_month(events: pd.DataFrame) -> pd.DataFrame:
    """Event hours per calendar month, summed over all years (12 rows)."""
    valid = _valid_keys(events, ["month"], "count_by_month")
    counts = valid.groupby("month").size().reindex(MONTHS, fill_value=0)
    return pd.DataFrame({"month": MONTHS, "count": counts.to_numpy(dtype=int)})


def monthly_average_over_years(events: pd.DataFrame) -> pd.DataFrame:
    """Mean per-year event count for each month (12 rows).

    The mean for a month is taken over the years that produced a count for
    that month; a month with no contributing year is absent.
    """
    valid = _valid_keys(events, ["year", "month"], "monthly_average_over_years")
    per_year = valid.groupby(["year", "month"]).size().rename("count").reset_index()
    grouped = per_year.groupby("month")["count"]
    avg = grouped.mean().reindex(MONTHS)
    n_years = grouped.size().reindex(MONTHS, fill_value=0)
    return pd.DataFrame({
        "month": MONTHS,
        "avg_count": avg.astype("Float64").array,
        "n_years": n_years.to_numpy(dtype=int),
    })


def to_local_hour(records: pd.DataFrame, timezone: str = STATION_TIMEZONE) -> pd.Series:
    """Convert (year, month, day, hour) in UTC to the local civil hour.

    Uses the zone's historical offset rules, so hours on either side of a
    daylight-saving transition get the offset in force at that instant.
    """
    parts = records[["year", "month", "day", "hour"]].astype("int64")
    utc = pd.to_datetime(parts, errors="coerce")
    local = utc.dt.tz_localize("UTC").dt.tz_convert(timezone)
    return local.dt.hour.astype("Int64").rename("local_hour")


def local_hour_histogram(
    events: pd.DataFrame,
    timezone: str = STATION_TIMEZONE,
) -> pd.DataFrame:
    """Event hours per local hour of day; always 24 rows."""
    valid = _valid_keys(events, ["year", "month", "day", "hour"], "local_hour_histogram")
    if valid.empty:
        counts = pd.Series(dtype=int)
    else:
        local_hour = to_local_hour(valid, timezone)
        n_invalid = int(local_hour.isna().sum())
        if n_invalid:
            logger.warning("local_hour_histogram: skipped %d rows with invalid dates", n_invalid)
        counts = local_hour.dropna().astype(int).value_counts()
    counts = counts.reindex(HOURS, fill_value=0)
    return pd.DataFrame({"local_hour": HOURS, "count": counts.to_numpy(dtype=int)})


def monthly_mean_by_category(
    records: pd.DataFrame,
    predicate: EventPredicate,
    field: str = "temperature_c",
) -> pd.DataFrame:
    """Monthly mean of a secondary field for event vs non-event hours.

    Partitions all records by the predicate; records whose predicate is
    absent fall in neither category. Absent field values are ignored, and a
    (month, category) with no values has an absent mean. Always 24 rows.
    """
    is_event = classify_events(records, predicate)
    frame = pd.DataFrame({
        "month": records["month"],
        "is_event": is_event,
        "value": records[field].astype("Float64"),
    })
    frame = frame[frame["is_event"].notna().to_numpy(dtype=bool)]
    frame = _valid_keys(frame, ["month"], "monthly_mean_by_category")
    frame = frame.assign(
        month=frame["month"].astype(int),
        category=np.where(frame["is_event"].astype(bool), "event", "non-event"),
    )

    grouped = frame.groupby(["month", "category"])["value"]
    means = grouped.mean()
    n_values = grouped.count()

    index = pd.MultiIndex.from_product([MONTHS, CATEGORIES], names=["month", "category"])
    means = means.reindex(index)
    n_values = n_values.reindex(index, fill_value=0)

    result = index.to_frame(index=False)
    result["mean_value"] = means.astype("Float64").array
    result["n_values"] = n_values.to_numpy(dtype=int)
    return result


def yearly_event_days(events: pd.DataFrame) -> pd.DataFrame:
    """Distinct event days per year.

    Uses the same calendar-date filter as streak segmentation, so the yearly
    totals add up to the summed streak lengths.
    """
    days = event_day_set(events)
    counts = days.groupby(days.dt.year).size().sort_index()
    return pd.DataFrame({
        "year": counts.index.astype(int),
        "event_days": counts.to_numpy(dtype=int),
    })
