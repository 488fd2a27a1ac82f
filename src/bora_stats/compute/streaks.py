"""Calendar streak segmentation.

A streak is a maximal run of consecutive calendar dates that each contain at
least one event hour. Segmentation works on the sorted, de-duplicated set of
event dates, so the result depends only on which dates occur and not on the
order or multiplicity of the input rows.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

STREAK_COLUMNS = ["streak_id", "start_date", "end_date", "length", "year"]


def event_day_set(events: pd.DataFrame) -> pd.Series:
    """Distinct event dates, sorted ascending.

    Rows whose (year, month, day) do not form a valid calendar date are
    skipped and logged. Month and day are range-checked before the date is
    assembled, since pandas would otherwise carry an overflowing day into
    the month (month=0, day=131 reads as January 31).
    """
    if events.empty:
        return pd.Series([], dtype="datetime64[ns]", name="date")

    parts = events[["year", "month", "day"]].dropna().astype("int64")
    in_range = parts["month"].between(1, 12) & parts["day"].between(1, 31)
    parts = parts[in_range]
    if parts.empty:
        logger.warning("Skipped %d event rows without a valid calendar date", len(events))
        return pd.Series([], dtype="datetime64[ns]", name="date")
    dates = pd.to_datetime(parts, errors="coerce")

    n_invalid = len(events) - len(parts) + int(dates.isna().sum())
    if n_invalid:
        logger.warning("Skipped %d event rows without a valid calendar date", n_invalid)

    days = dates.dropna().drop_duplicates().sort_values(kind="mergesort")
    return days.reset_index(drop=True).rename("date")


def segment_streaks(events: pd.DataFrame) -> pd.DataFrame:
    """Split the event day set into maximal runs of consecutive days.

    Returns one row per streak ordered by start_date, with streak_id
    starting at 1 and year taken from start_date.
    """
    days = event_day_set(events)
    if days.empty:
        return _empty_streaks()

    ordinal = days.to_numpy(dtype="datetime64[D]").astype(np.int64)
    gap = np.diff(ordinal, prepend=ordinal[0] - 2)
    # Any gap other than exactly one day starts a new streak
    streak_id = np.cumsum(gap != 1)

    frame = pd.DataFrame({"streak_id": streak_id, "date": days})
    streaks = frame.groupby("streak_id", sort=True).agg(
        start_date=("date", "min"),
        end_date=("date", "max"),
        length=("date", "size"),
    ).reset_index()
    streaks["start_date"] = streaks["start_date"].dt.date
    streaks["end_date"] = streaks["end_date"].dt.date
    streaks["year"] = [d.year for d in streaks["start_date"]]
    streaks["streak_id"] = streaks["streak_id"].astype(int)
    streaks["length"] = streaks["length"].astype(int)

    logger.info("Segmented %d event days into %d streaks", len(days), len(streaks))
    return streaks[STREAK_COLUMNS]


def streak_length_distribution(streaks: pd.DataFrame) -> pd.DataFrame:
    """Number of streaks per length, ascending by length."""
    if streaks.empty:
        return pd.DataFrame({"length": pd.Series(dtype=int), "count": pd.Series(dtype=int)})
    counts = streaks["length"].value_counts().sort_index()
    return pd.DataFrame({"length": counts.index.astype(int), "count": counts.to_numpy(dtype=int)})


def parity_by_year(streaks: pd.DataFrame) -> pd.DataFrame:
    """Odd/even streak tallies per streak start year."""
    if streaks.empty:
        return pd.DataFrame({
            "year": pd.Series(dtype=int),
            "odd_count": pd.Series(dtype=int),
            "even_count": pd.Series(dtype=int),
        })
    odd = streaks["length"] % 2 == 1
    grouped = pd.DataFrame({"year": streaks["year"], "odd": odd, "even": ~odd})
    result = grouped.groupby("year", sort=True)[["odd", "even"]].sum().reset_index()
    return result.rename(columns={"odd": "odd_count", "even": "even_count"}).astype(int)


def _empty_streaks() -> pd.DataFrame:
    return pd.DataFrame({
        "streak_id": pd.Series(dtype=int),
        "start_date": pd.Series(dtype=object),
        "end_date": pd.Series(dtype=object),
        "length": pd.Series(dtype=int),
        "year": pd.Series(dtype=int),
    })
