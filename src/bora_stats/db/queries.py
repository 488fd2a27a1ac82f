"""Typed query functions for the exported analysis tables."""

from __future__ import annotations

import logging

import duckdb
import pandas as pd

from bora_stats.compute.pipeline import AnalysisResult

logger = logging.getLogger(__name__)


def _replace_rows(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    predicate: str,
    df: pd.DataFrame,
    cols: list[str],
) -> int:
    """Replace all rows of one predicate in table with df[cols]."""
    conn.execute(f"DELETE FROM {table} WHERE predicate = ?", [predicate])
    if df.empty:
        return 0

    records = df[cols].copy()
    # Nullable Float64 -> float64 so absent values land as NULL
    for col in records.columns:
        if str(records[col].dtype) == "Float64":
            records[col] = records[col].astype(float)
    records.insert(0, "predicate", predicate)

    col_list = ", ".join(["predicate"] + cols)
    conn.execute(f"INSERT INTO {table} ({col_list}) SELECT {col_list} FROM records")
    return len(records)


# ---------------------------------------------------------------------------
# writes
# ---------------------------------------------------------------------------

def store_analysis(conn: duckdb.DuckDBPyConnection, result: AnalysisResult) -> int:
    """Store every output table of one analysis run.

    Rows previously stored for the same predicate are replaced. Returns the
    number of rows written.
    """
    p = result.predicate
    count = 0
    count += _replace_rows(conn, "fact_streak", p, result.streaks,
                           ["streak_id", "start_date", "end_date", "length", "year"])
    count += _replace_rows(conn, "agg_year_count", p, result.yearly_counts, ["year", "count"])
    count += _replace_rows(conn, "agg_month_count", p, result.monthly_counts, ["month", "count"])
    count += _replace_rows(conn, "agg_month_avg_count", p, result.monthly_avg_counts,
                           ["month", "avg_count", "n_years"])
    count += _replace_rows(conn, "agg_local_hour_count", p, result.local_hour_counts,
                           ["local_hour", "count"])

    means = result.month_category_means.assign(field=result.secondary_field)
    count += _replace_rows(conn, "agg_month_category_mean", p, means,
                           ["field", "month", "category", "mean_value", "n_values"])

    parity = pd.DataFrame([result.parity.model_dump()])
    count += _replace_rows(conn, "dim_parity_summary", p, parity, list(parity.columns))

    trend = pd.DataFrame([result.trend.model_dump()])
    count += _replace_rows(conn, "dim_trend_summary", p, trend, list(trend.columns))

    logger.info("Stored %d rows for predicate %s", count, p)
    return count


# ---------------------------------------------------------------------------
# reads
# ---------------------------------------------------------------------------

def get_streaks(conn: duckdb.DuckDBPyConnection, predicate: str) -> pd.DataFrame:
    return conn.execute("""
        SELECT streak_id, start_date, end_date, length, year
        FROM fact_streak
        WHERE predicate = ?
        ORDER BY streak_id
    """, [predicate]).fetchdf()


def get_yearly_counts(conn: duckdb.DuckDBPyConnection, predicate: str) -> pd.DataFrame:
    return conn.execute("""
        SELECT year, count
        FROM agg_year_count
        WHERE predicate = ?
        ORDER BY year
    """, [predicate]).fetchdf()


def get_monthly_counts(conn: duckdb.DuckDBPyConnection, predicate: str) -> pd.DataFrame:
    return conn.execute("""
        SELECT m.month, m.count, a.avg_count, a.n_years
        FROM agg_month_count m
        LEFT JOIN agg_month_avg_count a
          ON a.predicate = m.predicate AND a.month = m.month
        WHERE m.predicate = ?
        ORDER BY m.month
    """, [predicate]).fetchdf()


def get_local_hour_counts(conn: duckdb.DuckDBPyConnection, predicate: str) -> pd.DataFrame:
    return conn.execute("""
        SELECT local_hour, count
        FROM agg_local_hour_count
        WHERE predicate = ?
        ORDER BY local_hour
    """, [predicate]).fetchdf()


def get_month_category_means(
    conn: duckdb.DuckDBPyConnection,
    predicate: str,
    field: str = "temperature_c",
) -> pd.DataFrame:
    return conn.execute("""
        SELECT month, category, mean_value, n_values
        FROM agg_month_category_mean
        WHERE predicate = ? AND field = ?
        ORDER BY month, category
    """, [predicate, field]).fetchdf()


def get_parity_summary(conn: duckdb.DuckDBPyConnection, predicate: str) -> dict | None:
    result = conn.execute(
        "SELECT * FROM dim_parity_summary WHERE predicate = ?", [predicate]
    ).fetchdf()
    if result.empty:
        return None
    return result.iloc[0].to_dict()


def get_trend_summary(conn: duckdb.DuckDBPyConnection, predicate: str) -> dict | None:
    result = conn.execute(
        "SELECT * FROM dim_trend_summary WHERE predicate = ?", [predicate]
    ).fetchdf()
    if result.empty:
        return None
    return result.iloc[0].to_dict()
