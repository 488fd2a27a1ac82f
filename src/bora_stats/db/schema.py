"""DDL for the exported analysis tables.

Every table carries the predicate name so both Bora conventions can be
stored side by side.
"""

import duckdb


def create_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create all tables if they don't already exist."""

    conn.execute("""
        CREATE TABLE IF NOT EXISTS fact_streak (
            predicate   VARCHAR NOT NULL,
            streak_id   INTEGER NOT NULL,
            start_date  DATE NOT NULL,
            end_date    DATE NOT NULL,
            length      INTEGER NOT NULL,
            year        INTEGER NOT NULL,
            PRIMARY KEY (predicate, streak_id)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS agg_year_count (
            predicate   VARCHAR NOT NULL,
            year        INTEGER NOT NULL,
            count       INTEGER NOT NULL,
            PRIMARY KEY (predicate, year)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS agg_month_count (
            predicate   VARCHAR NOT NULL,
            month       INTEGER NOT NULL,
            count       INTEGER NOT NULL,
            PRIMARY KEY (predicate, month)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS agg_month_avg_count (
            predicate   VARCHAR NOT NULL,
            month       INTEGER NOT NULL,
            avg_count   DOUBLE,
            n_years     INTEGER NOT NULL,
            PRIMARY KEY (predicate, month)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS agg_local_hour_count (
            predicate   VARCHAR NOT NULL,
            local_hour  INTEGER NOT NULL,
            count       INTEGER NOT NULL,
            PRIMARY KEY (predicate, local_hour)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS agg_month_category_mean (
            predicate   VARCHAR NOT NULL,
            field       VARCHAR NOT NULL,
            month       INTEGER NOT NULL,
            category    VARCHAR NOT NULL,
            mean_value  DOUBLE,
            n_values    INTEGER NOT NULL,
            PRIMARY KEY (predicate, field, month, category)
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS dim_parity_summary (
            predicate         VARCHAR PRIMARY KEY,
            odd_count         INTEGER NOT NULL,
            even_count        INTEGER NOT NULL,
            total             INTEGER NOT NULL,
            proportion        DOUBLE,
            p_value           DOUBLE,
            ci_low            DOUBLE,
            ci_high           DOUBLE,
            confidence_level  DOUBLE NOT NULL,
            insufficient_data BOOLEAN NOT NULL,
            computed_at       TIMESTAMP DEFAULT current_timestamp
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS dim_trend_summary (
            predicate         VARCHAR PRIMARY KEY,
            n_years           INTEGER NOT NULL,
            slope             DOUBLE,
            intercept         DOUBLE,
            slope_stderr      DOUBLE,
            slope_p_value     DOUBLE,
            r_value           DOUBLE,
            insufficient_data BOOLEAN NOT NULL,
            computed_at       TIMESTAMP DEFAULT current_timestamp
        )
    """)
