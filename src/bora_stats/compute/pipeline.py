"""Analysis pipeline: normalize, classify, segment, aggregate, test.

Each stage returns a new table; nothing is overwritten between stages.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import logging

import pandas as pd
from pydantic import BaseModel

from bora_stats.compute.aggregations import (
    count_by_month,
    count_by_year,
    local_hour_histogram,
    monthly_average_over_years,
    monthly_mean_by_category,
    yearly_event_days,
)
from bora_stats.compute.events import BORA_KMH, EventPredicate, filter_events
from bora_stats.compute.statistics import (
    ParitySummary,
    TrendSummary,
    streak_parity_test,
    yearly_trend_test,
)
from bora_stats.compute.streaks import (
    parity_by_year,
    segment_streaks,
    streak_length_distribution,
)
from bora_stats.config import MEASUREMENT_FIELDS, STATION_TIMEZONE
from bora_stats.errors import BoraStatsError, NoInputDataError
from bora_stats.ingest.normalize import (
    NormalizeReport,
    RawYearTable,
    merge_hourly_records,
    normalize_tables,
)

logger = logging.getLogger(__name__)


class AnalysisSummary(BaseModel):
    predicate: str
    timezone: str
    secondary_field: str
    n_records: int
    n_event_hours: int
    n_event_days: int
    n_streaks: int
    report: dict
    parity: ParitySummary
    trend: TrendSummary


@dataclass
class AnalysisResult:
    predicate: str
    timezone: str
    secondary_field: str
    report: NormalizeReport
    records: pd.DataFrame
    events: pd.DataFrame
    yearly_counts: pd.DataFrame
    monthly_counts: pd.DataFrame
    monthly_avg_counts: pd.DataFrame
    local_hour_counts: pd.DataFrame
    streaks: pd.DataFrame
    streak_lengths: pd.DataFrame
    yearly_parity: pd.DataFrame
    yearly_event_days: pd.DataFrame
    month_category_means: pd.DataFrame
    parity: ParitySummary
    trend: TrendSummary

    def summary(self) -> AnalysisSummary:
        return AnalysisSummary(
            predicate=self.predicate,
            timezone=self.timezone,
            secondary_field=self.secondary_field,
            n_records=len(self.records),
            n_event_hours=len(self.events),
            n_event_days=int(self.streaks["length"].sum()) if not self.streaks.empty else 0,
            n_streaks=len(self.streaks),
            report=asdict(self.report),
            parity=self.parity,
            trend=self.trend,
        )


def run_analysis(
    tables: list[RawYearTable],
    predicate: EventPredicate = BORA_KMH,
    timezone: str = STATION_TIMEZONE,
    secondary_field: str = "temperature_c",
) -> AnalysisResult:
    """Run the full pipeline over raw per-year tables.

    Raises NoInputDataError if there are no tables or every row was rejected.
    """
    if not tables:
        raise NoInputDataError("No input tables")
    if secondary_field not in MEASUREMENT_FIELDS:
        raise BoraStatsError(f"Unknown secondary field: {secondary_field}")

    # 1. Normalize + merge
    normalized = merge_hourly_records(normalize_tables(tables))
    records = normalized.records
    if records.empty:
        raise NoInputDataError(
            f"All {normalized.report.rows_in} input rows were rejected"
        )

    # 2. Classify
    events = filter_events(records, predicate)
    logger.info(
        "%s: %d event hours out of %d records", predicate.name, len(events), len(records),
    )

    # 3. Streaks
    streaks = segment_streaks(events)

    # 4. Aggregations
    years = records["year"].dropna().unique()
    yearly_counts = count_by_year(events, years=years)

    # 5. Statistics
    parity = streak_parity_test(streaks)
    trend = yearly_trend_test(yearly_counts)

    return AnalysisResult(
        predicate=predicate.name,
        timezone=timezone,
        secondary_field=secondary_field,
        report=normalized.report,
        records=records,
        events=events,
        yearly_counts=yearly_counts,
        monthly_counts=count_by_month(events),
        monthly_avg_counts=monthly_average_over_years(events),
        local_hour_counts=local_hour_histogram(events, timezone),
        streaks=streaks,
        streak_lengths=streak_length_distribution(streaks),
        yearly_parity=parity_by_year(streaks),
        yearly_event_days=yearly_event_days(events),
        month_category_means=monthly_mean_by_category(records, predicate, secondary_field),
        parity=parity,
        trend=trend,
    )
