"""Streak parity and yearly trend tests.

Degenerate inputs (no streaks, too few years) return a summary with
insufficient_data=True instead of calling into scipy with invalid
parameters.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from pydantic import BaseModel
from scipy import stats

from bora_stats.config import CONFIDENCE_LEVEL, MIN_TREND_YEARS, NULL_PROPORTION

logger = logging.getLogger(__name__)


class ParitySummary(BaseModel):
    odd_count: int
    even_count: int
    total: int
    proportion: float | None = None
    p_value: float | None = None
    ci_low: float | None = None
    ci_high: float | None = None
    confidence_level: float = CONFIDENCE_LEVEL
    insufficient_data: bool = False


class TrendSummary(BaseModel):
    n_years: int
    slope: float | None = None
    intercept: float | None = None
    slope_stderr: float | None = None
    slope_p_value: float | None = None
    r_value: float | None = None
    insufficient_data: bool = False


def parity_counts(streaks: pd.DataFrame) -> tuple[int, int]:
    """Return (odd_count, even_count) of streak lengths."""
    if streaks.empty:
        return 0, 0
    odd = int((streaks["length"] % 2 == 1).sum())
    return odd, len(streaks) - odd


def binomial_parity_test(
    odd_count: int,
    even_count: int,
    confidence_level: float = CONFIDENCE_LEVEL,
    null_proportion: float = NULL_PROPORTION,
) -> ParitySummary:
    """Exact two-sided binomial test of odd_count out of the total.

    The confidence interval is Clopper-Pearson.
    """
    total = odd_count + even_count
    if total == 0:
        logger.info("Parity test skipped: no streaks")
        return ParitySummary(
            odd_count=odd_count,
            even_count=even_count,
            total=0,
            confidence_level=confidence_level,
            insufficient_data=True,
        )

    result = stats.binomtest(odd_count, total, p=null_proportion, alternative="two-sided")
    ci = result.proportion_ci(confidence_level=confidence_level, method="exact")
    return ParitySummary(
        odd_count=odd_count,
        even_count=even_count,
        total=total,
        proportion=float(result.statistic),
        p_value=float(result.pvalue),
        ci_low=float(ci.low),
        ci_high=float(ci.high),
        confidence_level=confidence_level,
    )


def streak_parity_test(
    streaks: pd.DataFrame,
    confidence_level: float = CONFIDENCE_LEVEL,
) -> ParitySummary:
    odd, even = parity_counts(streaks)
    return binomial_parity_test(odd, even, confidence_level=confidence_level)


def yearly_trend_test(yearly: pd.DataFrame, value_column: str = "count") -> TrendSummary:
    """OLS fit of value_column ~ year with two-sided p-value for slope = 0.

    A constant series fits slope = 0 exactly: it is reported with zero
    standard error, slope_p_value=1.0 and an absent r_value (the
    correlation is undefined).
    """
    data = yearly[["year", value_column]].dropna()
    n_years = len(data)
    if n_years < MIN_TREND_YEARS:
        logger.info("Trend test skipped: %d years (need %d)", n_years, MIN_TREND_YEARS)
        return TrendSummary(n_years=n_years, insufficient_data=True)

    x = data["year"].astype(float).to_numpy()
    y = data[value_column].astype(float).to_numpy()
    if np.ptp(y) == 0:
        return TrendSummary(
            n_years=n_years,
            slope=0.0,
            intercept=float(y[0]),
            slope_stderr=0.0,
            slope_p_value=1.0,
        )

    fit = stats.linregress(x, y)
    return TrendSummary(
        n_years=n_years,
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        slope_stderr=float(fit.stderr),
        slope_p_value=_finite_or_none(fit.pvalue),
        r_value=_finite_or_none(fit.rvalue),
    )


def _finite_or_none(value: float) -> float | None:
    value = float(value)
    return value if math.isfinite(value) else None
