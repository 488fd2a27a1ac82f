"""Tests for the parity and trend tests."""

from datetime import date

import pandas as pd
import pytest

from bora_stats.compute.statistics import (
    binomial_parity_test,
    parity_counts,
    streak_parity_test,
    yearly_trend_test,
)


def _streaks(lengths) -> pd.DataFrame:
    return pd.DataFrame({
        "streak_id": range(1, len(lengths) + 1),
        "start_date": [date(2020, 1, 1)] * len(lengths),
        "length": lengths,
    })


class TestParityCounts:
    def test_counts(self):
        assert parity_counts(_streaks([1, 2, 3, 4, 5])) == (3, 2)

    def test_single_day_counts_as_odd(self):
        assert parity_counts(_streaks([1])) == (1, 0)

    def test_empty(self):
        assert parity_counts(_streaks([])) == (0, 0)


class TestBinomialParityTest:
    def test_reference_counts(self):
        result = binomial_parity_test(605, 392)

        assert result.total == 997
        assert result.proportion == pytest.approx(0.6068, abs=1e-3)
        assert 1e-12 < result.p_value < 1e-10
        assert 0.57 < result.ci_low < 0.59
        assert 0.63 < result.ci_high < 0.645
        assert result.ci_low < result.proportion < result.ci_high
        assert not result.insufficient_data

    def test_balanced_counts_not_significant(self):
        result = binomial_parity_test(50, 50)
        assert result.p_value == pytest.approx(1.0)
        assert result.proportion == 0.5

    def test_zero_streaks_is_insufficient(self):
        result = binomial_parity_test(0, 0)
        assert result.insufficient_data
        assert result.p_value is None
        assert result.ci_low is None

    def test_confidence_level_widens_interval(self):
        narrow = binomial_parity_test(60, 40, confidence_level=0.90)
        wide = binomial_parity_test(60, 40, confidence_level=0.99)
        assert wide.ci_low < narrow.ci_low
        assert wide.ci_high > narrow.ci_high

    def test_from_streak_table(self):
        result = streak_parity_test(_streaks([1, 1, 3, 2]))
        assert (result.odd_count, result.even_count) == (3, 1)


class TestYearlyTrendTest:
    def test_positive_trend(self):
        yearly = pd.DataFrame({"year": range(2000, 2006), "count": [10, 12, 11, 15, 14, 18]})
        result = yearly_trend_test(yearly)

        assert result.n_years == 6
        assert result.slope == pytest.approx(25 / 17.5, rel=1e-6)
        assert result.slope_stderr > 0
        assert result.slope_p_value < 0.05
        assert not result.insufficient_data

    def test_flat_series(self):
        yearly = pd.DataFrame({"year": range(2000, 2010), "count": [7] * 10})
        result = yearly_trend_test(yearly)
        assert result.slope == 0.0
        assert result.intercept == 7.0
        assert result.slope_stderr == 0.0
        assert result.slope_p_value == 1.0
        assert result.r_value is None
        assert not result.insufficient_data

    def test_too_few_years(self):
        result = yearly_trend_test(pd.DataFrame({"year": [2020, 2021], "count": [3, 5]}))
        assert result.insufficient_data
        assert result.slope is None

    def test_no_years(self):
        result = yearly_trend_test(pd.DataFrame({"year": [], "count": []}))
        assert result.insufficient_data
        assert result.n_years == 0
