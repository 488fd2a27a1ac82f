"""Tests for Bora event classification."""

import pandas as pd
import pytest

from bora_stats.compute.events import (
    BORA_GUST_MS,
    BORA_KMH,
    EventPredicate,
    classify_events,
    evaluate_predicate,
    filter_events,
    get_predicate,
)
from bora_stats.errors import InvalidPredicateError
from conftest import make_records, raw_row


class TestEvaluatePredicate:
    def test_kmh_threshold_is_inclusive(self):
        assert evaluate_predicate(BORA_KMH, 35.9, 45) is False
        assert evaluate_predicate(BORA_KMH, 36.0, 45) is True
        assert evaluate_predicate(BORA_KMH, 80.0, 45) is True

    def test_kmh_direction_bounds_inclusive(self):
        assert evaluate_predicate(BORA_KMH, 50, 0) is True
        assert evaluate_predicate(BORA_KMH, 50, 90) is True
        assert evaluate_predicate(BORA_KMH, 50, 90.5) is False
        assert evaluate_predicate(BORA_KMH, 50, 200) is False

    def test_gust_variant_converts_to_ms(self):
        # 36 km/h * 0.27778 = 10.00008 m/s
        assert evaluate_predicate(BORA_GUST_MS, 36.0, 60) is True
        assert evaluate_predicate(BORA_GUST_MS, 35.9, 60) is False

    def test_gust_variant_direction_band(self):
        assert evaluate_predicate(BORA_GUST_MS, 60, 44) is False
        assert evaluate_predicate(BORA_GUST_MS, 60, 45) is True
        assert evaluate_predicate(BORA_GUST_MS, 60, 90) is True

    def test_absent_inputs_propagate(self):
        assert evaluate_predicate(BORA_KMH, None, 45) is None
        assert evaluate_predicate(BORA_KMH, 50, None) is None
        assert evaluate_predicate(BORA_KMH, pd.NA, 45) is None

    def test_monotonic_in_speed(self):
        results = [evaluate_predicate(BORA_KMH, s / 10, 30) for s in range(300, 420)]
        flip = results.index(True)
        assert not any(results[:flip])
        assert all(results[flip:])
        assert flip == 60  # 36.0 km/h


class TestPredicateRegistry:
    def test_variants_are_distinct(self):
        assert get_predicate("kmh36") is BORA_KMH
        assert get_predicate("gust_ms10") is BORA_GUST_MS
        assert BORA_KMH.speed_field == "wind_speed_kmh"
        assert BORA_GUST_MS.speed_field == "wind_speed_kmh_max"

    def test_unknown_name(self):
        with pytest.raises(InvalidPredicateError):
            get_predicate("storm")

    def test_inverted_bounds_rejected(self):
        with pytest.raises(InvalidPredicateError):
            EventPredicate("bad", "wind_speed_kmh", 10, 90, 0)

    def test_unknown_speed_field_rejected(self):
        with pytest.raises(InvalidPredicateError):
            EventPredicate("bad", "temperature_c", 10, 0, 90)


class TestClassifyEvents:
    def _records(self):
        return make_records({2020: [
            raw_row(1, 1, 0, speed=40, gust=50, direction=30),   # kmh event, gust no (dir < 45)
            raw_row(1, 1, 1, speed=20, gust=40, direction=60),   # gust event only
            raw_row(1, 1, 2, speed=40, gust=50, direction=180),  # neither
            raw_row(1, 1, 3, speed="", gust=50, direction=60),   # kmh absent
            raw_row(1, 1, 4, speed=40, gust=50, direction="-"),  # both absent
        ]})

    def test_kmh_variant(self):
        result = classify_events(self._records(), BORA_KMH)
        assert result.tolist() == [True, False, False, pd.NA, pd.NA]
        assert str(result.dtype) == "boolean"

    def test_gust_variant(self):
        result = classify_events(self._records(), BORA_GUST_MS)
        assert result.tolist() == [False, True, False, True, pd.NA]

    def test_absent_with_out_of_range_direction_is_still_absent(self):
        records = make_records({2020: [raw_row(speed="", direction=200)]})
        assert classify_events(records, BORA_KMH).isna().all()

    def test_filter_events_is_order_preserving(self):
        records = make_records({2020: [
            raw_row(1, 2, 0, speed=50, direction=10),
            raw_row(1, 1, 0, speed=10, direction=10),
            raw_row(1, 1, 5, speed=60, direction=20),
        ]})
        events = filter_events(records, BORA_KMH)
        assert events["day"].tolist() == [2, 1]
        assert events["hour"].tolist() == [0, 5]
