"""Bora event classification.

Two predicate conventions are in use and are kept as separate named
variants:
    kmh36:     mean wind speed >= 36 km/h, direction in [0, 90]
    gust_ms10: max gust * 0.27778 >= 10 m/s, direction in [45, 90]

Bounds are inclusive. The predicate is absent when speed or direction is
absent.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from bora_stats.config import (
    BORA_GUST_MS_DIRECTION,
    BORA_GUST_MS_THRESHOLD,
    BORA_KMH_DIRECTION,
    BORA_KMH_THRESHOLD,
    KMH_TO_MS,
)
from bora_stats.errors import InvalidPredicateError

SPEED_FIELDS = ("wind_speed_kmh", "wind_speed_kmh_max")


@dataclass(frozen=True)
class EventPredicate:
    name: str
    speed_field: str
    threshold: float
    direction_min: float
    direction_max: float
    speed_factor: float = 1.0
    description: str = ""

    def __post_init__(self) -> None:
        if self.speed_field not in SPEED_FIELDS:
            raise InvalidPredicateError(f"Unknown speed field: {self.speed_field}")
        if self.direction_min > self.direction_max:
            raise InvalidPredicateError(
                f"Direction bounds inverted: [{self.direction_min}, {self.direction_max}]"
            )


BORA_KMH = EventPredicate(
    name="kmh36",
    speed_field="wind_speed_kmh",
    threshold=BORA_KMH_THRESHOLD,
    direction_min=BORA_KMH_DIRECTION[0],
    direction_max=BORA_KMH_DIRECTION[1],
    description="wind speed >= 36 km/h from 0-90 deg",
)

BORA_GUST_MS = EventPredicate(
    name="gust_ms10",
    speed_field="wind_speed_kmh_max",
    threshold=BORA_GUST_MS_THRESHOLD,
    direction_min=BORA_GUST_MS_DIRECTION[0],
    direction_max=BORA_GUST_MS_DIRECTION[1],
    speed_factor=KMH_TO_MS,
    description="max gust >= 10 m/s from 45-90 deg",
)

PREDICATES = {p.name: p for p in (BORA_KMH, BORA_GUST_MS)}


def get_predicate(name: str) -> EventPredicate:
    try:
        return PREDICATES[name]
    except KeyError:
        raise InvalidPredicateError(
            f"Unknown predicate {name!r}; expected one of {sorted(PREDICATES)}"
        ) from None


def evaluate_predicate(
    predicate: EventPredicate,
    speed_kmh: float | None,
    direction_deg: float | None,
) -> bool | None:
    """Scalar predicate. Returns None when either input is absent."""
    if speed_kmh is None or direction_deg is None or pd.isna(speed_kmh) or pd.isna(direction_deg):
        return None
    speed = speed_kmh * predicate.speed_factor
    return bool(
        speed >= predicate.threshold
        and predicate.direction_min <= direction_deg <= predicate.direction_max
    )


def classify_events(records: pd.DataFrame, predicate: EventPredicate) -> pd.Series:
    """Per-record is_event as nullable boolean, order-preserving."""
    speed = records[predicate.speed_field].astype("Float64") * predicate.speed_factor
    direction = records["wind_direction_deg"].astype("Float64")

    is_event = (
        (speed >= predicate.threshold)
        & (direction >= predicate.direction_min)
        & (direction <= predicate.direction_max)
    )
    # Kleene logic would turn (NA & False) into False; absence must win
    absent = speed.isna() | direction.isna()
    is_event = is_event.astype("boolean").mask(absent, pd.NA)
    return is_event.rename("is_event")


def filter_events(records: pd.DataFrame, predicate: EventPredicate) -> pd.DataFrame:
    """Return the event-only subsequence (confirmed events only)."""
    is_event = classify_events(records, predicate)
    return records[is_event.fillna(False).to_numpy(dtype=bool)].reset_index(drop=True)
