"""Exception types for whole-pipeline failures.

Per-row data-quality problems are never raised; they are counted and logged.
"""


class BoraStatsError(Exception):
    """Base class for errors reported to the caller."""


class NoInputDataError(BoraStatsError):
    """No input tables, no matching files, or every row was rejected."""


class InvalidPredicateError(BoraStatsError):
    """Unknown predicate name or inconsistent predicate parameters."""
