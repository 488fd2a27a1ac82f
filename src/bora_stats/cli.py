"""CLI entry point for bora-stats."""

import argparse
import json
import logging
import sys
from pathlib import Path

from bora_stats.config import DATA_DIR, STATION_TIMEZONE

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="bora-stats",
        description="Bora wind statistics from hourly station records",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # analyze subcommand
    analyze_parser = subparsers.add_parser("analyze", help="Run the analysis pipeline")
    analyze_parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="Directory of yearly CSV extracts")
    analyze_parser.add_argument(
        "--predicate",
        default="kmh36",
        help='Predicate variant (kmh36, gust_ms10) or "all"',
    )
    analyze_parser.add_argument("--timezone", default=STATION_TIMEZONE, help="Station time zone")
    analyze_parser.add_argument("--field", default="temperature_c", help="Secondary field for event/non-event means")
    analyze_parser.add_argument("--db", type=Path, default=None, help="Store output tables in this DuckDB file")
    analyze_parser.add_argument("--json", action="store_true", help="Print summaries as JSON")

    # predicates subcommand
    subparsers.add_parser("predicates", help="List predicate variants")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    from bora_stats.errors import BoraStatsError

    try:
        if args.command == "analyze":
            _analyze(args)
        elif args.command == "predicates":
            _predicates()
    except BoraStatsError as e:
        logger.error("%s", e)
        sys.exit(1)


def _predicates() -> None:
    from bora_stats.compute.events import PREDICATES

    for name, p in PREDICATES.items():
        print(f"{name:<10} {p.description}")


def _analyze(args: argparse.Namespace) -> None:
    from bora_stats.compute.events import PREDICATES, get_predicate
    from bora_stats.compute.pipeline import run_analysis
    from bora_stats.ingest.yearly_csv import load_year_tables

    if args.predicate == "all":
        predicates = list(PREDICATES.values())
    else:
        predicates = [get_predicate(args.predicate)]

    tables = load_year_tables(args.data_dir)
    logger.info("Loaded %d yearly tables from %s", len(tables), args.data_dir)

    results = [
        run_analysis(tables, predicate=p, timezone=args.timezone, secondary_field=args.field)
        for p in predicates
    ]

    report = results[0].report
    logger.info(
        "Rows: %d in, %d kept, %d bad year tag, %d duplicates, %d conflicting keys",
        report.rows_in, report.rows_out, report.invalid_year_rows,
        report.duplicate_rows, report.conflicting_keys,
    )

    if args.db is not None:
        from bora_stats.db.connection import open_export
        from bora_stats.db.queries import store_analysis

        conn = open_export(args.db)
        try:
            for result in results:
                store_analysis(conn, result)
        finally:
            conn.close()
        logger.info("Stored output tables in %s", args.db)

    if args.json:
        print(json.dumps([r.summary().model_dump(mode="json") for r in results], indent=2))
        return

    for result in results:
        _print_summary(result)


def _print_summary(result) -> None:
    parity = result.parity
    trend = result.trend

    print(f"== {result.predicate} ==")
    print(f"Event hours: {len(result.events):,}   Streaks: {len(result.streaks):,}")

    if parity.insufficient_data:
        print("Streak parity: insufficient data")
    else:
        print(
            f"Streak parity: {parity.odd_count} odd / {parity.even_count} even, "
            f"p(odd)={parity.proportion:.3f} "
            f"[{parity.ci_low:.3f}, {parity.ci_high:.3f}], p-value={parity.p_value:.3g}"
        )

    if trend.insufficient_data:
        print("Yearly trend: insufficient data")
    else:
        p_value = "n/a" if trend.slope_p_value is None else f"{trend.slope_p_value:.3g}"
        print(
            f"Yearly trend: slope={trend.slope:+.2f}/year "
            f"(se {trend.slope_stderr:.2f}), p-value={p_value}"
        )

    print()
    print(result.yearly_counts.to_string(index=False))
    print()


if __name__ == "__main__":
    main()
