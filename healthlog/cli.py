"""CLI commands for healthlog."""

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional

from healthlog.config import settings
from healthlog.models import LogBundle
from healthlog.services.import_service import BackupFormatError, load_backup_file
from healthlog.services.insights_service import InsightsReport, insights_service
from healthlog.services.prediction_service import prediction_service


def positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")
    return number


def read_backup(path: str) -> LogBundle:
    """Load a backup or exit with an error message."""
    try:
        return load_backup_file(path)
    except FileNotFoundError:
        print(f"Error: Backup file '{path}' not found.")
        sys.exit(1)
    except OSError as e:
        print(f"Error: Cannot read backup file '{path}': {e.strerror or e}")
        sys.exit(1)
    except BackupFormatError as e:
        print(f"Error: {e}")
        sys.exit(1)


def print_report(report: InsightsReport) -> None:
    summary = report.summary
    print(f"Window: {report.window_hours:g} hours")
    print(f"Days analyzed: {summary.total_days} "
          f"({summary.symptom_days} with symptoms, {summary.symptom_free_days} symptom-free)")
    print(f"Most consumed: {summary.top_ingredient}")
    print(f"Most common symptom: {summary.top_symptom}")
    print()

    if not report.enhanced_correlations:
        print("No significant correlations found yet.")
    for i, corr in enumerate(report.enhanced_correlations, start=1):
        print(f"{i}. {corr.ingredient} -> {corr.symptom}: {corr.percentage}% "
              f"({corr.occurrences}/{corr.total}), avg delay {corr.average_delay}, "
              f"{corr.confidence} confidence")
        if corr.risk_factors:
            print(f"   risk factors: {', '.join(corr.risk_factors)}")
        if corr.protective_factors:
            print(f"   protective factors: {', '.join(corr.protective_factors)}")

    for positive in report.positive_correlations:
        print(f"+ {positive.ingredient} -> {positive.improvement}: {positive.percentage}% "
              f"({positive.occurrences}/{positive.total})")

    for warning in report.allergy_warnings:
        print(f"! {warning.allergy} ({warning.severity}): {len(warning.matches)} recent meals. "
              f"{warning.action}")


def analyze(
    path: str,
    window_hours: float,
    days: Optional[int] = None,
    today: Optional[date] = None,
    as_json: bool = False,
) -> None:
    """Analyze a backup file and print the report."""
    bundle = read_backup(path)
    report = insights_service.analyze(
        bundle,
        today=today or date.today(),
        window_hours=window_hours,
        date_range_days=days,
    )
    if as_json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report)


def predict(path: str, ingredients: List[str], window_hours: float, as_json: bool = False) -> None:
    """Predict the outcome of a meal from the history in a backup file."""
    bundle = read_backup(path)
    correlations = insights_service.correlations.build_enhanced_correlations(bundle, window_hours)
    positives = insights_service.correlations.build_positive_correlations(bundle, window_hours)
    prediction = prediction_service.predict_meal(
        ingredients, correlations, positives, bundle.allergies
    )

    if as_json:
        print(prediction.model_dump_json(indent=2))
        return

    print(f"Risk level: {prediction.overall_risk_level}")
    for warning in prediction.allergy_warnings:
        print(f"! {warning}")
    for p in prediction.symptom_predictions:
        print(f"- {p.symptom}: {p.probability}% ({p.severity}) from {', '.join(p.ingredients)}")
    print(prediction.recommendation)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="healthlog insights CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Find food-symptom correlations in a backup file"
    )
    analyze_parser.add_argument("backup", help="Path to a JSON backup")
    analyze_parser.add_argument(
        "--window", type=positive_float, default=settings.default_window_hours,
        help="Hours between a meal and a symptom (default: %(default)s)",
    )
    analyze_parser.add_argument(
        "--days", type=int, help="Only analyze the last N days (default: all time)"
    )
    analyze_parser.add_argument(
        "--today", type=date.fromisoformat, help="Reference date YYYY-MM-DD (default: today)"
    )
    analyze_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # predict command
    predict_parser = subparsers.add_parser(
        "predict", help="Predict how a meal is likely to go"
    )
    predict_parser.add_argument("backup", help="Path to a JSON backup")
    predict_parser.add_argument("ingredients", nargs="+", help="Ingredients of the meal")
    predict_parser.add_argument(
        "--window", type=positive_float, default=settings.default_window_hours,
        help="Hours between a meal and a symptom (default: %(default)s)",
    )
    predict_parser.add_argument("--json", action="store_true", help="Print JSON output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "analyze":
        analyze(args.backup, args.window, args.days, args.today, args.json)
    elif args.command == "predict":
        predict(args.backup, args.ingredients, args.window, args.json)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
