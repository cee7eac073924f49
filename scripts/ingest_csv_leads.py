#!/usr/bin/env python3
"""
CSV Lead Ingestion Script

Reads a lead export (any column naming), normalizes every row, classifies it
and prints a summary:
- Bucket counts and average scores
- Tier and source breakdown
- Sales funnel with stage-over-stage conversion

Usage:
    python ingest_csv_leads.py path/to/leads.csv
    python ingest_csv_leads.py path/to/leads.csv --source meta_campaign
    python ingest_csv_leads.py path/to/leads.csv --export normalized.csv --sanitize
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Any

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.classification import sort_leads_by_priority
from domain.lead import Lead
from services.aggregation_service import AggregateStats, aggregate, filter_by_source
from services.csv_export_service import generate_leads_csv
from services.lead_normalizer import normalize_leads


def read_csv_records(csv_path: str) -> list[dict[str, Any]]:
    """
    Read every row of a CSV file as a raw record.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV has no header row
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(csv_file, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValueError("CSV file is empty or malformed")
        return [dict(row) for row in reader]


def print_summary(stats: AggregateStats) -> None:
    """Print bucket, tier, source and funnel statistics."""
    print()
    print("=" * 60)
    print("LEAD SUMMARY")
    if stats.source_filter is not None:
        print(f"Source filter:    {stats.source_filter.value}")
    print("=" * 60)
    print(f"Total Leads:      {stats.total}")
    print(f"Avg Intent:       {stats.avg_intent}")
    print(f"Avg Quality:      {stats.avg_quality}")
    print()

    print("Buckets:")
    for summary in stats.buckets:
        print(f"  {summary.label:<14} {summary.count:>5}   "
              f"intent {summary.avg_intent:>3}   quality {summary.avg_quality:>3}")
    print()

    print("Tiers:")
    for tier, count in stats.tier_counts.items():
        print(f"  {tier.value:<14} {count:>5}")
    print()

    print("Sources:")
    for source, count in stats.source_counts.items():
        if count:
            print(f"  {source.value:<14} {count:>5}")
    print()

    print("Funnel:")
    for stage in stats.funnel:
        print(f"  {stage.name:<16} {stage.count:>5}  "
              f"{stage.percentage:>5.1f}%  (from previous {stage.conversion_from_previous:.1f}%)")
    print("=" * 60)


def print_priority_leads(leads: list[Lead], limit: int = 10) -> None:
    if not leads:
        return
    print()
    print(f"Top {min(limit, len(leads))} leads by priority:")
    for lead in sort_leads_by_priority(leads)[:limit]:
        print(f"  {lead.name:<30} intent {lead.intent_score:>3}  quality {lead.quality_score:>3}  {lead.source.value}")


def save_export(leads: list[Lead], output_path: str, sanitize: bool) -> None:
    """Write leads to a CSV file."""
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(generate_leads_csv(leads, sanitize=sanitize))

    print(f"\nExported {len(leads)} leads to: {output_path}")


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Normalize, classify and summarize leads from a CSV export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summarize every lead
  python ingest_csv_leads.py leads.csv

  # Only leads from one channel
  python ingest_csv_leads.py leads.csv --source rightmove

  # Write the normalized leads back out
  python ingest_csv_leads.py leads.csv --export normalized.csv
        """
    )

    parser.add_argument(
        "csv_path",
        help="Path to the CSV file to ingest"
    )

    parser.add_argument(
        "--source",
        default="all",
        help="Restrict the summary and export to one source channel (default: all)"
    )

    parser.add_argument(
        "--export",
        help="Path to write the normalized leads as CSV"
    )

    parser.add_argument(
        "--sanitize",
        action="store_true",
        help="Strip leading formula characters from exported fields"
    )

    args = parser.parse_args()

    try:
        print(f"Reading CSV: {args.csv_path}")
        records = read_csv_records(args.csv_path)

        leads = normalize_leads(records)
        stats = aggregate(leads, source=args.source)
        selected = filter_by_source(leads, args.source)

        print_summary(stats)
        print_priority_leads(selected)

        if args.export:
            save_export(selected, args.export, args.sanitize)

        return 0

    except KeyboardInterrupt:
        print("\n\nIngestion interrupted by user")
        return 130

    except Exception as e:
        print(f"\nFATAL ERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
