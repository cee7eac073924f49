#!/usr/bin/env python3
"""
Campaign Summary Script

Groups a campaign report (Meta/Google export, any column naming) by
development, sums spend and leads, and rates each group's cost per lead.

Exclusions come from EXCLUDED_DEVELOPMENTS / EXCLUDED_PLATFORMS (see
services/settings.py).

Usage:
    python summarize_campaigns.py path/to/campaigns.csv
    python summarize_campaigns.py path/to/campaigns.csv --export grouped.csv
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.campaign import CampaignGroup
from scripts.ingest_csv_leads import read_csv_records
from services.campaign_service import group_and_rate, summarize_groups
from services.csv_export_service import generate_campaigns_csv
from services.settings import load_settings


def print_groups(groups: list[CampaignGroup]) -> None:
    summary = summarize_groups(groups)

    print()
    print("=" * 72)
    print("CAMPAIGN SUMMARY")
    print("=" * 72)
    print(f"{'Development':<22} {'Campaigns':>9} {'Spend':>12} {'Leads':>7} {'CPL':>9}  Rating")
    for group in groups:
        print(f"{group.name:<22} {len(group.campaigns):>9} {group.total_spend:>12.2f} "
              f"{group.total_leads:>7} {group.avg_cpl:>9.2f}  {group.rating.value}")
    print("-" * 72)
    print(f"{'Total':<22} {summary.campaign_count:>9} {summary.total_spend:>12.2f} "
          f"{summary.total_leads:>7} {summary.avg_cpl:>9.2f}  {summary.rating.value}")
    print("=" * 72)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Group campaigns by development and rate cost per lead",
    )

    parser.add_argument(
        "csv_path",
        help="Path to the campaign report CSV"
    )

    parser.add_argument(
        "--export",
        help="Path to write the grouped campaigns as CSV"
    )

    args = parser.parse_args()

    try:
        settings = load_settings()
        records = read_csv_records(args.csv_path)

        groups = group_and_rate(
            records,
            excluded_developments=settings.excluded_developments,
            excluded_platforms=settings.excluded_platforms,
        )
        print_groups(groups)

        if args.export:
            with open(args.export, "w", encoding="utf-8", newline="") as f:
                f.write(generate_campaigns_csv(groups))
            print(f"\nExported {sum(len(g.campaigns) for g in groups)} campaigns to: {args.export}")

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130

    except Exception as e:
        print(f"\nFATAL ERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
