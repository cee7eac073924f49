"""
CSV export service for leads and campaign groups.

Every value is double-quote wrapped and embedded quotes are doubled, so the
output opens cleanly in Excel and Google Sheets.

Security:
- CSV Injection Prevention: with `sanitize=True`, leading formula characters
  are stripped from every text field
- Security Logging: logs when dangerous characters are stripped
"""

from __future__ import annotations

import csv
import logging
from io import StringIO
from typing import Iterable, List, Sequence

from domain.campaign import CampaignGroup
from domain.lead import Lead

logger = logging.getLogger(__name__)

LEAD_CSV_COLUMNS = [
    "Date Added",
    "Name",
    "Number",
    "Email",
    "Budget Range",
    "Preferred Bedrooms",
    "Purchase in 28 Days?",
    "Development Name",
    "Broker Needed?",
    "Agent Transcription",
    "LinkedIn/Company Profile",
    "Buyer Summary",
    "Status",
]

CAMPAIGN_CSV_COLUMNS = [
    "Development",
    "Campaign",
    "Platform",
    "Spend",
    "Leads",
    "CPL",
    "Status",
    "Start Date",
]

_DANGEROUS_LEADING_CHARS = {"=", "+", "-", "@", "\t", "\r"}


def sanitize_csv_field(value: str | None, field_name: str = "unknown") -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Strips leading characters that can trigger formula execution in Excel/Sheets:
    =, +, -, @, tab, carriage return

    Example:
        sanitize_csv_field("=1+1", "Name")
        # Returns "1+1" and logs warning about stripped "=" character

        sanitize_csv_field("Normal Name", "Name")
        # Returns "Normal Name" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value).strip()
    original_text = text

    stripped_chars = []
    while text and text[0] in _DANGEROUS_LEADING_CHARS:
        stripped_chars.append(text[0])
        text = text[1:]

    if stripped_chars:
        logger.warning(
            f"CSV injection character(s) stripped from field '{field_name}'",
            extra={
                "field_name": field_name,
                "stripped_characters": "".join(stripped_chars),
                "original_value": original_text[:100],
                "sanitized_value": text[:100],
                "modification_type": "csv_injection_prevention"
            }
        )

    return text


def _write_csv(columns: Sequence[str], rows: Iterable[Sequence[str]], sanitize: bool) -> str:
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        if sanitize:
            row = [sanitize_csv_field(value, column) for column, value in zip(columns, row)]
        writer.writerow(row)
    return output.getvalue()


def lead_to_csv_row(lead: Lead) -> List[str]:
    """Convert a Lead to values in LEAD_CSV_COLUMNS order."""

    return [
        lead.date_added,
        lead.name,
        lead.phone,
        lead.email,
        lead.budget,
        lead.bedrooms,
        lead.purchase_in_28_days,
        lead.development_name,
        lead.broker_needed,
        lead.agent_transcription,
        lead.linkedin_profile,
        lead.buyer_summary,
        lead.status.value,
    ]


def generate_leads_csv(leads: Sequence[Lead], sanitize: bool = False) -> str:
    """
    Generate CSV content for a list of leads.

    Args:
        leads: Leads to export, in output order
        sanitize: Strip leading formula characters from every field

    Returns:
        CSV content as a string (header row only for an empty list)
    """

    return _write_csv(LEAD_CSV_COLUMNS, (lead_to_csv_row(lead) for lead in leads), sanitize)


def _campaign_rows(groups: Sequence[CampaignGroup]) -> Iterable[List[str]]:
    for group in groups:
        for campaign in group.campaigns:
            yield [
                group.name,
                campaign.name,
                campaign.platform,
                f"{campaign.spend:.2f}",
                str(campaign.leads),
                f"{campaign.cpl:.2f}",
                campaign.status,
                campaign.start_date,
            ]


def generate_campaigns_csv(groups: Sequence[CampaignGroup], sanitize: bool = False) -> str:
    """
    Generate CSV content with one row per campaign, grouped by development.

    Spend and CPL are written with two decimals.
    """

    return _write_csv(CAMPAIGN_CSV_COLUMNS, _campaign_rows(groups), sanitize)


__all__ = [
    "CAMPAIGN_CSV_COLUMNS",
    "LEAD_CSV_COLUMNS",
    "generate_campaigns_csv",
    "generate_leads_csv",
    "lead_to_csv_row",
    "sanitize_csv_field",
]
