"""
Campaign grouping and rating service.

Pipeline: raw campaign rows → CampaignRecord → drop excluded platforms →
group by resolved development → drop excluded developments → totals, CPL and
rating → sort by total spend (descending).

Excluded platforms are dropped before grouping so their spend and leads never
reach any group's totals.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from domain.campaign import (
    CampaignGroup,
    CampaignRecord,
    CplRating,
    compute_cpl,
    rate_cpl,
    resolve_development_name,
)
from domain.field_resolver import canonical_key, resolve, resolve_text
from services.settings import DEFAULT_EXCLUDED_DEVELOPMENTS, DEFAULT_EXCLUDED_PLATFORMS

logger = logging.getLogger(__name__)

CAMPAIGN_NAME_FIELDS = ("Campaign Name", "Campaign", "Name")
PLATFORM_FIELDS = ("Platform", "Publisher Platform")
SPEND_FIELDS = ("Total Spent", "Spend", "Amount Spent", "Amount spent (GBP)")
LEADS_FIELDS = ("Leads", "Results")
STATUS_FIELDS = ("Delivery Status", "Status")
START_DATE_FIELDS = ("Start Date", "Reporting Starts", "Date")

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

CampaignInput = Union[CampaignRecord, Mapping[str, Any]]


def parse_amount(value: Any) -> float:
    """
    Parse a spend-like value. Currency symbols and thousands separators are
    ignored; unparseable or negative values become 0.

    Example:
        parse_amount("£1,234.50")  # 1234.5
    """

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        match = _NUMBER.search(str(value).replace(",", ""))
        if match is None:
            return 0.0
        amount = float(match.group())
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


def parse_count(value: Any) -> int:
    return int(parse_amount(value))


def normalize_campaign(record: Mapping[str, Any]) -> CampaignRecord:
    """
    Build a CampaignRecord from a raw campaign row.

    Raises:
        TypeError: If record is not a mapping
    """

    return CampaignRecord(
        name=resolve_text(record, CAMPAIGN_NAME_FIELDS),
        platform=resolve_text(record, PLATFORM_FIELDS),
        spend=parse_amount(resolve(record, SPEND_FIELDS, None)),
        leads=parse_count(resolve(record, LEADS_FIELDS, None)),
        status=resolve_text(record, STATUS_FIELDS),
        start_date=resolve_text(record, START_DATE_FIELDS),
        raw=record,
    )


def _as_record(campaign: CampaignInput, index: int) -> CampaignRecord:
    if isinstance(campaign, CampaignRecord):
        return campaign
    if isinstance(campaign, Mapping):
        return normalize_campaign(campaign)
    raise TypeError(
        f"campaign at index {index} must be a mapping or CampaignRecord, got {type(campaign).__name__}"
    )


def group_and_rate(
    campaigns: Sequence[CampaignInput],
    excluded_developments: Iterable[str] = DEFAULT_EXCLUDED_DEVELOPMENTS,
    excluded_platforms: Iterable[str] = DEFAULT_EXCLUDED_PLATFORMS,
) -> List[CampaignGroup]:
    """
    Group campaigns by development and rate each group's CPL.

    Args:
        campaigns: Raw campaign rows or CampaignRecords
        excluded_developments: Development names whose groups are dropped
        excluded_platforms: Platforms whose campaigns are dropped before grouping

    Returns:
        CampaignGroups sorted by total spend, highest first (ties keep first-seen order)

    Raises:
        TypeError: If campaigns is not a list/tuple or contains other types
    """

    if not isinstance(campaigns, (list, tuple)):
        raise TypeError(f"campaigns must be a list, got {type(campaigns).__name__}")

    skip_developments = {canonical_key(name) for name in excluded_developments}
    skip_platforms = {canonical_key(name) for name in excluded_platforms}

    grouped: Dict[str, List[CampaignRecord]] = {}
    dropped_platform = 0

    for index, campaign in enumerate(campaigns):
        record = _as_record(campaign, index)
        if record.platform and canonical_key(record.platform) in skip_platforms:
            dropped_platform += 1
            continue
        grouped.setdefault(record.development, []).append(record)

    groups: List[CampaignGroup] = []
    for name, records in grouped.items():
        if canonical_key(name) in skip_developments:
            continue
        total_spend = sum(record.spend for record in records)
        total_leads = sum(record.leads for record in records)
        avg_cpl = compute_cpl(total_spend, total_leads)
        groups.append(CampaignGroup(
            name=name,
            campaigns=tuple(records),
            total_spend=total_spend,
            total_leads=total_leads,
            avg_cpl=avg_cpl,
            rating=rate_cpl(avg_cpl),
        ))

    groups.sort(key=lambda group: group.total_spend, reverse=True)

    logger.debug(
        "Grouped campaigns",
        extra={
            "campaign_count": len(campaigns),
            "dropped_platform_count": dropped_platform,
            "group_count": len(groups),
        },
    )
    return groups


@dataclass(frozen=True, slots=True)
class CampaignSummary:
    """Overall totals across a set of campaign groups."""

    group_count: int
    campaign_count: int
    total_spend: float
    total_leads: int
    avg_cpl: float
    rating: CplRating


def summarize_groups(groups: Sequence[CampaignGroup]) -> CampaignSummary:
    total_spend = sum(group.total_spend for group in groups)
    total_leads = sum(group.total_leads for group in groups)
    avg_cpl = compute_cpl(total_spend, total_leads)
    return CampaignSummary(
        group_count=len(groups),
        campaign_count=sum(len(group.campaigns) for group in groups),
        total_spend=total_spend,
        total_leads=total_leads,
        avg_cpl=avg_cpl,
        rating=rate_cpl(avg_cpl),
    )


__all__ = [
    "CampaignSummary",
    "group_and_rate",
    "normalize_campaign",
    "parse_amount",
    "parse_count",
    "resolve_development_name",
    "summarize_groups",
]
