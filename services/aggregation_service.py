"""
Aggregation service for lead collections.

Builds the summary view-model behind the dashboards: bucket partition, per-
bucket averages, tier/status/source counts and the sales funnel.

Stats are derived, never stored. They are recomputed from the current lead
collection on every call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from domain.classification import LeadBucket, LeadTier, bucket_for, classify_lead, get_bucket_label
from domain.lead import Lead, LeadSource, LeadStatus

logger = logging.getLogger(__name__)

ALL_SOURCES = "all"

# (label, minimum pipeline stage) in funnel order.
FUNNEL_STAGES: Tuple[Tuple[str, int], ...] = (
    ("Total Leads", LeadStatus.NEW.stage),
    ("Qualified", LeadStatus.ENGAGED.stage),
    ("Viewing Booked", LeadStatus.VIEWING.stage),
    ("Offers Made", LeadStatus.OFFER.stage),
    ("Closed/Won", LeadStatus.CLOSED.stage),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def safe_average(total: float, count: int) -> int:
    """Rounded mean; 0 for an empty group."""

    if count == 0:
        return 0
    return round_half_up(total / count)


def safe_percentage(part: int, whole: int) -> float:
    """100 * part / whole to one decimal; 0 when whole is 0."""

    if whole == 0:
        return 0.0
    return round(100 * part / whole, 1)


@dataclass(frozen=True, slots=True)
class BucketSummary:
    bucket: LeadBucket
    label: str
    count: int
    avg_intent: int
    avg_quality: int


@dataclass(frozen=True, slots=True)
class FunnelStage:
    name: str
    count: int
    percentage: float
    conversion_from_previous: float


@dataclass(frozen=True, slots=True)
class AggregateStats:
    """
    Summary of a lead collection.

    `source_filter` is None when every lead was included.
    """

    total: int
    source_filter: Optional[LeadSource]
    buckets: Tuple[BucketSummary, ...]
    tier_counts: Dict[LeadTier, int]
    status_counts: Dict[LeadStatus, int]
    source_counts: Dict[LeadSource, int]
    funnel: Tuple[FunnelStage, ...]
    avg_intent: int
    avg_quality: int

    def bucket(self, bucket: LeadBucket) -> BucketSummary:
        for summary in self.buckets:
            if summary.bucket == bucket:
                return summary
        raise KeyError(bucket)

    @property
    def bucket_counts(self) -> Dict[LeadBucket, int]:
        return {summary.bucket: summary.count for summary in self.buckets}


def parse_source_filter(source: Union[None, str, LeadSource]) -> Optional[LeadSource]:
    """
    Resolve a source filter. None and "all" mean no filter.

    Raises:
        ValueError: If source is not a known channel
    """

    if source is None or isinstance(source, LeadSource):
        return source
    text = str(source).strip().lower()
    if text in ("", ALL_SOURCES):
        return None
    try:
        return LeadSource(text)
    except ValueError:
        valid = ", ".join([ALL_SOURCES] + [s.value for s in LeadSource])
        raise ValueError(f"Invalid source filter '{source}'. Must be one of: {valid}") from None


def filter_by_source(leads: Iterable[Lead], source: Union[None, str, LeadSource]) -> List[Lead]:
    selected = parse_source_filter(source)
    if selected is None:
        return list(leads)
    return [lead for lead in leads if lead.source == selected]


def build_funnel(leads: Sequence[Lead]) -> Tuple[FunnelStage, ...]:
    """
    Sales funnel with stage-over-stage conversion.

    A lead counts toward every stage up to its current status, so counts never
    increase down the funnel.
    """

    total = len(leads)
    stages: List[FunnelStage] = []
    previous: Optional[int] = None

    for name, min_stage in FUNNEL_STAGES:
        count = sum(1 for lead in leads if lead.status.stage >= min_stage)
        if previous is None:
            conversion = 100.0 if total else 0.0
        else:
            conversion = safe_percentage(count, previous)
        stages.append(FunnelStage(
            name=name,
            count=count,
            percentage=safe_percentage(count, total),
            conversion_from_previous=conversion,
        ))
        previous = count

    return tuple(stages)


def aggregate(leads: Sequence[Lead], source: Union[None, str, LeadSource] = None) -> AggregateStats:
    """
    Aggregate a lead collection, optionally restricted to one source channel.

    Args:
        leads: Normalized leads
        source: None / "all" for every lead, or a LeadSource (or its value)

    Returns:
        AggregateStats over the selected leads

    Raises:
        TypeError: If leads is not a list/tuple, or an element is not a Lead
        ValueError: If source is not a known channel
    """

    if not isinstance(leads, (list, tuple)):
        raise TypeError(f"leads must be a list of Lead, got {type(leads).__name__}")
    for index, lead in enumerate(leads):
        if not isinstance(lead, Lead):
            raise TypeError(f"lead at index {index} must be a Lead, got {type(lead).__name__}")

    source_filter = parse_source_filter(source)
    selected = filter_by_source(leads, source_filter)

    tier_counts: Dict[LeadTier, int] = {tier: 0 for tier in LeadTier}
    status_counts: Dict[LeadStatus, int] = {status: 0 for status in LeadStatus}
    source_counts: Dict[LeadSource, int] = {s: 0 for s in LeadSource}
    bucket_totals: Dict[LeadBucket, List[int]] = {bucket: [0, 0, 0] for bucket in LeadBucket}
    intent_sum = 0
    quality_sum = 0

    for lead in selected:
        tier = classify_lead(lead)
        tier_counts[tier] += 1
        status_counts[lead.status] += 1
        source_counts[lead.source] += 1

        totals = bucket_totals[bucket_for(tier)]
        totals[0] += 1
        totals[1] += lead.intent_score
        totals[2] += lead.quality_score

        intent_sum += lead.intent_score
        quality_sum += lead.quality_score

    buckets = tuple(
        BucketSummary(
            bucket=bucket,
            label=get_bucket_label(bucket),
            count=count,
            avg_intent=safe_average(intent_total, count),
            avg_quality=safe_average(quality_total, count),
        )
        for bucket, (count, intent_total, quality_total) in bucket_totals.items()
    )

    total = len(selected)
    logger.debug(
        "Aggregated lead stats",
        extra={
            "lead_count": len(leads),
            "selected_count": total,
            "source_filter": source_filter.value if source_filter else ALL_SOURCES,
        },
    )

    return AggregateStats(
        total=total,
        source_filter=source_filter,
        buckets=buckets,
        tier_counts=tier_counts,
        status_counts=status_counts,
        source_counts=source_counts,
        funnel=build_funnel(selected),
        avg_intent=safe_average(intent_sum, total),
        avg_quality=safe_average(quality_sum, total),
    )


__all__ = [
    "ALL_SOURCES",
    "AggregateStats",
    "BucketSummary",
    "FunnelStage",
    "aggregate",
    "build_funnel",
    "filter_by_source",
    "parse_source_filter",
    "round_half_up",
    "safe_average",
    "safe_percentage",
]
