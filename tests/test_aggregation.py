"""
Tests for `services/aggregation_service.py`.

Covers rules:
- Bucket partition is exhaustive and exclusive (counts sum to the lead total).
- Averages round half up and are 0 for empty buckets.
- Funnel stages are cumulative with divide-by-zero guards.
- Source filtering reuses the same classifier and never exceeds the unfiltered totals.
"""

from __future__ import annotations

import pytest

from domain.classification import LeadBucket, LeadTier
from domain.lead import Lead, LeadSource, LeadStatus
from services.aggregation_service import (
    aggregate,
    build_funnel,
    parse_source_filter,
    round_half_up,
    safe_average,
    safe_percentage,
)
from services.lead_normalizer import normalize_leads


def make_lead(
    lead_id: str,
    intent: int,
    quality: int,
    status: LeadStatus = LeadStatus.NEW,
    source: LeadSource = LeadSource.DIRECT_WEB,
) -> Lead:
    return Lead(
        id=lead_id,
        name=lead_id,
        intent_score=intent,
        quality_score=quality,
        status=status,
        source=source,
    )


@pytest.fixture
def leads() -> list[Lead]:
    return [
        make_lead("hot-1", 90, 85, LeadStatus.CLOSED, LeadSource.META_CAMPAIGN),
        make_lead("hot-2", 81, 80, LeadStatus.OFFER, LeadSource.RIGHTMOVE),
        make_lead("star", 65, 90, LeadStatus.VIEWING, LeadSource.META_CAMPAIGN),
        make_lead("lightning", 85, 70, LeadStatus.ENGAGED, LeadSource.GOOGLE_ADS),
        make_lead("verified", 70, 65, LeadStatus.ENGAGED, LeadSource.META_CAMPAIGN),
        make_lead("warning", 75, 30, LeadStatus.NEW, LeadSource.ZOOPLA),
        make_lead("cold", 20, 20, LeadStatus.NEW, LeadSource.DIRECT_WEB),
    ]


def test_bucket_counts_partition_all_leads(leads: list[Lead]) -> None:
    stats = aggregate(leads)

    assert stats.total == 7
    assert stats.bucket_counts == {
        LeadBucket.HOT: 2,
        LeadBucket.QUALITY: 2,
        LeadBucket.WARM: 2,
        LeadBucket.COLD: 1,
    }
    assert sum(stats.bucket_counts.values()) == len(leads)


def test_tier_counts(leads: list[Lead]) -> None:
    stats = aggregate(leads)

    assert stats.tier_counts[LeadTier.HOT] == 2
    assert stats.tier_counts[LeadTier.STAR] == 1
    assert stats.tier_counts[LeadTier.LIGHTNING] == 1
    assert stats.tier_counts[LeadTier.VERIFIED] == 1
    assert stats.tier_counts[LeadTier.WARNING] == 1
    assert stats.tier_counts[LeadTier.COLD] == 1


def test_bucket_averages_round_half_up(leads: list[Lead]) -> None:
    stats = aggregate(leads)

    hot = stats.bucket(LeadBucket.HOT)
    # intent (90 + 81) / 2 = 85.5 → 86; quality (85 + 80) / 2 = 82.5 → 83
    assert hot.avg_intent == 86
    assert hot.avg_quality == 83
    assert hot.label == "Hot"


def test_empty_bucket_average_is_zero() -> None:
    stats = aggregate([make_lead("cold", 10, 10)])

    hot = stats.bucket(LeadBucket.HOT)
    assert hot.count == 0
    assert hot.avg_intent == 0
    assert hot.avg_quality == 0


def test_empty_collection_is_zeroed() -> None:
    stats = aggregate([])

    assert stats.total == 0
    assert stats.avg_intent == 0
    assert sum(stats.bucket_counts.values()) == 0
    assert all(stage.count == 0 for stage in stats.funnel)
    assert all(stage.percentage == 0.0 for stage in stats.funnel)
    assert all(stage.conversion_from_previous == 0.0 for stage in stats.funnel)


def test_funnel_stages_are_cumulative(leads: list[Lead]) -> None:
    funnel = aggregate(leads).funnel

    assert [stage.name for stage in funnel] == [
        "Total Leads",
        "Qualified",
        "Viewing Booked",
        "Offers Made",
        "Closed/Won",
    ]
    assert [stage.count for stage in funnel] == [7, 5, 3, 2, 1]
    assert funnel[0].percentage == 100.0
    assert funnel[0].conversion_from_previous == 100.0
    assert funnel[1].percentage == 71.4
    assert funnel[2].conversion_from_previous == 60.0
    assert funnel[4].conversion_from_previous == 50.0


def test_funnel_conversion_guards_zero_previous_stage() -> None:
    funnel = build_funnel([make_lead("a", 10, 10), make_lead("b", 10, 10)])

    assert [stage.count for stage in funnel] == [2, 0, 0, 0, 0]
    assert funnel[1].conversion_from_previous == 0.0
    assert funnel[2].conversion_from_previous == 0.0


def test_status_and_source_counts(leads: list[Lead]) -> None:
    stats = aggregate(leads)

    assert stats.status_counts[LeadStatus.ENGAGED] == 2
    assert stats.status_counts[LeadStatus.CLOSED] == 1
    assert stats.source_counts[LeadSource.META_CAMPAIGN] == 3
    assert stats.source_counts[LeadSource.ONTHEMARKET] == 0


def test_source_filter_counts_never_exceed_unfiltered(leads: list[Lead]) -> None:
    unfiltered = aggregate(leads)

    for source in LeadSource:
        filtered = aggregate(leads, source=source)
        assert sum(filtered.bucket_counts.values()) <= sum(unfiltered.bucket_counts.values())
        assert filtered.total == unfiltered.source_counts[source]


def test_source_filter_all_matches_unfiltered(leads: list[Lead]) -> None:
    assert aggregate(leads, source="all") == aggregate(leads)


def test_source_filter_by_value(leads: list[Lead]) -> None:
    stats = aggregate(leads, source="meta_campaign")

    assert stats.source_filter == LeadSource.META_CAMPAIGN
    assert stats.total == 3
    assert stats.bucket_counts[LeadBucket.HOT] == 1
    assert stats.bucket_counts[LeadBucket.QUALITY] == 1
    assert stats.bucket_counts[LeadBucket.WARM] == 1


def test_invalid_source_filter_raises() -> None:
    with pytest.raises(ValueError):
        parse_source_filter("tiktok")


def test_aggregate_rejects_non_list() -> None:
    with pytest.raises(TypeError):
        aggregate(None)  # type: ignore[arg-type]


def test_aggregate_rejects_non_lead_elements() -> None:
    leads = normalize_leads([{"Name": "A"}])

    with pytest.raises(TypeError, match="index 1"):
        aggregate([leads[0], {"intent_score": 90}])  # type: ignore[list-item]


def test_normalize_then_aggregate_is_idempotent() -> None:
    records = [
        {"Email": "a@b.com", "Score": "85", "Intent": "hot", "Budget Match": "Yes", "Source": "Facebook"},
        {"Name": "B", "Score": "30", "Status": "Offer Made", "Platform": "Zoopla"},
        {"Name": "C", "Score": "n/a"},
    ]

    first = aggregate(normalize_leads(records))
    second = aggregate(normalize_leads(records))

    assert first == second


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (2.4, 2), (0.0, 0)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_safe_helpers_guard_zero() -> None:
    assert safe_average(100, 0) == 0
    assert safe_percentage(5, 0) == 0.0
    assert safe_percentage(1, 3) == 33.3
