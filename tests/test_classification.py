"""
Tests for `domain/classification.py`.

Covers rules:
- classify is total over 0..100 x 0..100 and every boundary is inclusive.
- Every tier has a static config and maps to exactly one bucket.
- Priority sort is stable: hot first, cold last.
"""

from __future__ import annotations

import pytest

from domain.classification import (
    LeadBucket,
    LeadTier,
    all_classification_configs,
    bucket_for,
    classify,
    combined_score,
    get_bucket_label,
    get_classification_config,
    sort_leads_by_priority,
)
from domain.lead import Lead


def test_classify_is_total_over_score_range() -> None:
    """Verify every (intent, quality) pair yields one tier with a config."""

    for intent in range(0, 101):
        for quality in range(0, 101):
            tier = classify(intent, quality)
            assert tier in LeadTier
            assert get_classification_config(tier) is not None


@pytest.mark.parametrize(
    "intent, quality, expected",
    [
        (80, 80, LeadTier.HOT),
        (100, 100, LeadTier.HOT),
        (79, 80, LeadTier.STAR),
        (60, 80, LeadTier.STAR),
        (59, 80, LeadTier.COLD),
        (80, 79, LeadTier.LIGHTNING),
        (80, 50, LeadTier.LIGHTNING),
        (85, 70, LeadTier.LIGHTNING),
        (80, 49, LeadTier.WARNING),
        (60, 60, LeadTier.VERIFIED),
        (79, 79, LeadTier.VERIFIED),
        (60, 59, LeadTier.COLD),
        (60, 49, LeadTier.WARNING),
        (60, 0, LeadTier.WARNING),
        (59, 59, LeadTier.COLD),
        (0, 0, LeadTier.COLD),
    ],
)
def test_classify_boundaries(intent: int, quality: int, expected: LeadTier) -> None:
    assert classify(intent, quality) == expected


@pytest.mark.parametrize(
    "tier, bucket",
    [
        (LeadTier.HOT, LeadBucket.HOT),
        (LeadTier.STAR, LeadBucket.QUALITY),
        (LeadTier.LIGHTNING, LeadBucket.QUALITY),
        (LeadTier.VERIFIED, LeadBucket.WARM),
        (LeadTier.WARNING, LeadBucket.WARM),
        (LeadTier.COLD, LeadBucket.COLD),
    ],
)
def test_tier_bucket_mapping(tier: LeadTier, bucket: LeadBucket) -> None:
    assert bucket_for(tier) == bucket


def test_classification_config_sla_labels() -> None:
    assert get_classification_config(LeadTier.HOT).sla == "Contact within 1 hour"
    assert get_classification_config(LeadTier.COLD).sla == "Automated nurture only"
    assert get_classification_config("star").label == "Star Quality"  # type: ignore[arg-type]


def test_all_classification_configs_ordered_by_priority() -> None:
    tiers = [config.tier for config in all_classification_configs()]
    assert tiers == [
        LeadTier.HOT,
        LeadTier.STAR,
        LeadTier.LIGHTNING,
        LeadTier.VERIFIED,
        LeadTier.WARNING,
        LeadTier.COLD,
    ]


def test_bucket_labels() -> None:
    assert get_bucket_label(LeadBucket.QUALITY) == "High Quality"


def test_sort_leads_by_priority_is_stable() -> None:
    cold_a = Lead(id="a", name="A", intent_score=10, quality_score=10)
    hot = Lead(id="b", name="B", intent_score=90, quality_score=90)
    cold_b = Lead(id="c", name="C", intent_score=20, quality_score=20)
    star = Lead(id="d", name="D", intent_score=65, quality_score=85)

    ordered = sort_leads_by_priority([cold_a, hot, cold_b, star])

    assert [lead.id for lead in ordered] == ["b", "d", "a", "c"]


def test_combined_score() -> None:
    assert combined_score(Lead(id="a", name="A", intent_score=85, quality_score=70)) == 77.5
