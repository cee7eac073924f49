"""
Domain: Lead classification tiers.

Tiers are a pure function of (intent_score, quality_score). Rules are evaluated
in this order and every boundary is inclusive:

  - HOT:       intent >= 80 AND quality >= 80
  - STAR:      quality >= 80 AND intent >= 60
  - LIGHTNING: intent >= 80 AND quality >= 50
  - VERIFIED:  intent >= 60 AND quality >= 60
  - WARNING:   intent >= 60 AND quality < 50
  - COLD:      everything else

Each tier collapses into exactly one bucket:

  - hot     ← HOT
  - quality ← STAR, LIGHTNING
  - warm    ← VERIFIED, WARNING
  - cold    ← COLD
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping

from .lead import Lead

HIGH_THRESHOLD = 80
MID_THRESHOLD = 60
FLOOR_THRESHOLD = 50


class LeadTier(str, Enum):
    HOT = "hot"
    STAR = "star"
    LIGHTNING = "lightning"
    VERIFIED = "verified"
    WARNING = "warning"
    COLD = "cold"


class LeadBucket(str, Enum):
    HOT = "hot"
    QUALITY = "quality"
    WARM = "warm"
    COLD = "cold"


@dataclass(frozen=True, slots=True)
class ClassificationConfig:
    """Static display and SLA metadata for a tier."""

    tier: LeadTier
    label: str
    sla: str
    bucket: LeadBucket
    priority: int


_CONFIGS: Mapping[LeadTier, ClassificationConfig] = MappingProxyType({
    LeadTier.HOT: ClassificationConfig(
        tier=LeadTier.HOT,
        label="Hot Lead",
        sla="Contact within 1 hour",
        bucket=LeadBucket.HOT,
        priority=1,
    ),
    LeadTier.STAR: ClassificationConfig(
        tier=LeadTier.STAR,
        label="Star Quality",
        sla="Contact within 4 hours",
        bucket=LeadBucket.QUALITY,
        priority=2,
    ),
    LeadTier.LIGHTNING: ClassificationConfig(
        tier=LeadTier.LIGHTNING,
        label="High Intent",
        sla="Contact within 2 hours",
        bucket=LeadBucket.QUALITY,
        priority=3,
    ),
    LeadTier.VERIFIED: ClassificationConfig(
        tier=LeadTier.VERIFIED,
        label="Verified",
        sla="Contact within 24 hours",
        bucket=LeadBucket.WARM,
        priority=4,
    ),
    LeadTier.WARNING: ClassificationConfig(
        tier=LeadTier.WARNING,
        label="Warning",
        sla="Review within 24 hours",
        bucket=LeadBucket.WARM,
        priority=5,
    ),
    LeadTier.COLD: ClassificationConfig(
        tier=LeadTier.COLD,
        label="Cold",
        sla="Automated nurture only",
        bucket=LeadBucket.COLD,
        priority=6,
    ),
})

_BUCKET_LABELS: Mapping[LeadBucket, str] = MappingProxyType({
    LeadBucket.HOT: "Hot",
    LeadBucket.QUALITY: "High Quality",
    LeadBucket.WARM: "Warm",
    LeadBucket.COLD: "Cold",
})


def classify(intent_score: int, quality_score: int) -> LeadTier:
    """
    Resolve the tier for a pair of scores.

    Total over 0..100 x 0..100: the final branch catches every pair the earlier
    rules do not.
    """

    if intent_score >= HIGH_THRESHOLD and quality_score >= HIGH_THRESHOLD:
        return LeadTier.HOT
    if quality_score >= HIGH_THRESHOLD and intent_score >= MID_THRESHOLD:
        return LeadTier.STAR
    if intent_score >= HIGH_THRESHOLD and quality_score >= FLOOR_THRESHOLD:
        return LeadTier.LIGHTNING
    if intent_score >= MID_THRESHOLD and quality_score >= MID_THRESHOLD:
        return LeadTier.VERIFIED
    if intent_score >= MID_THRESHOLD and quality_score < FLOOR_THRESHOLD:
        return LeadTier.WARNING
    return LeadTier.COLD


def classify_lead(lead: Lead) -> LeadTier:
    return classify(lead.intent_score, lead.quality_score)


def get_classification_config(tier: LeadTier) -> ClassificationConfig:
    """Look up the static config for a tier (label, SLA, bucket, priority)."""

    return _CONFIGS[LeadTier(tier)]


def all_classification_configs() -> List[ClassificationConfig]:
    """Every tier config, highest priority first."""

    return sorted(_CONFIGS.values(), key=lambda config: config.priority)


def bucket_for(tier: LeadTier) -> LeadBucket:
    return get_classification_config(tier).bucket


def get_bucket_label(bucket: LeadBucket) -> str:
    return _BUCKET_LABELS[LeadBucket(bucket)]


def combined_score(lead: Lead) -> float:
    """Mean of the two scores, used as a secondary display metric."""

    return (lead.intent_score + lead.quality_score) / 2


def sort_leads_by_priority(leads: Iterable[Lead]) -> List[Lead]:
    """Stable sort: hot first, cold last; input order kept within a tier."""

    return sorted(leads, key=lambda lead: get_classification_config(classify_lead(lead)).priority)


__all__ = [
    "ClassificationConfig",
    "LeadBucket",
    "LeadTier",
    "all_classification_configs",
    "bucket_for",
    "classify",
    "classify_lead",
    "combined_score",
    "get_bucket_label",
    "get_classification_config",
    "sort_leads_by_priority",
]
