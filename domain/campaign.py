"""
Domain: Campaign records, development resolution and CPL rating.

Rules implemented here:
- A free-text campaign name resolves to a development through an ordered list
  of case-insensitive substring rules; the first matching rule wins and
  unmatched names resolve to "Other".
- A compound rule is one predicate: every `all_of` term must appear AND, when
  `any_of` is given, at least one of its terms must appear.
- CPL (cost per lead) = spend / leads, defined as 0 when leads == 0.
- CPL ratings use fixed, non-overlapping thresholds:
  - EXCELLENT:  cpl < 20
  - GOOD:       20 <= cpl <= 35
  - ACCEPTABLE: 35 < cpl <= 50
  - POOR:       cpl > 50
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

OTHER_DEVELOPMENT = "Other"

EXCELLENT_CPL_CEILING = 20.0
GOOD_CPL_CEILING = 35.0
ACCEPTABLE_CPL_CEILING = 50.0


class CplRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


@dataclass(frozen=True, slots=True)
class DevelopmentRule:
    """One ordered name-matching rule. Terms are lower-case substrings."""

    development: str
    all_of: Tuple[str, ...]
    any_of: Tuple[str, ...] = ()

    def matches(self, lowered_name: str) -> bool:
        if not all(term in lowered_name for term in self.all_of):
            return False
        if self.any_of and not any(term in lowered_name for term in self.any_of):
            return False
        return True


# Order is significant: compound LSQ rules before anything broader, and
# "marina bay" before the bare "marina" rule.
DEVELOPMENT_RULES: Tuple[DevelopmentRule, ...] = (
    DevelopmentRule("LSQ Croydon", all_of=("lsq", "croydon")),
    DevelopmentRule("LSQ Nine Elms", all_of=("lsq",), any_of=("nine elms", "ascenta")),
    DevelopmentRule("Riverside Towers", all_of=("riverside",)),
    DevelopmentRule("Marina Bay", all_of=("marina bay",)),
    DevelopmentRule("Marina Heights", all_of=("marina",)),
    DevelopmentRule("Skyline Tower", all_of=("skyline",)),
    DevelopmentRule("Garden Residences", all_of=("garden residences",)),
    DevelopmentRule("Kensington Place", all_of=("kensington",)),
    DevelopmentRule("Meridian Heights", all_of=("meridian",)),
    DevelopmentRule("Parkside Quarter", all_of=("parkside",)),
    DevelopmentRule("Victoria Gardens", all_of=("victoria gardens",)),
    DevelopmentRule("Internal Test", all_of=(), any_of=("internal test", "test campaign")),
)


def resolve_development_name(campaign_name: Optional[str]) -> str:
    """
    Resolve the development a campaign belongs to.

    Examples:
        resolve_development_name("LSQ Nine Elms – Spring Push")  # "LSQ Nine Elms"
        resolve_development_name("LSQ Croydon Retarget")        # "LSQ Croydon"
        resolve_development_name("Brand Awareness")             # "Other"
    """

    lowered = (campaign_name or "").lower()
    if not lowered.strip():
        return OTHER_DEVELOPMENT

    for rule in DEVELOPMENT_RULES:
        if rule.matches(lowered):
            return rule.development
    return OTHER_DEVELOPMENT


def compute_cpl(spend: float, leads: int) -> float:
    if leads <= 0:
        return 0.0
    return spend / leads


def rate_cpl(cpl: float) -> CplRating:
    """Rate a cost per lead; 35 is still GOOD and 50 still ACCEPTABLE."""

    if cpl < EXCELLENT_CPL_CEILING:
        return CplRating.EXCELLENT
    if cpl <= GOOD_CPL_CEILING:
        return CplRating.GOOD
    if cpl <= ACCEPTABLE_CPL_CEILING:
        return CplRating.ACCEPTABLE
    return CplRating.POOR


@dataclass(frozen=True, slots=True)
class CampaignRecord:
    """
    Normalized campaign row.

    `raw` keeps the original row so downstream consumers can show columns the
    engine does not model.
    """

    name: str
    platform: str = ""
    spend: float = 0.0
    leads: int = 0
    status: str = ""
    start_date: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.spend, bool) or not isinstance(self.spend, (int, float)):
            raise ValueError(f"spend must be a number, got {self.spend!r}")
        if not math.isfinite(self.spend) or self.spend < 0:
            raise ValueError(f"spend must be a finite number >= 0, got {self.spend!r}")
        if isinstance(self.leads, bool) or not isinstance(self.leads, int):
            raise ValueError(f"leads must be an integer, got {self.leads!r}")
        if self.leads < 0:
            raise ValueError("leads must be >= 0")

    @property
    def cpl(self) -> float:
        return compute_cpl(self.spend, self.leads)

    @property
    def development(self) -> str:
        return resolve_development_name(self.name)


@dataclass(frozen=True, slots=True)
class CampaignGroup:
    """Campaigns rolled up under one development, with a CPL rating."""

    name: str
    campaigns: Tuple[CampaignRecord, ...]
    total_spend: float
    total_leads: int
    avg_cpl: float
    rating: CplRating


__all__ = [
    "CampaignGroup",
    "CampaignRecord",
    "CplRating",
    "DEVELOPMENT_RULES",
    "DevelopmentRule",
    "OTHER_DEVELOPMENT",
    "compute_cpl",
    "rate_cpl",
    "resolve_development_name",
]
