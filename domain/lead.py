"""
Domain: Lead entity.

Rules implemented here:
- A Lead is the canonical, normalized form of one raw import row.
- Enum-like free text (status, payment method, buyer status, source channel)
  is mapped once at the normalization boundary into the closed enums below.
- intent_score and quality_score are integers bounded to 0..100.
- A Lead is immutable; re-ingesting the same data produces new Leads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

SCORE_MIN = 0
SCORE_MAX = 100


class LeadStatus(str, Enum):
    NEW = "new"
    ENGAGED = "engaged"
    VIEWING = "viewing"
    OFFER = "offer"
    CLOSED = "closed"

    @property
    def stage(self) -> int:
        """Position in the sales pipeline (new=0 ... closed=4)."""

        return _STATUS_STAGES[self]


_STATUS_STAGES = {
    LeadStatus.NEW: 0,
    LeadStatus.ENGAGED: 1,
    LeadStatus.VIEWING: 2,
    LeadStatus.OFFER: 3,
    LeadStatus.CLOSED: 4,
}


class PaymentMethod(str, Enum):
    CASH = "cash"
    MORTGAGE = "mortgage"
    UNDECIDED = "undecided"


class BuyerStatus(str, Enum):
    ACTIVELY_LOOKING = "actively_looking"
    BROWSING = "browsing"


class LeadSource(str, Enum):
    META_CAMPAIGN = "meta_campaign"
    GOOGLE_ADS = "google_ads"
    RIGHTMOVE = "rightmove"
    ZOOPLA = "zoopla"
    ONTHEMARKET = "onthemarket"
    AGENT_REFERRAL = "agent_referral"
    DIRECT_WEB = "direct_web"


def _require_score(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not SCORE_MIN <= value <= SCORE_MAX:
        raise ValueError(f"{name} must be between {SCORE_MIN} and {SCORE_MAX}, got {value}")


@dataclass(frozen=True, slots=True)
class Lead:
    """
    Pure domain entity for a normalized lead.

    Notes:
    - This entity does not store its classification tier; the tier is a pure
      function of the two scores (see domain.classification).
    - The export-only fields (date_added ... buyer_summary) are passed through
      from the raw record unchanged.
    """

    id: str
    name: str
    email: str = ""
    phone: str = ""
    country: str = ""
    budget: str = ""
    bedrooms: str = ""
    payment_method: PaymentMethod = PaymentMethod.UNDECIDED
    buyer_status: BuyerStatus = BuyerStatus.BROWSING
    purchase_timeline: str = ""
    intent_score: int = 50
    quality_score: int = 50
    status: LeadStatus = LeadStatus.NEW
    source: LeadSource = LeadSource.DIRECT_WEB
    source_detail: Optional[str] = None
    last_activity: Optional[str] = None
    assigned_agent: Optional[str] = None
    matched_units: Tuple[str, ...] = field(default_factory=tuple)
    notes: str = ""

    # Export pass-through
    date_added: str = ""
    development_name: str = ""
    purchase_in_28_days: str = ""
    broker_needed: str = ""
    agent_transcription: str = ""
    linkedin_profile: str = ""
    buyer_summary: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must be a non-empty string")
        _require_score("intent_score", self.intent_score)
        _require_score("quality_score", self.quality_score)


__all__ = [
    "BuyerStatus",
    "Lead",
    "LeadSource",
    "LeadStatus",
    "PaymentMethod",
    "SCORE_MAX",
    "SCORE_MIN",
]
