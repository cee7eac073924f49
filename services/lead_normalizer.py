"""
Lead normalization service.

Converts raw, inconsistently-named records (spreadsheet exports, record-store
rows) into canonical Lead entities with bounded scores.

Failure handling:
- Missing fields resolve to defaults; normalization of a record never raises
  for bad values.
- Passing a non-list batch or a non-mapping record fails fast with TypeError.
- Any other failure on a single record is logged and that record degrades to
  defaults. The rest of the batch is unaffected.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Sequence, Tuple

from domain.field_resolver import (
    resolve,
    resolve_optional_text,
    resolve_text,
)
from domain.lead import BuyerStatus, Lead, LeadSource, LeadStatus, PaymentMethod
from domain.scoring import clamp_intent, compute_quality_score, parse_score_seed

logger = logging.getLogger(__name__)


# Ordered alias lists: most trusted key first.
ID_FIELDS = ("id", "Lead ID", "lead_id", "Record ID")
NAME_FIELDS = ("Lead Name", "Name", "Full Name", "Buyer Name")
FIRST_NAME_FIELDS = ("first_name", "First Name")
LAST_NAME_FIELDS = ("last_name", "Last Name", "Surname")
EMAIL_FIELDS = ("Email", "email", "Email Address")
PHONE_FIELDS = ("Phone Number", "Phone", "Number", "Mobile", "Mobile Number")
COUNTRY_FIELDS = ("Country", "Country of Residence")
BUDGET_FIELDS = ("Budget Range", "Budget")
BEDROOM_FIELDS = ("Preferred Bedrooms", "Bedrooms", "Beds")
PAYMENT_FIELDS = ("Cash/Mortgage", "Payment Method", "Finance")
BUYER_STATUS_FIELDS = ("Buyer Status", "Buyer Type")
TIMELINE_FIELDS = ("Timeline to Purchase", "Purchase Timeline", "Timeline")
SCORE_FIELDS = ("Score", "Lead Score", "Intent Score")
INTENT_FIELDS = ("Intent", "Intent Level")
BUDGET_MATCH_FIELDS = ("Budget Match",)
STATUS_FIELDS = ("Status", "Lead Status")
CHANNEL_FIELDS = ("Source", "Lead Source", "Channel")
PLATFORM_FIELDS = ("Platform", "Campaign Platform")
SOURCE_DETAIL_FIELDS = ("Source Detail", "Campaign Name", "Portal")
LAST_ACTIVITY_FIELDS = ("Last Activity", "Last Contacted", "Last Modified")
ASSIGNED_AGENT_FIELDS = ("Assigned Caller", "Assigned Agent", "Agent")
MATCHED_UNITS_FIELDS = ("Matched Units", "Units")
NOTES_FIELDS = ("Notes", "Comments")

DATE_ADDED_FIELDS = ("Date Added", "Created", "createdTime", "Created At")
DEVELOPMENT_FIELDS = ("Development Name", "Development")
PURCHASE_28_FIELDS = ("Purchase in 28 Days", "Purchase in 28 Days?")
BROKER_FIELDS = ("Broker Needed", "Broker Needed?")
TRANSCRIPTION_FIELDS = ("Agent Transcription", "Transcription")
LINKEDIN_FIELDS = ("LinkedIn Profile", "LinkedIn/Company Profile", "Company Profile")
SUMMARY_FIELDS = ("Buyer Summary", "Summary")

# First match wins, in this order.
STATUS_RULES: Tuple[Tuple[Tuple[str, ...], LeadStatus], ...] = (
    (("pending",), LeadStatus.NEW),
    (("progress", "contacted"), LeadStatus.ENGAGED),
    (("viewing",), LeadStatus.VIEWING),
    (("offer",), LeadStatus.OFFER),
    (("closed", "won"), LeadStatus.CLOSED),
)

PAYMENT_RULES: Tuple[Tuple[str, PaymentMethod], ...] = (
    ("cash", PaymentMethod.CASH),
    ("mortgage", PaymentMethod.MORTGAGE),
)

_TRUTHY = {"yes", "true", "1", "y"}

_NEGATED_ACTIVE = re.compile(r"\binactive|\bnot\s+active")


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"(?<![a-z0-9]){re.escape(word)}(?![a-z0-9])", text) is not None


def _matches_any(text: str, terms: Sequence[str], words: Sequence[str] = ()) -> bool:
    return any(term in text for term in terms) or any(_has_word(text, word) for word in words)


def map_status(raw_status: Any) -> LeadStatus:
    text = str(raw_status or "").lower()
    for terms, status in STATUS_RULES:
        if any(term in text for term in terms):
            return status
    return LeadStatus.NEW


def map_payment_method(raw_payment: Any) -> PaymentMethod:
    text = str(raw_payment or "").lower()
    for term, method in PAYMENT_RULES:
        if term in text:
            return method
    return PaymentMethod.UNDECIDED


def parse_flag(value: Any) -> bool:
    """Yes/true/1 style flags from spreadsheets and record stores."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def map_buyer_status(raw_status: Any, purchase_in_28_days: Any) -> BuyerStatus:
    text = str(raw_status or "").lower()
    if _NEGATED_ACTIVE.search(text):
        return BuyerStatus.BROWSING
    if "active" in text:
        return BuyerStatus.ACTIVELY_LOOKING
    if "brows" in text:
        return BuyerStatus.BROWSING
    if parse_flag(purchase_in_28_days):
        return BuyerStatus.ACTIVELY_LOOKING
    return BuyerStatus.BROWSING


def infer_source(channel: str, platform: str, email: str) -> LeadSource:
    """
    Infer the acquisition channel. First matching rule wins:

    meta → google → rightmove → zoopla → onthemarket → agent referral → direct web
    """

    channel = channel.lower()
    platform = platform.lower()
    domain = email.lower().rpartition("@")[2] if "@" in email else ""
    campaign_text = f"{channel} {platform}"
    portal_text = f"{channel} {platform} {domain}"

    # fb, ig, gads and otm only count as whole words ("digital" is not "ig").
    # The email domain is only consulted for the property portals.
    if _matches_any(campaign_text, ("meta", "facebook", "instagram"), ("fb", "ig")):
        return LeadSource.META_CAMPAIGN
    if _matches_any(campaign_text, ("google",), ("gads",)):
        return LeadSource.GOOGLE_ADS
    if "rightmove" in portal_text:
        return LeadSource.RIGHTMOVE
    if "zoopla" in portal_text:
        return LeadSource.ZOOPLA
    if _matches_any(portal_text, ("onthemarket",), ("otm",)):
        return LeadSource.ONTHEMARKET
    if "agent" in channel or "referral" in channel:
        return LeadSource.AGENT_REFERRAL
    return LeadSource.DIRECT_WEB


def _resolve_name(record: Mapping[str, Any], index: int) -> str:
    name = resolve_text(record, NAME_FIELDS)
    if name:
        return name
    first = resolve_text(record, FIRST_NAME_FIELDS)
    last = resolve_text(record, LAST_NAME_FIELDS)
    full = f"{first} {last}".strip()
    return full or f"Lead {index + 1}"


def _resolve_matched_units(record: Mapping[str, Any]) -> Tuple[str, ...]:
    # Lists and linked records arrive already joined with ", ".
    items = [part.strip() for part in resolve_text(record, MATCHED_UNITS_FIELDS).split(",")]
    return tuple(item for item in items if item)


def normalize_lead(record: Mapping[str, Any], index: int) -> Lead:
    """
    Build one canonical Lead from a raw record.

    Args:
        record: Raw record (column name → value)
        index: Zero-based position in the batch, used for placeholders

    Returns:
        Lead with bounded scores and closed enum fields

    Raises:
        TypeError: If record is not a mapping
    """

    record_id = resolve_text(record, ID_FIELDS) or f"lead-{index + 1}"
    email = resolve_text(record, EMAIL_FIELDS)

    seed = parse_score_seed(resolve(record, SCORE_FIELDS, None))
    intent_score = clamp_intent(seed, resolve(record, INTENT_FIELDS, ""))
    quality_score = compute_quality_score(seed, resolve(record, BUDGET_MATCH_FIELDS, None))

    purchase_in_28_days = resolve_text(record, PURCHASE_28_FIELDS)

    return Lead(
        id=record_id,
        name=_resolve_name(record, index),
        email=email,
        phone=resolve_text(record, PHONE_FIELDS),
        country=resolve_text(record, COUNTRY_FIELDS),
        budget=resolve_text(record, BUDGET_FIELDS),
        bedrooms=resolve_text(record, BEDROOM_FIELDS),
        payment_method=map_payment_method(resolve_text(record, PAYMENT_FIELDS)),
        buyer_status=map_buyer_status(resolve_text(record, BUYER_STATUS_FIELDS), purchase_in_28_days),
        purchase_timeline=resolve_text(record, TIMELINE_FIELDS),
        intent_score=intent_score,
        quality_score=quality_score,
        status=map_status(resolve_text(record, STATUS_FIELDS)),
        source=infer_source(
            channel=resolve_text(record, CHANNEL_FIELDS),
            platform=resolve_text(record, PLATFORM_FIELDS),
            email=email,
        ),
        source_detail=resolve_optional_text(record, SOURCE_DETAIL_FIELDS),
        last_activity=resolve_optional_text(record, LAST_ACTIVITY_FIELDS),
        assigned_agent=resolve_optional_text(record, ASSIGNED_AGENT_FIELDS),
        matched_units=_resolve_matched_units(record),
        notes=resolve_text(record, NOTES_FIELDS),
        date_added=resolve_text(record, DATE_ADDED_FIELDS),
        development_name=resolve_text(record, DEVELOPMENT_FIELDS),
        purchase_in_28_days=purchase_in_28_days,
        broker_needed=resolve_text(record, BROKER_FIELDS),
        agent_transcription=resolve_text(record, TRANSCRIPTION_FIELDS),
        linkedin_profile=resolve_text(record, LINKEDIN_FIELDS),
        buyer_summary=resolve_text(record, SUMMARY_FIELDS),
    )


def normalize_leads(records: Sequence[Mapping[str, Any]]) -> List[Lead]:
    """
    Normalize a complete batch of raw records, preserving input order.

    Raises:
        TypeError: If records is not a list/tuple, or an element is not a mapping
    """

    if not isinstance(records, (list, tuple)):
        raise TypeError(f"records must be a list of mappings, got {type(records).__name__}")

    leads: List[Lead] = []
    degraded = 0

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise TypeError(
                f"record at index {index} must be a mapping, got {type(record).__name__}"
            )

        try:
            leads.append(normalize_lead(record, index))
        except (TypeError, ValueError, RecursionError) as e:
            degraded += 1
            logger.warning(
                f"Record {index} could not be normalized; using defaults",
                extra={
                    "record_index": index,
                    "error": str(e),
                    "record_keys": sorted(str(key) for key in record.keys())[:50],
                },
            )
            leads.append(normalize_lead({}, index))

    logger.debug(
        "Normalized lead batch",
        extra={"record_count": len(records), "degraded_count": degraded},
    )
    return leads


__all__ = [
    "infer_source",
    "map_buyer_status",
    "map_payment_method",
    "map_status",
    "normalize_lead",
    "normalize_leads",
    "parse_flag",
]
