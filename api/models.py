"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Lead Models
# ============================================================================

class RecordBatchRequest(BaseModel):
    """A complete batch of raw records with arbitrary column names."""
    records: List[Dict[str, Any]] = Field(
        ...,
        description="Raw rows from a spreadsheet export or record store"
    )
    sanitize: bool = Field(
        False,
        description="Strip leading formula characters from exported CSV fields"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "records": [
                    {
                        "Lead Name": "Amara Okafor",
                        "Email": "amara@example.com",
                        "Score": "85",
                        "Intent": "Hot",
                        "Budget Match": "Yes",
                        "Status": "Contacted - In Progress",
                        "Source": "Facebook Lead Form"
                    }
                ]
            }
        }


class LeadResponse(BaseModel):
    """Normalized lead with its classification."""
    id: str
    name: str
    email: str
    phone: str
    country: str
    budget: str
    bedrooms: str
    payment_method: str
    buyer_status: str
    purchase_timeline: str
    intent_score: int
    quality_score: int
    status: str
    source: str
    source_detail: Optional[str] = None
    last_activity: Optional[str] = None
    assigned_agent: Optional[str] = None
    matched_units: List[str]
    notes: str
    tier: str  # "hot", "star", "lightning", "verified", "warning", "cold"
    bucket: str  # "hot", "quality", "warm", "cold"
    sla: str


class BucketSummaryResponse(BaseModel):
    bucket: str
    label: str
    count: int
    avg_intent: int
    avg_quality: int


class FunnelStageResponse(BaseModel):
    name: str
    count: int
    percentage: float
    conversion_from_previous: float


class StatsResponse(BaseModel):
    """Aggregate statistics for a lead collection."""
    total: int
    source_filter: str  # "all" or a source channel
    buckets: List[BucketSummaryResponse]
    tier_counts: Dict[str, int]
    status_counts: Dict[str, int]
    source_counts: Dict[str, int]
    funnel: List[FunnelStageResponse]
    avg_intent: int
    avg_quality: int


class NormalizeResponse(BaseModel):
    """Response for lead normalization."""
    leads: List[LeadResponse]
    stats: StatsResponse


class ClassificationConfigResponse(BaseModel):
    tier: str
    label: str
    sla: str
    bucket: str
    priority: int

    class Config:
        json_schema_extra = {
            "example": {
                "tier": "hot",
                "label": "Hot Lead",
                "sla": "Contact within 1 hour",
                "bucket": "hot",
                "priority": 1
            }
        }


# ============================================================================
# Campaign Models
# ============================================================================

class CampaignResponse(BaseModel):
    name: str
    platform: str
    spend: float
    leads: int
    cpl: float
    status: str
    start_date: str


class CampaignGroupResponse(BaseModel):
    """Campaigns rolled up under one development."""
    name: str
    campaigns: List[CampaignResponse]
    total_spend: float
    total_leads: int
    avg_cpl: float
    rating: str  # "excellent", "good", "acceptable", "poor"


class CampaignSummaryResponse(BaseModel):
    group_count: int
    campaign_count: int
    total_spend: float
    total_leads: int
    avg_cpl: float
    rating: str


class CampaignGroupsResponse(BaseModel):
    groups: List[CampaignGroupResponse]
    summary: CampaignSummaryResponse

    class Config:
        json_schema_extra = {
            "example": {
                "groups": [],
                "summary": {
                    "group_count": 0,
                    "campaign_count": 0,
                    "total_spend": 0.0,
                    "total_leads": 0,
                    "avg_cpl": 0.0,
                    "rating": "excellent"
                }
            }
        }


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Invalid source filter 'tiktok'",
                "status_code": 400
            }
        }
