"""
Leads API Endpoints.

Endpoints for normalizing, classifying, aggregating and exporting lead batches.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response

from api.models import (
    BucketSummaryResponse,
    ClassificationConfigResponse,
    ErrorResponse,
    FunnelStageResponse,
    LeadResponse,
    NormalizeResponse,
    RecordBatchRequest,
    StatsResponse,
)
from domain.classification import (
    all_classification_configs,
    classify_lead,
    get_classification_config,
)
from domain.lead import Lead
from services.aggregation_service import ALL_SOURCES, AggregateStats, aggregate
from services.csv_export_service import generate_leads_csv
from services.lead_normalizer import normalize_leads

logger = logging.getLogger(__name__)

router = APIRouter()


def to_lead_response(lead: Lead) -> LeadResponse:
    config = get_classification_config(classify_lead(lead))
    return LeadResponse(
        id=lead.id,
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        country=lead.country,
        budget=lead.budget,
        bedrooms=lead.bedrooms,
        payment_method=lead.payment_method.value,
        buyer_status=lead.buyer_status.value,
        purchase_timeline=lead.purchase_timeline,
        intent_score=lead.intent_score,
        quality_score=lead.quality_score,
        status=lead.status.value,
        source=lead.source.value,
        source_detail=lead.source_detail,
        last_activity=lead.last_activity,
        assigned_agent=lead.assigned_agent,
        matched_units=list(lead.matched_units),
        notes=lead.notes,
        tier=config.tier.value,
        bucket=config.bucket.value,
        sla=config.sla,
    )


def to_stats_response(stats: AggregateStats) -> StatsResponse:
    return StatsResponse(
        total=stats.total,
        source_filter=stats.source_filter.value if stats.source_filter else ALL_SOURCES,
        buckets=[
            BucketSummaryResponse(
                bucket=summary.bucket.value,
                label=summary.label,
                count=summary.count,
                avg_intent=summary.avg_intent,
                avg_quality=summary.avg_quality,
            )
            for summary in stats.buckets
        ],
        tier_counts={tier.value: count for tier, count in stats.tier_counts.items()},
        status_counts={status.value: count for status, count in stats.status_counts.items()},
        source_counts={source.value: count for source, count in stats.source_counts.items()},
        funnel=[
            FunnelStageResponse(
                name=stage.name,
                count=stage.count,
                percentage=stage.percentage,
                conversion_from_previous=stage.conversion_from_previous,
            )
            for stage in stats.funnel
        ],
        avg_intent=stats.avg_intent,
        avg_quality=stats.avg_quality,
    )


@router.get(
    "/classifications",
    response_model=List[ClassificationConfigResponse],
    summary="List Classification Tiers",
    description="Static tier table with labels, SLAs and buckets, highest priority first."
)
def list_classifications():
    return [
        ClassificationConfigResponse(
            tier=config.tier.value,
            label=config.label,
            sla=config.sla,
            bucket=config.bucket.value,
            priority=config.priority,
        )
        for config in all_classification_configs()
    ]


@router.post(
    "/leads/normalize",
    response_model=NormalizeResponse,
    summary="Normalize Lead Batch",
    description="Normalize raw records into canonical leads, classify them and aggregate the batch."
)
def normalize_lead_batch(request: RecordBatchRequest):
    """
    Normalize a batch of raw lead records.

    Column names may use any casing or punctuation ("Lead Name", "lead_name").
    A record with unusable values degrades to defaults; the rest of the batch is
    unaffected.
    """
    try:
        leads = normalize_leads(request.records)
        return NormalizeResponse(
            leads=[to_lead_response(lead) for lead in leads],
            stats=to_stats_response(aggregate(leads)),
        )
    except Exception as e:
        logger.exception("Lead normalization failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to normalize leads: {str(e)}"
        )


@router.post(
    "/leads/stats",
    response_model=StatsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Aggregate Lead Batch",
    description="Normalize raw records and return bucket, funnel and source statistics."
)
def lead_batch_stats(
    request: RecordBatchRequest,
    source: Optional[str] = Query(None, description="Filter by source channel (e.g., 'meta_campaign') or 'all'"),
):
    """
    **Example usage:**
    - All leads: `POST /api/v1/leads/stats`
    - One channel: `POST /api/v1/leads/stats?source=rightmove`
    """
    try:
        leads = normalize_leads(request.records)
        try:
            stats = aggregate(leads, source=source)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return to_stats_response(stats)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Lead aggregation failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to aggregate leads: {str(e)}"
        )


@router.post(
    "/leads/export",
    summary="Export Leads as CSV",
    response_class=Response
)
def export_leads_csv(request: RecordBatchRequest):
    """
    Normalize a batch and return it as a CSV download.

    **Response:**
    CSV file download with filename: `leads_export.csv`
    """
    try:
        leads = normalize_leads(request.records)
        csv_content = generate_leads_csv(leads, sanitize=request.sanitize)
        return Response(
            content=csv_content,
            media_type="text/csv",
            headers={
                "Content-Disposition": "attachment; filename=leads_export.csv"
            }
        )
    except Exception as e:
        logger.exception("Lead export failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to export leads: {str(e)}"
        )
