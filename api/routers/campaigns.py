"""
Campaigns API Endpoints.

Endpoints for grouping campaign rows by development and rating their CPL.
"""

import logging

from fastapi import APIRouter, HTTPException, Response

from api.models import (
    CampaignGroupResponse,
    CampaignGroupsResponse,
    CampaignResponse,
    CampaignSummaryResponse,
    RecordBatchRequest,
)
from services.campaign_service import group_and_rate, summarize_groups
from services.csv_export_service import generate_campaigns_csv
from services.settings import load_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _group_records(request: RecordBatchRequest):
    settings = load_settings()
    return group_and_rate(
        request.records,
        excluded_developments=settings.excluded_developments,
        excluded_platforms=settings.excluded_platforms,
    )


@router.post(
    "/campaigns/groups",
    response_model=CampaignGroupsResponse,
    summary="Group and Rate Campaigns",
    description="Group campaign rows by development, sum spend and leads, and rate each group's CPL."
)
def campaign_groups(request: RecordBatchRequest):
    """
    Group campaigns by resolved development name.

    Campaigns on an excluded platform are dropped before grouping, and groups
    for excluded developments are dropped afterwards (see EXCLUDED_PLATFORMS and
    EXCLUDED_DEVELOPMENTS). Groups are sorted by total spend, highest first.
    """
    try:
        groups = _group_records(request)
        summary = summarize_groups(groups)

        return CampaignGroupsResponse(
            groups=[
                CampaignGroupResponse(
                    name=group.name,
                    campaigns=[
                        CampaignResponse(
                            name=campaign.name,
                            platform=campaign.platform,
                            spend=campaign.spend,
                            leads=campaign.leads,
                            cpl=round(campaign.cpl, 2),
                            status=campaign.status,
                            start_date=campaign.start_date,
                        )
                        for campaign in group.campaigns
                    ],
                    total_spend=group.total_spend,
                    total_leads=group.total_leads,
                    avg_cpl=round(group.avg_cpl, 2),
                    rating=group.rating.value,
                )
                for group in groups
            ],
            summary=CampaignSummaryResponse(
                group_count=summary.group_count,
                campaign_count=summary.campaign_count,
                total_spend=summary.total_spend,
                total_leads=summary.total_leads,
                avg_cpl=round(summary.avg_cpl, 2),
                rating=summary.rating.value,
            ),
        )

    except Exception as e:
        logger.exception("Campaign grouping failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to group campaigns: {str(e)}"
        )


@router.post(
    "/campaigns/export",
    summary="Export Campaigns as CSV",
    response_class=Response
)
def export_campaigns_csv(request: RecordBatchRequest):
    """
    **Response:**
    CSV file download with filename: `campaigns_export.csv`
    """
    try:
        csv_content = generate_campaigns_csv(_group_records(request), sanitize=request.sanitize)
        return Response(
            content=csv_content,
            media_type="text/csv",
            headers={
                "Content-Disposition": "attachment; filename=campaigns_export.csv"
            }
        )
    except Exception as e:
        logger.exception("Campaign export failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to export campaigns: {str(e)}"
        )
