"""Campaign and social post routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.database import get_db
from leadgen.schemas import (
    CampaignCreate,
    CampaignResponse,
    SocialPostCreate,
    SocialPostResponse,
    SocialPostStatusUpdate,
)
from leadgen.services.campaign_service import campaign_service

router = APIRouter(tags=["Campaigns"])


# ============================================================================
# CAMPAIGNS
# ============================================================================

@router.get("/campaigns", response_model=List[CampaignResponse])
async def list_campaigns(db: AsyncSession = Depends(get_db)):
    return await campaign_service.list_campaigns(db)


@router.post("/campaigns", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(payload: CampaignCreate, db: AsyncSession = Depends(get_db)):
    return await campaign_service.create_campaign(db, payload)


# ============================================================================
# SOCIAL POSTS
# ============================================================================

@router.get("/social-posts", response_model=List[SocialPostResponse])
async def list_social_posts(
    campaign_id: Optional[str] = Query(None, alias="campaignId"),
    db: AsyncSession = Depends(get_db),
):
    return await campaign_service.list_posts(db, campaign_id)


@router.post("/social-posts", response_model=SocialPostResponse, status_code=status.HTTP_201_CREATED)
async def create_social_post(payload: SocialPostCreate, db: AsyncSession = Depends(get_db)):
    return await campaign_service.create_post(db, payload)


@router.patch("/social-posts/{post_id}", response_model=SocialPostResponse)
async def update_social_post_status(
    post_id: str,
    payload: SocialPostStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await campaign_service.update_post_status(db, post_id, payload.status)
