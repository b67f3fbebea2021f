"""Campaigns and their social posts."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.exceptions import NotFound, ValidationFailed
from leadgen.models import Campaign, SocialPost, utcnow
from leadgen.schemas import CampaignCreate, SocialPostCreate, SocialPostStatus

logger = logging.getLogger(__name__)


class CampaignService:

    # ===== Campaigns =====

    async def list_campaigns(self, db: AsyncSession) -> List[Campaign]:
        result = await db.execute(select(Campaign).order_by(Campaign.created_at.desc()))
        return list(result.scalars().all())

    async def get_campaign(self, db: AsyncSession, campaign_id: str) -> Campaign:
        campaign = await db.get(Campaign, campaign_id)
        if campaign is None:
            raise NotFound("Campaign not found")
        return campaign

    async def create_campaign(self, db: AsyncSession, payload: CampaignCreate) -> Campaign:
        campaign = Campaign(
            name=payload.name,
            objective=payload.objective,
            target_description=payload.target_description,
            status=payload.status or "draft",
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
        db.add(campaign)
        await db.commit()
        logger.info(f"Created campaign {campaign.id}")
        return campaign

    # ===== Social posts =====

    async def list_posts(self, db: AsyncSession, campaign_id: Optional[str] = None) -> List[SocialPost]:
        query = select(SocialPost)
        if campaign_id and campaign_id.strip():
            query = query.where(SocialPost.campaign_id == campaign_id.strip())
        result = await db.execute(query.order_by(SocialPost.created_at.desc()))
        return list(result.scalars().all())

    async def create_post(self, db: AsyncSession, payload: SocialPostCreate) -> SocialPost:
        if payload.campaign_id and await db.get(Campaign, payload.campaign_id) is None:
            raise ValidationFailed("Unknown campaignId", campaignId=payload.campaign_id)

        status = SocialPostStatus(payload.status or SocialPostStatus.DRAFT)
        post = SocialPost(
            campaign_id=payload.campaign_id or None,
            channel=payload.channel or "linkedin",
            content=payload.content,
            tone=payload.tone,
            scheduled_for=payload.scheduled_for,
            status=status.value,
            published_at=utcnow() if status == SocialPostStatus.PUBLISHED else None,
        )
        db.add(post)
        await db.commit()
        return post

    async def update_post_status(
        self, db: AsyncSession, post_id: str, status: SocialPostStatus
    ) -> SocialPost:
        """Entering 'published' stamps published_at."""
        post = await db.get(SocialPost, post_id)
        if post is None:
            raise NotFound("Social post not found")

        status = SocialPostStatus(status)
        if status == SocialPostStatus.PUBLISHED and post.status != SocialPostStatus.PUBLISHED.value:
            post.published_at = utcnow()
        post.status = status.value
        await db.commit()
        return post


campaign_service = CampaignService()
