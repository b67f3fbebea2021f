"""AI helper routes and the domain profile debug lookup."""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.database import get_db
from leadgen.dependencies import get_domain_profiles, get_enrichment_service, get_suggestion_service
from leadgen.exceptions import ValidationFailed
from leadgen.schemas import (
    DomainProfileDebug,
    EnrichmentPreview,
    ImageRequest,
    ImageResponse,
    PostSuggestion,
)
from leadgen.services.campaign_service import campaign_service
from leadgen.services.campaign_suggestions import CampaignSuggestionService
from leadgen.services.domain_profile import DomainProfileService
from leadgen.services.enrichment import EnrichmentService

router = APIRouter(tags=["AI"])


@router.post("/ai/campaigns/{campaign_id}/suggest-posts", response_model=List[PostSuggestion])
async def suggest_posts(
    campaign_id: str,
    db: AsyncSession = Depends(get_db),
    suggestions: CampaignSuggestionService = Depends(get_suggestion_service),
):
    """Four social post drafts; static drafts when the LLM is unavailable."""
    campaign = await campaign_service.get_campaign(db, campaign_id)
    return await suggestions.suggest_posts(campaign)


@router.post("/ai/sources/{source_id}/enrich-preview", response_model=List[EnrichmentPreview])
async def enrich_preview(
    source_id: str,
    db: AsyncSession = Depends(get_db),
    enrichment: EnrichmentService = Depends(get_enrichment_service),
):
    return await enrichment.preview_source(db, source_id)


@router.post("/ai/image-from-idea", response_model=ImageResponse)
async def image_from_idea(
    payload: ImageRequest,
    suggestions: CampaignSuggestionService = Depends(get_suggestion_service),
):
    image_url = await suggestions.image_from_idea(payload.idea, payload.channel)
    return ImageResponse(image_url=image_url)


@router.get("/debug/domain-profile", response_model=DomainProfileDebug)
async def debug_domain_profile(
    domain: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    domain_profiles: DomainProfileService = Depends(get_domain_profiles),
):
    if not domain or not domain.strip():
        raise ValidationFailed("domain query param is required")

    profile = await domain_profiles.get_or_fetch(db, domain.strip())
    excerpt = profile.raw_excerpt or ""
    return DomainProfileDebug(
        domain=profile.domain,
        status=profile.status,
        last_fetched_at=profile.last_fetched_at,
        error=profile.error,
        raw_excerpt_length=len(excerpt),
        raw_excerpt_preview=excerpt[:500],
    )
