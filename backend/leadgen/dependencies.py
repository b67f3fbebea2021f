"""Request-scoped access to shared clients held on app.state."""

from typing import Optional

import httpx
from fastapi import Depends, Request

from leadgen.config import settings
from leadgen.services.campaign_suggestions import CampaignSuggestionService
from leadgen.services.domain_profile import DomainProfileService
from leadgen.services.enrichment import EnrichmentService
from leadgen.services.leaddesk_service import LeadDeskService
from leadgen.services.llm_client import LLMClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_llm_client(request: Request) -> Optional[LLMClient]:
    return request.app.state.llm_client


def get_domain_profiles(http_client: httpx.AsyncClient = Depends(get_http_client)) -> DomainProfileService:
    return DomainProfileService(http_client, max_length=settings.DOMAIN_EXCERPT_MAX_LENGTH)


def get_enrichment_service(
    domain_profiles: DomainProfileService = Depends(get_domain_profiles),
    llm_client: Optional[LLMClient] = Depends(get_llm_client),
) -> EnrichmentService:
    return EnrichmentService(domain_profiles, llm_client)


def get_suggestion_service(
    llm_client: Optional[LLMClient] = Depends(get_llm_client),
) -> CampaignSuggestionService:
    return CampaignSuggestionService(llm_client)


def get_leaddesk_service(http_client: httpx.AsyncClient = Depends(get_http_client)) -> LeadDeskService:
    return LeadDeskService(
        http_client,
        base_url=settings.LEADDESK_API_BASE,
        default_owner=settings.LEADDESK_DEFAULT_OWNER,
    )
