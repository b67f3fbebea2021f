"""AI helper and integration schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import field_validator

from leadgen.schemas import CamelModel, require_text
from leadgen.schemas.prospect import ProspectResponse


class PostSuggestion(CamelModel):
    channel: str = "linkedin"
    tone: Optional[str] = None
    content: str
    image_idea: Optional[str] = None


class EnrichmentPreview(CamelModel):
    prospect_id: str
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    status: Optional[str] = None
    fit_score: int
    fit_label: str
    primary_pain: str
    summary: str


class ImageRequest(CamelModel):
    idea: str
    channel: Optional[str] = None

    @field_validator("idea")
    @classmethod
    def _idea_required(cls, v):
        return require_text(v, "idea")


class ImageResponse(CamelModel):
    image_url: str


class DomainProfileDebug(CamelModel):
    domain: str
    status: str
    last_fetched_at: Optional[datetime] = None
    error: Optional[str] = None
    raw_excerpt_length: int
    raw_excerpt_preview: str


class LeadDeskPushResponse(CamelModel):
    prospect: ProspectResponse
    leaddesk_lead: Any = None
