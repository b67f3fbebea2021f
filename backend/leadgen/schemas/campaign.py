"""Campaign and social post schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from leadgen.schemas import CamelModel, blank_to_none, require_text


class CampaignCreate(CamelModel):
    name: str
    objective: Optional[str] = None
    target_description: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, v):
        return require_text(v, "name")

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, v):
        v = blank_to_none(v)
        return v.strip() if isinstance(v, str) else v


class CampaignResponse(CamelModel):
    id: str
    name: str
    objective: Optional[str] = None
    target_description: Optional[str] = None
    status: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    created_at: datetime


class SocialPostStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class SocialPostCreate(CamelModel):
    campaign_id: Optional[str] = None
    channel: Optional[str] = None
    content: str
    tone: Optional[str] = None
    scheduled_for: Optional[str] = None
    status: Optional[SocialPostStatus] = None

    @field_validator("content")
    @classmethod
    def _content_required(cls, v):
        return require_text(v, "content")

    @field_validator("channel", "status", mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        v = blank_to_none(v)
        return v.strip() if isinstance(v, str) else v


class SocialPostStatusUpdate(CamelModel):
    status: SocialPostStatus


class SocialPostResponse(CamelModel):
    id: str
    campaign_id: Optional[str] = None
    channel: str
    content: str
    tone: Optional[str] = None
    scheduled_for: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    created_at: datetime
