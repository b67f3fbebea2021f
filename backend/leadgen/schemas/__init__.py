"""Pydantic schemas for request/response validation."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


from leadgen.schemas.prospect import (  # noqa: E402
    BulkImportRequest,
    NoteCreate,
    NoteResponse,
    ProspectCreate,
    ProspectImportRow,
    ProspectResponse,
    ProspectStatus,
    ProspectStatusUpdate,
)
from leadgen.schemas.source import SourceCreate, SourceIcpUpdate, SourceResponse  # noqa: E402
from leadgen.schemas.campaign import (  # noqa: E402
    CampaignCreate,
    CampaignResponse,
    SocialPostCreate,
    SocialPostResponse,
    SocialPostStatus,
    SocialPostStatusUpdate,
)
from leadgen.schemas.ai import (  # noqa: E402
    DomainProfileDebug,
    EnrichmentPreview,
    ImageRequest,
    ImageResponse,
    LeadDeskPushResponse,
    PostSuggestion,
)
