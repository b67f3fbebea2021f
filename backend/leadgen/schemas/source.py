"""Source (lead list + ICP) schemas."""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import Field, field_validator

from leadgen.schemas import CamelModel, require_text


class SourceCreate(CamelModel):
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Union[Dict[str, Any], str]] = None
    target_industry: Optional[str] = None
    company_size: Optional[str] = None
    role_focus: Optional[str] = None
    main_angle: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, v):
        return require_text(v, "name")


class SourceIcpUpdate(CamelModel):
    """Only fields present in the body are applied; null clears a field."""
    target_industry: Optional[str] = None
    company_size: Optional[str] = None
    role_focus: Optional[str] = None
    main_angle: Optional[str] = None


class SourceResponse(CamelModel):
    id: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    metadata_json: Optional[str] = Field(None, serialization_alias="metadata")
    target_industry: Optional[str] = None
    company_size: Optional[str] = None
    role_focus: Optional[str] = None
    main_angle: Optional[str] = None
    created_at: datetime
