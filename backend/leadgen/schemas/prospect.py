"""Prospect and note schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from leadgen.schemas import CamelModel, blank_to_none, require_text


class ProspectStatus(str, Enum):
    UNCONTACTED = "uncontacted"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    BAD_FIT = "bad-fit"


class ProspectFields(CamelModel):
    """Fields a caller may supply for a prospect."""
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = None
    status: Optional[ProspectStatus] = None
    owner_name: Optional[str] = None
    origin: Optional[str] = None

    @field_validator(
        "company_name", "contact_name", "role", "email", "phone", "website",
        "owner_name", "status", "origin",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, v):
        return blank_to_none(v)

    @field_validator("origin")
    @classmethod
    def _strip_origin(cls, v):
        return v.strip() if v else v

    def tags_value(self) -> Optional[str]:
        if isinstance(self.tags, list):
            return ",".join(self.tags)
        return self.tags or None


class ProspectCreate(ProspectFields):
    """Single prospect creation request."""
    source_id: Optional[str] = None


class ProspectImportRow(ProspectFields):
    """One row of a bulk import payload; numbers are accepted as text."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class BulkImportRequest(CamelModel):
    """Bulk import payload. Rows are validated one by one during import."""
    prospects: Optional[List[Any]] = None


class ProspectStatusUpdate(CamelModel):
    status: ProspectStatus


class ProspectResponse(CamelModel):
    id: str
    source_id: Optional[str] = None
    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    tags: Optional[str] = None
    status: str
    owner_name: Optional[str] = None
    origin: Optional[str] = None
    normalized_email: Optional[str] = None
    normalized_domain: Optional[str] = None
    normalized_contact_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_contacted_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    suppressed_at: Optional[datetime] = None


class NoteCreate(CamelModel):
    content: str

    @field_validator("content")
    @classmethod
    def _content_required(cls, v):
        return require_text(v, "content")


class NoteResponse(CamelModel):
    id: str
    prospect_id: str
    content: str
    created_at: datetime
