"""
Prospect routes: creation, bulk import, listing, lifecycle, notes and the
Lead Desk push.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.database import get_db
from leadgen.dependencies import get_leaddesk_service
from leadgen.models import Source
from leadgen.schemas import (
    BulkImportRequest,
    LeadDeskPushResponse,
    NoteCreate,
    NoteResponse,
    ProspectCreate,
    ProspectResponse,
    ProspectStatusUpdate,
)
from leadgen.services.leaddesk_service import LeadDeskService
from leadgen.services.prospect_lifecycle import prospect_lifecycle
from leadgen.services.prospect_service import prospect_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Prospects"])


# ============================================================================
# CREATE / IMPORT
# ============================================================================

@router.post("/prospects", response_model=ProspectResponse, status_code=status.HTTP_201_CREATED)
async def create_prospect(payload: ProspectCreate, db: AsyncSession = Depends(get_db)):
    """Create one prospect; 409 with the existing id when it is a duplicate."""
    return await prospect_service.create_prospect(db, payload)


@router.post(
    "/sources/{source_id}/prospects/bulk",
    response_model=List[ProspectResponse],
    status_code=status.HTTP_201_CREATED,
)
async def bulk_import_prospects(
    source_id: str,
    payload: BulkImportRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Import a batch of prospects into a source.

    Skip counts per category are reported in X-Import-* response headers.
    """
    result = await prospect_service.bulk_import(db, source_id, payload.prospects)
    response.headers.update(result.stats.as_headers())
    return result.prospects


# ============================================================================
# READ
# ============================================================================

@router.get("/prospects", response_model=List[ProspectResponse])
async def list_prospects(
    status: Optional[str] = None,
    source_id: Optional[str] = Query(None, alias="sourceId"),
    owner_name: Optional[str] = Query(None, alias="ownerName"),
    search: Optional[str] = None,
    archived: bool = False,
    suppressed: bool = False,
    db: AsyncSession = Depends(get_db),
):
    return await prospect_lifecycle.list_prospects(
        db,
        status=status,
        source_id=source_id,
        owner_name=owner_name,
        search=search,
        archived=archived,
        suppressed=suppressed,
    )


@router.get("/prospects/{prospect_id}", response_model=ProspectResponse)
async def get_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.get(db, prospect_id)


# ============================================================================
# LIFECYCLE
# ============================================================================

@router.patch("/prospects/{prospect_id}", response_model=ProspectResponse)
async def update_prospect_status(
    prospect_id: str,
    payload: ProspectStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await prospect_lifecycle.update_status(db, prospect_id, payload.status)


@router.patch("/prospects/{prospect_id}/archive", response_model=ProspectResponse)
async def archive_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.archive(db, prospect_id)


@router.patch("/prospects/{prospect_id}/restore", response_model=ProspectResponse)
async def restore_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.restore(db, prospect_id)


@router.patch("/prospects/{prospect_id}/suppress", response_model=ProspectResponse)
async def suppress_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.suppress(db, prospect_id)


@router.patch("/prospects/{prospect_id}/unsuppress", response_model=ProspectResponse)
async def unsuppress_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.unsuppress(db, prospect_id)


@router.delete("/prospects/{prospect_id}")
async def delete_prospect(prospect_id: str, db: AsyncSession = Depends(get_db)):
    """Only archived prospects can be deleted."""
    deleted_id = await prospect_lifecycle.delete(db, prospect_id)
    return {"success": True, "deletedId": deleted_id}


# ============================================================================
# NOTES
# ============================================================================

@router.get("/prospects/{prospect_id}/notes", response_model=List[NoteResponse])
async def list_notes(prospect_id: str, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.list_notes(db, prospect_id)


@router.post(
    "/prospects/{prospect_id}/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(prospect_id: str, payload: NoteCreate, db: AsyncSession = Depends(get_db)):
    return await prospect_lifecycle.add_note(db, prospect_id, payload.content)


# ============================================================================
# LEAD DESK
# ============================================================================

@router.post(
    "/prospects/{prospect_id}/push-to-leaddesk",
    response_model=LeadDeskPushResponse,
    status_code=status.HTTP_201_CREATED,
)
async def push_to_leaddesk(
    prospect_id: str,
    db: AsyncSession = Depends(get_db),
    leaddesk: LeadDeskService = Depends(get_leaddesk_service),
):
    prospect = await prospect_lifecycle.get(db, prospect_id)
    source = await db.get(Source, prospect.source_id) if prospect.source_id else None
    lead = await leaddesk.push_prospect(prospect, source)
    return LeadDeskPushResponse(
        prospect=ProspectResponse.model_validate(prospect),
        leaddesk_lead=lead,
    )
