"""Source routes."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.database import get_db
from leadgen.schemas import SourceCreate, SourceIcpUpdate, SourceResponse
from leadgen.services.source_service import source_service

router = APIRouter(prefix="/sources", tags=["Sources"])


@router.get("", response_model=List[SourceResponse])
async def list_sources(db: AsyncSession = Depends(get_db)):
    return await source_service.list_sources(db)


@router.get("/{source_id}", response_model=SourceResponse)
async def get_source(source_id: str, db: AsyncSession = Depends(get_db)):
    return await source_service.get(db, source_id)


@router.post("", response_model=SourceResponse, status_code=status.HTTP_201_CREATED)
async def create_source(payload: SourceCreate, db: AsyncSession = Depends(get_db)):
    return await source_service.create(db, payload)


@router.patch("/{source_id}", response_model=SourceResponse)
async def update_source_icp(
    source_id: str,
    payload: SourceIcpUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update ICP fields; only keys present in the body are touched."""
    return await source_service.update_icp(db, source_id, payload)
