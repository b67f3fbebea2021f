"""Sources: named lead lists with ideal-customer-profile fields."""

import json
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.exceptions import NotFound, ValidationFailed
from leadgen.models import Source
from leadgen.schemas import SourceCreate, SourceIcpUpdate

logger = logging.getLogger(__name__)

ICP_FIELDS = ("target_industry", "company_size", "role_focus", "main_angle")


class SourceService:

    async def list_sources(self, db: AsyncSession) -> List[Source]:
        result = await db.execute(select(Source).order_by(Source.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, source_id: str) -> Source:
        source = await db.get(Source, source_id)
        if source is None:
            raise NotFound("Source not found")
        return source

    async def create(self, db: AsyncSession, payload: SourceCreate) -> Source:
        metadata = payload.metadata
        if isinstance(metadata, dict):
            metadata = json.dumps(metadata)

        source = Source(
            name=payload.name,
            type=payload.type,
            description=payload.description,
            metadata_json=metadata,
            target_industry=payload.target_industry,
            company_size=payload.company_size,
            role_focus=payload.role_focus,
            main_angle=payload.main_angle,
        )
        db.add(source)
        await db.commit()

        logger.info(f"Created source {source.id} ({source.name})")
        return source

    async def update_icp(self, db: AsyncSession, source_id: str, payload: SourceIcpUpdate) -> Source:
        """Apply only the ICP fields present in the request body."""
        provided = [name for name in ICP_FIELDS if name in payload.model_fields_set]
        if not provided:
            raise ValidationFailed("No ICP fields provided")

        source = await self.get(db, source_id)
        for name in provided:
            setattr(source, name, getattr(payload, name))
        await db.commit()
        return source


source_service = SourceService()
