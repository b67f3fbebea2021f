"""
Prospect lifecycle: visibility flags, status and deletion.

archived_at and suppressed_at are independent flags set and cleared only by
explicit actions. Deletion is only allowed for archived prospects.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.exceptions import NotFound, PreconditionFailed
from leadgen.models import Prospect, ProspectNote, utcnow
from leadgen.schemas import ProspectStatus

logger = logging.getLogger(__name__)


class ProspectLifecycleService:
    """Read, filter and transition prospects."""

    async def get(self, db: AsyncSession, prospect_id: str) -> Prospect:
        prospect = await db.get(Prospect, prospect_id)
        if prospect is None:
            raise NotFound("Prospect not found")
        return prospect

    async def list_prospects(
        self,
        db: AsyncSession,
        status: Optional[str] = None,
        source_id: Optional[str] = None,
        owner_name: Optional[str] = None,
        search: Optional[str] = None,
        archived: bool = False,
        suppressed: bool = False,
    ) -> List[Prospect]:
        """
        List prospects, newest first.

        By default archived and suppressed rows are hidden; each flag
        switches its dimension to "only those rows".
        """
        query = select(Prospect)

        query = query.where(
            Prospect.archived_at.isnot(None) if archived else Prospect.archived_at.is_(None)
        )
        query = query.where(
            Prospect.suppressed_at.isnot(None) if suppressed else Prospect.suppressed_at.is_(None)
        )

        if status and status.strip():
            query = query.where(Prospect.status == status.strip())
        if source_id and source_id.strip():
            query = query.where(Prospect.source_id == source_id.strip())
        if owner_name and owner_name.strip():
            query = query.where(Prospect.owner_name == owner_name.strip())
        if search and search.strip():
            search_term = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Prospect.company_name.ilike(search_term),
                    Prospect.contact_name.ilike(search_term),
                    Prospect.email.ilike(search_term),
                )
            )

        query = query.order_by(Prospect.created_at.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def update_status(
        self, db: AsyncSession, prospect_id: str, status: ProspectStatus
    ) -> Prospect:
        """Any status may follow any other."""
        prospect = await self.get(db, prospect_id)
        prospect.status = ProspectStatus(status).value
        prospect.updated_at = utcnow()
        await db.commit()
        logger.info(f"Prospect {prospect_id} status -> {prospect.status}")
        return prospect

    async def _stamp(self, db: AsyncSession, prospect_id: str, column: str, set_now: bool) -> Prospect:
        prospect = await self.get(db, prospect_id)
        now = utcnow()
        setattr(prospect, column, now if set_now else None)
        prospect.updated_at = now
        await db.commit()
        return prospect

    async def archive(self, db: AsyncSession, prospect_id: str) -> Prospect:
        prospect = await self._stamp(db, prospect_id, "archived_at", True)
        logger.info(f"Archived prospect {prospect_id}")
        return prospect

    async def restore(self, db: AsyncSession, prospect_id: str) -> Prospect:
        prospect = await self._stamp(db, prospect_id, "archived_at", False)
        logger.info(f"Restored prospect {prospect_id}")
        return prospect

    async def suppress(self, db: AsyncSession, prospect_id: str) -> Prospect:
        prospect = await self._stamp(db, prospect_id, "suppressed_at", True)
        logger.info(f"Suppressed prospect {prospect_id}")
        return prospect

    async def unsuppress(self, db: AsyncSession, prospect_id: str) -> Prospect:
        prospect = await self._stamp(db, prospect_id, "suppressed_at", False)
        logger.info(f"Unsuppressed prospect {prospect_id}")
        return prospect

    async def delete(self, db: AsyncSession, prospect_id: str) -> str:
        """Hard-delete an archived prospect and its notes."""
        prospect = await self.get(db, prospect_id)
        if prospect.archived_at is None:
            raise PreconditionFailed("Prospect must be archived before deletion")

        await db.execute(delete(ProspectNote).where(ProspectNote.prospect_id == prospect_id))
        await db.execute(delete(Prospect).where(Prospect.id == prospect_id))
        await db.commit()
        logger.info(f"Deleted prospect {prospect_id}")
        return prospect_id

    # ========================================================================
    # NOTES
    # ========================================================================

    async def list_notes(self, db: AsyncSession, prospect_id: str) -> List[ProspectNote]:
        result = await db.execute(
            select(ProspectNote)
            .where(ProspectNote.prospect_id == prospect_id)
            .order_by(ProspectNote.created_at.desc())
        )
        return list(result.scalars().all())

    async def add_note(self, db: AsyncSession, prospect_id: str, content: str) -> ProspectNote:
        await self.get(db, prospect_id)
        note = ProspectNote(prospect_id=prospect_id, content=content)
        db.add(note)
        await db.commit()
        return note


# Singleton instance
prospect_lifecycle = ProspectLifecycleService()
