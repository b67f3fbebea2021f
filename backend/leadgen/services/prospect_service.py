"""
Prospect creation: single create and bulk import.

Both paths normalize identity fields, apply the deduplication rules and
write the derived keys alongside the row. Bulk import is not isolated from
concurrent writers; the unique index on normalized_email is the backstop and
surfaces as DuplicateProspect.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.exceptions import DuplicateProspect, NoValidProspects, NotFound, ValidationFailed
from leadgen.models import Prospect, Source, generate_id, utcnow
from leadgen.schemas import ProspectCreate, ProspectImportRow
from leadgen.schemas.prospect import ProspectFields, ProspectStatus
from leadgen.services.deduplication import DeduplicationService, deduplication_service, resolve
from leadgen.services.normalization import IdentityKeys, NormalizationService, normalization_service

logger = logging.getLogger(__name__)


SKIP_CATEGORIES = ("invalid", "duplicate-email", "duplicate-fallback", "suppressed", "other")


@dataclass
class ImportStats:
    """Per-category counters for one bulk import."""
    received: int = 0
    valid: int = 0
    inserted: int = 0
    skipped: Dict[str, int] = field(default_factory=lambda: {c: 0 for c in SKIP_CATEGORIES})

    def skip(self, category: str) -> None:
        self.skipped[category] += 1

    def as_headers(self) -> Dict[str, str]:
        headers = {
            "X-Import-Received": str(self.received),
            "X-Import-Valid": str(self.valid),
            "X-Import-Inserted": str(self.inserted),
        }
        for category, count in self.skipped.items():
            name = "-".join(part.capitalize() for part in category.split("-"))
            headers[f"X-Import-Skipped-{name}"] = str(count)
        return headers


@dataclass
class BulkImportResult:
    prospects: List[Prospect]
    stats: ImportStats


def _has_text(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


class ProspectService:
    """Create prospects one at a time or in bulk."""

    def __init__(
        self,
        normalizer: NormalizationService = normalization_service,
        deduplicator: DeduplicationService = deduplication_service,
    ):
        self.normalizer = normalizer
        self.deduplicator = deduplicator

    def _keys_for(self, fields: ProspectFields) -> IdentityKeys:
        return self.normalizer.identity_keys(
            email=fields.email,
            website=fields.website,
            contact_name=fields.contact_name,
        )

    @staticmethod
    def _build_prospect(
        fields: ProspectFields,
        keys: IdentityKeys,
        source_id: Optional[str],
        default_origin: str,
    ) -> Prospect:
        status = fields.status or ProspectStatus.UNCONTACTED
        return Prospect(
            id=generate_id("pros"),
            source_id=source_id,
            company_name=fields.company_name,
            contact_name=fields.contact_name,
            role=fields.role,
            email=fields.email,
            phone=fields.phone,
            website=fields.website,
            tags=fields.tags_value(),
            status=status.value,
            owner_name=fields.owner_name,
            origin=fields.origin or default_origin,
            normalized_email=keys.email,
            normalized_domain=keys.domain,
            normalized_contact_name=keys.contact_name,
            created_at=utcnow(),
            updated_at=None,
            last_contacted_at=None,
            archived_at=None,
            suppressed_at=None,
        )

    @staticmethod
    async def _ensure_source(db: AsyncSession, source_id: str) -> Source:
        source = await db.get(Source, source_id)
        if source is None:
            raise NotFound("Source not found")
        return source

    # ========================================================================
    # SINGLE CREATE
    # ========================================================================

    async def create_prospect(self, db: AsyncSession, payload: ProspectCreate) -> Prospect:
        """
        Insert one prospect unless its identity already exists.

        Raises DuplicateProspect with the existing id on any match,
        suppressed or not.
        """
        if payload.source_id:
            if await db.get(Source, payload.source_id) is None:
                raise ValidationFailed("Unknown sourceId", sourceId=payload.source_id)

        keys = self._keys_for(payload)
        existing = await self.deduplicator.find_existing(db, keys)
        if existing:
            logger.info(
                f"Duplicate prospect rejected (matched {existing.matched_on} "
                f"on {existing.prospect_id})"
            )
            raise DuplicateProspect(existing.prospect_id)

        prospect = self._build_prospect(payload, keys, payload.source_id, default_origin="manual")
        db.add(prospect)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            # Lost a race with a concurrent writer
            existing = await self.deduplicator.find_existing(db, keys)
            raise DuplicateProspect(existing.prospect_id if existing else None)

        logger.info(f"Created prospect {prospect.id} (origin={prospect.origin})")
        return prospect

    # ========================================================================
    # BULK IMPORT
    # ========================================================================

    async def bulk_import(
        self,
        db: AsyncSession,
        source_id: str,
        rows: Optional[List[Any]],
    ) -> BulkImportResult:
        """
        Import many prospects into a source.

        Loads the identity snapshot once, filters rows in input order and
        inserts all admitted rows together. Raises NoValidProspects when
        nothing is admitted.
        """
        if not rows:
            raise ValidationFailed("prospects array is required")

        await self._ensure_source(db, source_id)

        snapshot = await self.deduplicator.load_snapshot(db)
        stats = ImportStats(received=len(rows))
        admitted: List[Prospect] = []

        for raw in rows:
            if not isinstance(raw, dict):
                stats.skip("other")
                continue

            try:
                fields = ProspectImportRow.model_validate(raw)
            except ValidationError as e:
                logger.debug(f"Skipping malformed import row: {e.errors()}")
                stats.skip("other")
                continue

            has_identifier = (
                _has_text(fields.company_name)
                or _has_text(fields.contact_name)
                or _has_text(fields.email)
            )
            if not has_identifier:
                stats.skip("invalid")
                continue
            stats.valid += 1

            keys = self._keys_for(fields)
            decision = resolve(keys, snapshot)
            if not decision.admissible:
                stats.skip(decision.skip_category)
                continue

            snapshot.remember(keys)
            admitted.append(
                self._build_prospect(fields, keys, source_id, default_origin="purchased")
            )

        if not admitted:
            logger.info(f"Bulk import into {source_id} admitted nothing: {stats.as_headers()}")
            raise NoValidProspects(stats)

        db.add_all(admitted)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Bulk import into {source_id} collided with a concurrent insert")
            raise DuplicateProspect(None)

        stats.inserted = len(admitted)
        logger.info(
            f"Bulk import into {source_id}: received={stats.received} "
            f"inserted={stats.inserted} skipped={stats.skipped}"
        )
        return BulkImportResult(prospects=admitted, stats=stats)


# Singleton instance
prospect_service = ProspectService()
