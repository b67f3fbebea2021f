"""
Prospect duplicate and suppression checks.

Two lookup strategies share one rule order (see IdentityKeys.primary_key):
1. normalized email, when the candidate has one
2. otherwise normalized domain + normalized contact name

Single creates query the database directly; bulk imports load an
IdentitySnapshot once and resolve every row in memory.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.models import Prospect
from leadgen.services.normalization import IdentityKeys

logger = logging.getLogger(__name__)


class Resolution(str, Enum):
    ADMISSIBLE = "admissible"
    DUPLICATE = "duplicate"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class ExistingMatch:
    """A previously stored (or earlier in-batch) prospect sharing a key."""
    prospect_id: Optional[str]
    matched_on: str  # "email" or "fallback"
    suppressed: bool = False
    in_batch: bool = False


@dataclass(frozen=True)
class ResolverDecision:
    resolution: Resolution
    match: Optional[ExistingMatch] = None

    @property
    def admissible(self) -> bool:
        return self.resolution is Resolution.ADMISSIBLE

    @property
    def skip_category(self) -> Optional[str]:
        """Bulk import reporting category for a rejected candidate."""
        if self.resolution is Resolution.SUPPRESSED:
            return "suppressed"
        if self.resolution is Resolution.DUPLICATE:
            return "duplicate-email" if self.match.matched_on == "email" else "duplicate-fallback"
        return None


def _matched_on(key: str) -> str:
    return "email" if key.startswith("email:") else "fallback"


class IdentitySnapshot:
    """
    In-memory view of every stored prospect's identity keys.

    Also tracks keys admitted earlier in the same batch so two rows of one
    payload can never both be inserted.
    """

    def __init__(self):
        self.existing: Dict[str, str] = {}
        self.suppressed: Set[str] = set()
        self.seen: Set[str] = set()

    def add_existing(
        self,
        prospect_id: str,
        normalized_email: Optional[str],
        normalized_domain: Optional[str],
        normalized_contact_name: Optional[str],
        suppressed: bool = False,
    ) -> None:
        keys = IdentityKeys(
            email=normalized_email,
            domain=normalized_domain,
            contact_name=normalized_contact_name,
        )
        for key in (keys.email_key, keys.fallback_key):
            if not key:
                continue
            self.existing[key] = prospect_id
            if suppressed:
                self.suppressed.add(key)

    @classmethod
    def from_rows(cls, rows: Iterable) -> "IdentitySnapshot":
        snapshot = cls()
        for row in rows:
            snapshot.add_existing(
                row.id,
                row.normalized_email,
                row.normalized_domain,
                row.normalized_contact_name,
                suppressed=row.suppressed_at is not None,
            )
        return snapshot

    def remember(self, keys: IdentityKeys) -> None:
        """Record an admitted candidate's keys for intra-batch checks."""
        for key in (keys.email_key, keys.fallback_key):
            if key:
                self.seen.add(key)

    def lookup(self, key: str) -> Optional[ExistingMatch]:
        if key in self.existing:
            return ExistingMatch(
                prospect_id=self.existing[key],
                matched_on=_matched_on(key),
                suppressed=key in self.suppressed,
            )
        if key in self.seen:
            return ExistingMatch(prospect_id=None, matched_on=_matched_on(key), in_batch=True)
        return None

    def __len__(self):
        return len(self.existing)


def resolve(keys: IdentityKeys, snapshot: IdentitySnapshot) -> ResolverDecision:
    """Decide whether a candidate is admissible, a duplicate or suppressed."""
    key = keys.primary_key
    if not key:
        return ResolverDecision(Resolution.ADMISSIBLE)

    match = snapshot.lookup(key)
    if match is None:
        return ResolverDecision(Resolution.ADMISSIBLE)
    if match.suppressed:
        return ResolverDecision(Resolution.SUPPRESSED, match)
    return ResolverDecision(Resolution.DUPLICATE, match)


class DeduplicationService:
    """Check candidates against the prospects table."""

    async def find_existing(self, db: AsyncSession, keys: IdentityKeys) -> Optional[ExistingMatch]:
        """
        Return the first stored prospect sharing the candidate's identity.

        Archived and suppressed rows count as matches.
        """
        if keys.email:
            query = select(Prospect.id, Prospect.suppressed_at).where(
                Prospect.normalized_email == keys.email
            )
            matched_on = "email"
        elif keys.domain and keys.contact_name:
            query = select(Prospect.id, Prospect.suppressed_at).where(
                Prospect.normalized_domain == keys.domain,
                Prospect.normalized_contact_name == keys.contact_name,
            )
            matched_on = "fallback"
        else:
            return None

        row = (await db.execute(query.limit(1))).first()
        if row is None:
            return None

        logger.debug(f"Existing prospect {row.id} matched on {matched_on}")
        return ExistingMatch(
            prospect_id=row.id,
            matched_on=matched_on,
            suppressed=row.suppressed_at is not None,
        )

    async def load_snapshot(self, db: AsyncSession) -> IdentitySnapshot:
        """Load every prospect's identity columns into memory."""
        result = await db.execute(
            select(
                Prospect.id,
                Prospect.normalized_email,
                Prospect.normalized_domain,
                Prospect.normalized_contact_name,
                Prospect.suppressed_at,
            )
        )
        snapshot = IdentitySnapshot.from_rows(result.all())
        logger.debug(f"Loaded identity snapshot with {len(snapshot)} keys")
        return snapshot


# Singleton instance
deduplication_service = DeduplicationService()
