"""
SQLAlchemy ORM models.

Prospect identity columns (normalized_email, normalized_domain,
normalized_contact_name) are derived at write time by the normalization
service and are what duplicate/suppression checks compare against.
"""

import secrets
import time
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text

from leadgen.database import Base


PROSPECT_STATUSES = ("uncontacted", "contacted", "qualified", "bad-fit")
SOCIAL_POST_STATUSES = ("draft", "scheduled", "published", "archived")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while True:
        number, rem = divmod(number, 36)
        out = digits[rem] + out
        if number == 0:
            return out


def generate_id(prefix: str) -> str:
    """Return an id like ``pros_lx2k9a1b_4f9c0a``."""
    timestamp = _base36(int(time.time() * 1000))
    return f"{prefix}_{timestamp}_{secrets.token_hex(3)}"


# ============================================================================
# SOURCES
# ============================================================================

class Source(Base):
    """Lead list with its ideal customer profile."""
    __tablename__ = "sources"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("src"))
    name = Column(String(255), nullable=False)
    type = Column(String(50))
    description = Column(Text)
    metadata_json = Column("metadata", Text)

    # ICP
    target_industry = Column(String(255))
    company_size = Column(String(100))
    role_focus = Column(String(255))
    main_angle = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Source(id={self.id}, name='{self.name}')>"


# ============================================================================
# PROSPECTS
# ============================================================================

class Prospect(Base):
    """Contact candidate for outreach."""
    __tablename__ = "prospects"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("pros"))
    source_id = Column(String(64), ForeignKey("sources.id", ondelete="SET NULL"), index=True)

    # Contact / display fields
    company_name = Column(String(255))
    contact_name = Column(String(255))
    role = Column(String(255))
    email = Column(String(255))
    phone = Column(String(50))
    website = Column(String(500))
    tags = Column(Text)
    owner_name = Column(String(255))

    status = Column(String(20), nullable=False, default="uncontacted")
    origin = Column(String(50), nullable=False, default="manual")

    # Identity keys, derived at write time
    normalized_email = Column(String(255))
    normalized_domain = Column(String(255))
    normalized_contact_name = Column(String(255))

    # Lifecycle
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True))
    last_contacted_at = Column(DateTime(timezone=True))
    archived_at = Column(DateTime(timezone=True))
    suppressed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint(
            f"status IN {PROSPECT_STATUSES}",
            name="chk_prospect_status",
        ),
        # NULLs are distinct, so only rows that carry an email are constrained
        Index("uq_prospects_normalized_email", "normalized_email", unique=True),
        Index("idx_prospects_domain_name", "normalized_domain", "normalized_contact_name"),
        Index("idx_prospects_created", "created_at"),
    )

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def is_suppressed(self) -> bool:
        return self.suppressed_at is not None

    def __repr__(self):
        return f"<Prospect(id={self.id}, email='{self.email}', status='{self.status}')>"


class ProspectNote(Base):
    """Free-text note on a prospect."""
    __tablename__ = "prospect_notes"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("note"))
    prospect_id = Column(
        String(64), ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(50))
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)


# ============================================================================
# CAMPAIGNS & SOCIAL POSTS
# ============================================================================

class Campaign(Base):
    """Outreach campaign."""
    __tablename__ = "campaigns"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("camp"))
    name = Column(String(255), nullable=False)
    objective = Column(Text)
    target_description = Column(Text)
    status = Column(String(50), nullable=False, default="draft")
    start_date = Column(String(50))
    end_date = Column(String(50))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class SocialPost(Base):
    """Social media post, optionally tied to a campaign."""
    __tablename__ = "social_posts"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("post"))
    campaign_id = Column(String(64), ForeignKey("campaigns.id", ondelete="SET NULL"), index=True)
    channel = Column(String(50), nullable=False, default="linkedin")
    content = Column(Text, nullable=False)
    tone = Column(String(50))
    scheduled_for = Column(String(50))
    status = Column(String(20), nullable=False, default="draft")
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(f"status IN {SOCIAL_POST_STATUSES}", name="chk_social_post_status"),
    )


# ============================================================================
# DOMAIN PROFILE CACHE
# ============================================================================

class DomainProfile(Base):
    """
    Cached plain-text excerpt of a company website.

    Only used as context for AI enrichment; never part of prospect identity.
    status is one of: ok, error, invalid
    """
    __tablename__ = "domain_profiles"

    domain = Column(String(255), primary_key=True)
    raw_excerpt = Column(Text, nullable=False, default="")
    last_fetched_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    status = Column(String(20), nullable=False, default="ok")
    error = Column(Text)
