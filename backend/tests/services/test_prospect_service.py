# tests/services/test_prospect_service.py
"""
Tests for ProspectService (single create + bulk import) and the lifecycle service

Run with: pytest tests/services/test_prospect_service.py -v
"""

import pytest

from leadgen.exceptions import (
    DuplicateProspect,
    NoValidProspects,
    NotFound,
    PreconditionFailed,
    ValidationFailed,
)
from leadgen.schemas import ProspectCreate
from leadgen.services.prospect_lifecycle import prospect_lifecycle
from leadgen.services.prospect_service import ImportStats, prospect_service


# ============================================================================
# IMPORT STATS
# ============================================================================

@pytest.mark.unit
class TestImportStats:

    def test_headers_cover_every_category(self):
        stats = ImportStats(received=5, valid=3, inserted=1)
        stats.skip("duplicate-email")
        stats.skip("duplicate-fallback")
        stats.skip("other")

        headers = stats.as_headers()

        assert headers == {
            "X-Import-Received": "5",
            "X-Import-Valid": "3",
            "X-Import-Inserted": "1",
            "X-Import-Skipped-Invalid": "0",
            "X-Import-Skipped-Duplicate-Email": "1",
            "X-Import-Skipped-Duplicate-Fallback": "1",
            "X-Import-Skipped-Suppressed": "0",
            "X-Import-Skipped-Other": "1",
        }


# ============================================================================
# SINGLE CREATE
# ============================================================================

@pytest.mark.asyncio
class TestCreateProspect:

    async def test_creates_with_defaults(self, db):
        prospect = await prospect_service.create_prospect(
            db, ProspectCreate(company_name="Acme", email=" Jane@Acme.com ", tags=["a", "b"])
        )

        assert prospect.id.startswith("pros_")
        assert prospect.origin == "manual"
        assert prospect.status == "uncontacted"
        assert prospect.normalized_email == "jane@acme.com"
        assert prospect.normalized_domain == "acme.com"
        assert prospect.tags == "a,b"
        assert prospect.archived_at is None and prospect.suppressed_at is None

    async def test_blank_fields_stored_as_null(self, db):
        prospect = await prospect_service.create_prospect(
            db, ProspectCreate(company_name="Acme", email="", phone="  ", role="")
        )

        assert prospect.email is None
        assert prospect.phone is None
        assert prospect.role is None
        assert prospect.normalized_email is None

    async def test_duplicate_returns_existing_id(self, db, make_prospect):
        existing = await make_prospect(db, email="a@b.com")

        with pytest.raises(DuplicateProspect) as exc_info:
            await prospect_service.create_prospect(db, ProspectCreate(email="A@B.com "))

        assert exc_info.value.existing_id == existing.id
        assert exc_info.value.to_dict() == {"error": "DUPLICATE", "existingId": existing.id}

    async def test_suppressed_match_also_blocks(self, db, make_prospect):
        existing = await make_prospect(db, suppressed=True, website="acme.com", contact_name="Jane Doe")

        with pytest.raises(DuplicateProspect) as exc_info:
            await prospect_service.create_prospect(
                db, ProspectCreate(website="https://www.acme.com", contact_name="jane  doe")
            )

        assert exc_info.value.existing_id == existing.id

    async def test_unknown_source_rejected(self, db):
        with pytest.raises(ValidationFailed):
            await prospect_service.create_prospect(db, ProspectCreate(company_name="X", source_id="src_nope"))


# ============================================================================
# BULK IMPORT
# ============================================================================

@pytest.mark.asyncio
class TestBulkImport:

    async def test_mixed_batch(self, db, make_source, make_prospect):
        source = await make_source(db)
        await make_prospect(db, email="taken@acme.com")
        await make_prospect(db, suppressed=True, email="blocked@acme.com")
        await make_prospect(db, website="beta.io", contact_name="Bob Stone")

        rows = [
            {"companyName": "New Co", "email": "new@newco.com"},
            {"email": "TAKEN@acme.com"},
            {"email": "blocked@acme.com"},
            {"website": "www.beta.io", "contactName": "bob stone"},
            {"email": "new@newco.com", "companyName": "Again"},
            {"phone": "123"},
            "not an object",
            {"companyName": "Bad status", "status": "hot"},
            {"contactName": "Numeric Phone", "phone": 441234},
        ]

        result = await prospect_service.bulk_import(db, source.id, rows)

        stats = result.stats
        assert stats.received == 9
        assert stats.valid == 6
        assert stats.inserted == 2
        assert stats.skipped == {
            "invalid": 1,
            "duplicate-email": 2,
            "duplicate-fallback": 1,
            "suppressed": 1,
            "other": 2,
        }
        assert {p.company_name or p.contact_name for p in result.prospects} == {"New Co", "Numeric Phone"}
        assert all(p.origin == "purchased" and p.source_id == source.id for p in result.prospects)
        assert any(p.phone == "441234" for p in result.prospects)

    async def test_nothing_admitted(self, db, make_source, make_prospect):
        source = await make_source(db)
        await make_prospect(db, email="a@b.com")

        with pytest.raises(NoValidProspects) as exc_info:
            await prospect_service.bulk_import(db, source.id, [{"email": "a@b.com"}, {"role": "CEO"}])

        headers = exc_info.value.headers
        assert headers["X-Import-Skipped-Duplicate-Email"] == "1"
        assert headers["X-Import-Skipped-Invalid"] == "1"
        assert headers["X-Import-Inserted"] == "0"

    async def test_empty_rows(self, db, make_source):
        source = await make_source(db)
        with pytest.raises(ValidationFailed):
            await prospect_service.bulk_import(db, source.id, [])

    async def test_unknown_source(self, db):
        with pytest.raises(NotFound):
            await prospect_service.bulk_import(db, "src_missing", [{"email": "a@b.com"}])

    async def test_explicit_origin_kept(self, db, make_source):
        source = await make_source(db)
        result = await prospect_service.bulk_import(db, source.id, [{"email": "x@y.com", "origin": " referral "}])
        assert result.prospects[0].origin == "referral"


# ============================================================================
# LIFECYCLE
# ============================================================================

@pytest.mark.asyncio
class TestLifecycle:

    async def test_delete_requires_archive(self, db, make_prospect):
        prospect = await make_prospect(db, email="a@b.com")

        with pytest.raises(PreconditionFailed):
            await prospect_lifecycle.delete(db, prospect.id)

        await prospect_lifecycle.archive(db, prospect.id)
        await prospect_lifecycle.add_note(db, prospect.id, "called once")

        assert await prospect_lifecycle.delete(db, prospect.id) == prospect.id
        assert await prospect_lifecycle.list_notes(db, prospect.id) == []
        with pytest.raises(NotFound):
            await prospect_lifecycle.get(db, prospect.id)

    async def test_flags_are_independent(self, db, make_prospect):
        prospect = await make_prospect(db, email="a@b.com")

        await prospect_lifecycle.archive(db, prospect.id)
        await prospect_lifecycle.suppress(db, prospect.id)
        await prospect_lifecycle.restore(db, prospect.id)

        refreshed = await prospect_lifecycle.get(db, prospect.id)
        assert refreshed.archived_at is None
        assert refreshed.suppressed_at is not None
        assert refreshed.updated_at is not None

    async def test_unknown_id(self, db):
        with pytest.raises(NotFound):
            await prospect_lifecycle.suppress(db, "pros_missing")
