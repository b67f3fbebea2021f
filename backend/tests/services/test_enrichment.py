# tests/services/test_enrichment.py
"""
Tests for enrichment previews

Coverage:
- Heuristic scoring and labels
- AI output merged over heuristic values
- Prompt context (ICP, excerpts, notes)
"""

import json

import httpx
import pytest

from leadgen.models import Prospect, ProspectNote, Source
from leadgen.services.domain_profile import DomainProfileService
from leadgen.services.enrichment import (
    NO_ICP_CONTEXT,
    EnrichmentService,
    fit_label,
    heuristic_preview,
    icp_context,
    merge_ai_preview,
    notes_text,
    parse_ai_previews,
)


def prospect(**fields) -> Prospect:
    fields.setdefault("id", "pros_test")
    fields.setdefault("status", "uncontacted")
    return Prospect(**fields)


# ============================================================================
# HEURISTIC
# ============================================================================

@pytest.mark.unit
class TestHeuristicPreview:

    def test_bare_prospect(self):
        preview = heuristic_preview(prospect(company_name="Plain Ltd"))
        assert preview.fit_score == 40
        assert preview.fit_label == "cool"
        assert preview.primary_pain.startswith("Too much manual work")
        assert preview.summary.startswith("Plain Ltd looks like a cool fit.")

    def test_complete_marketing_agency(self):
        preview = heuristic_preview(prospect(
            company_name="Bright Marketing",
            email="a@bright.com",
            phone="0123",
            website="bright.com",
        ))
        assert preview.fit_score == 90
        assert preview.fit_label == "hot"
        assert preview.primary_pain == "Juggling too many clients and campaigns manually."

    def test_finance_keyword_from_role(self):
        preview = heuristic_preview(prospect(email="x@y.com", role="Head of Finance"))
        assert preview.fit_score == 70
        assert preview.fit_label == "warm"
        assert "invoices" in preview.primary_pain

    def test_consulting_from_tags(self):
        preview = heuristic_preview(prospect(tags="advisory,smb"))
        assert preview.fit_score == 50
        assert "meetings" in preview.primary_pain

    def test_unnamed_company(self):
        assert heuristic_preview(prospect()).summary.startswith("This company looks like")

    @pytest.mark.parametrize("score,label", [(100, "hot"), (80, "hot"), (79, "warm"), (60, "warm"), (59, "cool"), (40, "cool"), (39, "cold")])
    def test_labels(self, score, label):
        assert fit_label(score) == label


@pytest.mark.unit
class TestMergeAiPreview:

    def test_ai_overrides_and_clamps(self):
        fallback = heuristic_preview(prospect(company_name="Acme"))
        merged = merge_ai_preview(fallback, {"fitScore": 140, "fitLabel": "hot", "summary": "Great fit."})

        assert merged.fit_score == 100
        assert merged.fit_label == "hot"
        assert merged.summary == "Great fit."
        assert merged.primary_pain == fallback.primary_pain

    def test_non_numeric_score_falls_back(self):
        fallback = heuristic_preview(prospect())
        assert merge_ai_preview(fallback, {"fitScore": "high"}).fit_score == fallback.fit_score

    def test_missing_item(self):
        fallback = heuristic_preview(prospect())
        assert merge_ai_preview(fallback, None) is fallback

    def test_wrong_typed_fields_ignored(self):
        fallback = heuristic_preview(prospect(company_name="Acme"))
        merged = merge_ai_preview(fallback, {"fitLabel": 7, "primaryPain": ["x"], "summary": "  "})

        assert merged.fit_label == fallback.fit_label
        assert merged.primary_pain == fallback.primary_pain
        assert merged.summary == fallback.summary

    def test_unknown_label_ignored(self):
        fallback = heuristic_preview(prospect())
        assert merge_ai_preview(fallback, {"fitLabel": "lukewarm"}).fit_label == fallback.fit_label


@pytest.mark.unit
class TestParseAiPreviews:

    def test_keyed_by_prospect_id(self):
        raw = json.dumps([{"prospectId": "pros_1", "fitScore": 70}, {"fitScore": 10}, "junk"])
        assert parse_ai_previews(raw) == {"pros_1": {"prospectId": "pros_1", "fitScore": 70}}

    def test_non_string_ids_skipped(self):
        raw = json.dumps([{"prospectId": ["x"], "fitScore": 50}, {"prospectId": {"a": 1}}, {"prospectId": 3}])
        assert parse_ai_previews(raw) == {}

    @pytest.mark.parametrize("raw", ["", "no json", '{"prospectId": "pros_1"}'])
    def test_not_an_array(self, raw):
        assert parse_ai_previews(raw) is None


@pytest.mark.unit
class TestPromptContext:

    def test_icp_lines(self):
        source = Source(name="Agencies", target_industry="Marketing", role_focus="Founders")
        assert icp_context(source) == (
            "Campaign/source name: Agencies. Target industry: Marketing. "
            "Primary buyer persona / role focus: Founders."
        )

    def test_no_source(self):
        assert icp_context(None) == NO_ICP_CONTEXT

    def test_notes_capped(self):
        notes = [ProspectNote(content=f"note {i}") for i in range(7)]
        assert notes_text(notes) == "note 0 | note 1 | note 2 | note 3 | note 4"
        assert len(notes_text([ProspectNote(content="x" * 2000)])) == 1000
        assert notes_text([]) == "none available"


# ============================================================================
# SERVICE
# ============================================================================

@pytest.mark.asyncio
class TestEnrichmentService:

    def _service(self, http_client, llm):
        return EnrichmentService(DomainProfileService(http_client), llm)

    async def test_heuristic_without_llm(self, db, make_source, make_prospect, upstream):
        source = await make_source(db)
        await make_prospect(db, source_id=source.id, company_name="Acme", email="a@acme.com")
        await make_prospect(db, source_id=source.id, suppressed=True, email="s@acme.com")

        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http_client:
            service = self._service(http_client, None)
            previews = await service.preview_source(db, source.id)

        assert [p.company_name for p in previews] == ["Acme"]
        assert previews[0].fit_score == 60
        assert previews[0].fit_label == "warm"
        assert upstream.requests == []

    async def test_llm_output_merged(self, db, make_source, make_prospect, upstream, fake_llm):
        source = await make_source(db, target_industry="Retail")
        first = await make_prospect(db, source_id=source.id, company_name="Acme", website="acme.com")
        second = await make_prospect(db, source_id=source.id, company_name="Beta")
        db.add(ProspectNote(prospect_id=first.id, content='Asked about "pricing"'))
        await db.commit()

        fake_llm.reply = "```json\n" + json.dumps([
            {"prospectId": first.id, "fitScore": 85, "fitLabel": "hot", "primaryPain": "Opportunity to streamline quoting"},
        ]) + "\n```"

        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http_client:
            service = self._service(http_client, fake_llm)
            previews = {p.prospect_id: p for p in await service.preview_source(db, source.id)}

        assert previews[first.id].fit_score == 85
        assert previews[first.id].primary_pain == "Opportunity to streamline quoting"
        assert previews[second.id] == heuristic_preview(second)

        system_prompt, user_prompt = fake_llm.prompts[0]
        assert "Target industry: Retail." in system_prompt
        assert "WEBSITE_DOMAIN: acme.com" in user_prompt
        assert "Acme We build widgets." in user_prompt
        assert 'NOTES: "Asked about \\"pricing\\""' in user_prompt
        assert [r.url.host for r in upstream.requests] == ["acme.com"]

    async def test_malformed_items_fall_back(self, db, make_source, make_prospect, upstream, fake_llm):
        source = await make_source(db)
        stored = await make_prospect(db, source_id=source.id, company_name="Acme")
        fake_llm.reply = json.dumps([
            {"prospectId": ["x"], "fitScore": 50},
            {"prospectId": stored.id, "fitLabel": 7, "summary": None},
        ])

        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http_client:
            service = self._service(http_client, fake_llm)
            previews = await service.preview_source(db, source.id)

        assert previews == [heuristic_preview(stored)]

    async def test_llm_failure_falls_back(self, db, make_source, make_prospect, upstream, fake_llm):
        source = await make_source(db)
        stored = await make_prospect(db, source_id=source.id, company_name="Acme")
        fake_llm.error = RuntimeError("rate limited")

        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as http_client:
            service = self._service(http_client, fake_llm)
            previews = await service.preview_source(db, source.id)

        assert previews == [heuristic_preview(stored)]
