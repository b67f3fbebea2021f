"""
Enrichment preview for a source's prospects.

A keyword heuristic always produces a preview. When an LLM client is
available, its per-prospect assessment overrides the heuristic fields it
supplies; anything missing falls back to the heuristic.
"""

import json
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.config import settings
from leadgen.models import Prospect, ProspectNote, Source
from leadgen.schemas import EnrichmentPreview
from leadgen.services.domain_profile import DomainProfileService
from leadgen.services.llm_client import LLMClient, extract_json
from leadgen.services.normalization import NormalizationService

logger = logging.getLogger(__name__)

MAX_NOTES = 5
MAX_NOTES_LENGTH = 1000
MAX_EXCERPT_LENGTH = 1500

DEFAULT_PAIN = "Too much manual work in sales, operations, and follow-up."

# Keyword families, checked in order; first match wins.
SCORE_KEYWORDS = (
    ("agency", "marketing"),
    ("consult", "advisory"),
    ("account", "finance"),
)
PAIN_KEYWORDS = (
    (("agency", "marketing"), "Juggling too many clients and campaigns manually."),
    (("account", "finance"), "Heavy admin around invoices, statements, and reconciliations."),
    (("consult", "advisory"), "Lots of meetings and follow-ups that don't turn into structured actions."),
)

FIT_LABELS = ("hot", "warm", "cool", "cold")

NO_ICP_CONTEXT = (
    "No additional ICP context provided; assume common B2B pains around "
    "operations, sales process, and customer experience."
)


def _filled(value: Optional[str]) -> bool:
    return bool(value and str(value).strip())


def _text_or(value: Any, default: str) -> str:
    return value.strip() if isinstance(value, str) and value.strip() else default


def fit_label(score: int) -> str:
    if score >= 80:
        return "hot"
    if score >= 60:
        return "warm"
    if score < 40:
        return "cold"
    return "cool"


def clamp_score(score: float) -> int:
    return int(min(max(score, 0), 100))


def heuristic_preview(prospect: Prospect) -> EnrichmentPreview:
    """Score a prospect from contact completeness and industry keywords."""
    text = f"{prospect.tags or ''} {prospect.company_name or ''} {prospect.role or ''}".lower()

    score = 40
    if _filled(prospect.email):
        score += 20
    if _filled(prospect.phone):
        score += 10
    if _filled(prospect.website):
        score += 10
    if any(word in text for family in SCORE_KEYWORDS for word in family):
        score += 10
    score = clamp_score(score)

    label = fit_label(score)
    pain = DEFAULT_PAIN
    for words, family_pain in PAIN_KEYWORDS:
        if any(word in text for word in words):
            pain = family_pain
            break

    name = prospect.company_name or "This company"
    summary = (
        f"{name} looks like a {label} fit. "
        f"They likely suffer from: {pain} "
        f"AI-led automation and better workflows could free time and create cleaner follow-up."
    )

    return EnrichmentPreview(
        prospect_id=prospect.id,
        company_name=prospect.company_name or None,
        contact_name=prospect.contact_name or None,
        email=prospect.email or None,
        website=prospect.website or None,
        status=prospect.status or None,
        fit_score=score,
        fit_label=label,
        primary_pain=pain,
        summary=summary,
    )


def merge_ai_preview(fallback: EnrichmentPreview, ai: Optional[Dict[str, Any]]) -> EnrichmentPreview:
    """Overlay AI-supplied fields on the heuristic preview."""
    if not ai:
        return fallback

    raw_score = ai.get("fitScore")
    if isinstance(raw_score, (int, float)) and not isinstance(raw_score, bool):
        score = clamp_score(raw_score)
    else:
        score = fallback.fit_score

    label = ai.get("fitLabel")
    if label not in FIT_LABELS:
        label = fallback.fit_label

    return fallback.model_copy(update={
        "fit_score": score,
        "fit_label": label,
        "primary_pain": _text_or(ai.get("primaryPain"), fallback.primary_pain),
        "summary": _text_or(ai.get("summary"), fallback.summary),
    })


def icp_context(source: Optional[Source]) -> str:
    if source is None:
        return NO_ICP_CONTEXT

    lines = []
    if source.name:
        lines.append(f"Campaign/source name: {source.name}.")
    if source.target_industry:
        lines.append(f"Target industry: {source.target_industry}.")
    if source.company_size:
        lines.append(f"Typical company size: {source.company_size}.")
    if source.role_focus:
        lines.append(f"Primary buyer persona / role focus: {source.role_focus}.")
    if source.main_angle:
        lines.append(f"Primary commercial angle: {source.main_angle}.")
    return " ".join(lines) if lines else NO_ICP_CONTEXT


def notes_text(notes: List[ProspectNote]) -> str:
    combined = " | ".join(
        n.content.strip() for n in notes[:MAX_NOTES] if n.content and n.content.strip()
    )
    if not combined:
        return "none available"
    return combined[:MAX_NOTES_LENGTH]


def _quoted(value: str) -> str:
    return value.replace('"', '\\"')


def build_system_prompt(context: str) -> str:
    company = settings.COMPANY_NAME
    return f"""
You are an assistant helping {company} assess B2B prospects for fit.
Return JSON ONLY, no extra text.
Rules:
- primaryPain must be a real business problem (manual processes/inefficiency, poor lead handling, weak operations, revenue leakage, poor customer experience).
- NEVER use or imply "lack of publicly available information", "limited online presence", "insufficient data", inability to research, or mention Google/LinkedIn/research limits.
- If website info is weak or missing, infer likely pains for this type of company; keep language neutral and do not comment on their online presence.
Tone and language constraints:
- Describe pains as opportunities to improve or streamline, not as failures.
- Avoid harsh or judgemental words such as: inefficient, poor, weak, broken, outdated, struggling, chaotic, disorganized.
- Any summaries must not blame or criticise the company; position {company} as helping them get more from what they already do.
CAMPAIGN CONTEXT:
{context}
Use this context to prioritize pains, fitScore, and messaging that match the target industry/role/angle.
Use WEBSITE_EXCERPT and NOTES (if available) to infer pains and fit; NOTES should influence fitScore, primaryPain, and summary when present.
For each prospect, output:
- prospectId: the provided PROSPECT_ID
- fitScore: integer 0-100
- fitLabel: one of hot, warm, cool, cold
- primaryPain: short description of the likely main pain (no meta-comments about missing data)
- summary: 2-3 sentence summary tailored to the company; uncertainty should be implicit ("may", "likely")
"""


def build_prospect_block(prospect: Prospect, domain: Optional[str], excerpt: str, notes: str) -> str:
    excerpt = excerpt[:MAX_EXCERPT_LENGTH] if excerpt and excerpt.strip() else "none available"
    return "\n".join([
        f"PROSPECT_ID: {prospect.id}",
        f"COMPANY_NAME: {prospect.company_name or 'Unknown company'}",
        f"CONTACT_NAME: {prospect.contact_name or 'Unknown contact'}",
        f"EMAIL: {prospect.email or 'Unknown email'}",
        f"WEBSITE: {prospect.website or 'Unknown website'}",
        f"WEBSITE_DOMAIN: {domain or 'none'}",
        f'WEBSITE_EXCERPT: "{_quoted(excerpt)}"',
        f'NOTES: "{_quoted(notes)}"',
        "---",
    ])


def parse_ai_previews(raw: str) -> Optional[Dict[str, Dict[str, Any]]]:
    """Map prospectId -> AI item, or None when the reply is not a JSON array."""
    payload = extract_json(raw)
    if payload is None:
        return None
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Failed to parse AI enrichment JSON, falling back to heuristic")
        return None
    if not isinstance(parsed, list):
        return None
    return {
        item["prospectId"]: item
        for item in parsed
        if isinstance(item, dict) and isinstance(item.get("prospectId"), str) and item["prospectId"]
    }


class EnrichmentService:
    """Builds enrichment previews for every non-suppressed prospect of a source."""

    def __init__(self, domain_profiles: DomainProfileService, llm_client: Optional[LLMClient]):
        self.domain_profiles = domain_profiles
        self.llm_client = llm_client

    async def _notes_by_prospect(self, db: AsyncSession, ids: List[str]) -> Dict[str, List[ProspectNote]]:
        result = await db.execute(
            select(ProspectNote)
            .where(ProspectNote.prospect_id.in_(ids))
            .order_by(ProspectNote.created_at.desc())
        )
        grouped = defaultdict(list)
        for note in result.scalars():
            grouped[note.prospect_id].append(note)
        return grouped

    async def _excerpts(self, db: AsyncSession, domains: List[str]) -> Dict[str, str]:
        excerpts = {}
        for domain in domains:
            profile = await self.domain_profiles.get_or_fetch(db, domain)
            excerpts[domain] = (profile.raw_excerpt or "") if profile else ""
        return excerpts

    async def preview_source(self, db: AsyncSession, source_id: str) -> List[EnrichmentPreview]:
        result = await db.execute(
            select(Prospect)
            .where(Prospect.source_id == source_id, Prospect.suppressed_at.is_(None))
            .order_by(Prospect.created_at.desc())
        )
        prospects = list(result.scalars())
        if not prospects:
            return []

        fallbacks = [heuristic_preview(p) for p in prospects]
        if self.llm_client is None:
            return fallbacks

        source = await db.get(Source, source_id)
        domains = {
            p.id: NormalizationService.extract_domain(p.website, p.email) for p in prospects
        }
        excerpts = await self._excerpts(db, list(dict.fromkeys(d for d in domains.values() if d)))
        notes = await self._notes_by_prospect(db, [p.id for p in prospects])

        blocks = "\n".join(
            build_prospect_block(
                p,
                domains[p.id],
                excerpts.get(domains[p.id], "") if domains[p.id] else "",
                notes_text(notes.get(p.id, [])),
            )
            for p in prospects
        )
        user_prompt = (
            f"Here are prospects to enrich:\n\n{blocks}\n\n"
            "Return a JSON array of objects in the same order with keys: "
            "prospectId, fitScore, fitLabel, primaryPain, summary."
        )

        try:
            raw = await self.llm_client.complete(build_system_prompt(icp_context(source)), user_prompt)
        except Exception as e:
            logger.error(f"Error calling LLM for enrichment preview: {e}")
            return fallbacks

        ai_items = parse_ai_previews(raw)
        if ai_items is None:
            return fallbacks

        logger.info(f"AI enrichment returned {len(ai_items)} items for source {source_id}")
        return [merge_ai_preview(fb, ai_items.get(fb.prospect_id)) for fb in fallbacks]
