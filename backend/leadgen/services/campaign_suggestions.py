"""Social post drafting and image generation for campaigns."""

import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from leadgen.config import settings
from leadgen.exceptions import AINotConfigured, LeadGenError
from leadgen.models import Campaign
from leadgen.schemas import PostSuggestion
from leadgen.services.llm_client import LLMClient, extract_json

logger = logging.getLogger(__name__)


FALLBACK_SUGGESTIONS = [
    PostSuggestion(
        channel="linkedin",
        tone="educational",
        content=(
            "Many service businesses are still juggling manual processes, even though it slows "
            "everything down. This campaign explores how bespoke hosted AI software can automate "
            "the boring work, save time and money, improve customer experience and increase profit "
            "without taking on new staff. If this resonates, comment or reply and I will share a "
            "simple outline for your context."
        ),
        image_idea=(
            "Clean, modern illustration of a small business team looking at a simple AI dashboard "
            "showing time saved and happier customers."
        ),
    ),
    PostSuggestion(
        channel="twitter",
        tone="punchy",
        content=(
            "Too much manual work, not enough time, no budget to hire? Bespoke hosted AI software "
            "can automate your processes, improve CX and grow profit without extra headcount. This "
            "campaign is built to show real examples. #AI #automation"
        ),
        image_idea='Minimal graphic with the words "Less manual work, more growth" and a subtle AI icon.',
    ),
    PostSuggestion(
        channel="facebook",
        tone="conversational",
        content=(
            'We are working with businesses who feel stuck between "too many manual tasks" and '
            '"not ready to hire more people". This campaign shares how bespoke hosted AI software '
            "can quietly automate core workflows, free your team up and make customers happier "
            "without increasing staff costs. Comment or message if you would like ideas for your "
            "own business."
        ),
        image_idea=(
            "Friendly photo of a small team in a relaxed meeting, with a laptop screen showing an "
            "automation workflow."
        ),
    ),
    PostSuggestion(
        channel="instagram",
        tone="caption",
        content=(
            "Too many tasks. Not enough hours. No room to hire.\n\n"
            "Bespoke hosted AI software can automate your processes, save time and money and level "
            "up your customer experience without growing the team.\n\n"
            'Want ideas for your business? DM "AI" and we will map a few quick wins.'
        ),
        image_idea=(
            "Before/after carousel concept: first slide cluttered to-do list, second slide clean "
            'screen with "AI-powered workflow" highlighted.'
        ),
    ),
]

SUGGESTION_SHAPE = """{
  "suggestions": [
    { "channel": "linkedin",  "tone": "educational",    "content": "...", "imageIdea": "..." },
    { "channel": "twitter",   "tone": "punchy",         "content": "...", "imageIdea": "..." },
    { "channel": "facebook",  "tone": "conversational", "content": "...", "imageIdea": "..." },
    { "channel": "instagram", "tone": "caption",        "content": "...", "imageIdea": "..." }
  ]
}"""


def build_suggestion_prompt(campaign: Campaign) -> str:
    details = [f"Campaign name: {campaign.name}"]
    if campaign.objective:
        details.append(f"Objective: {campaign.objective}")
    if campaign.target_description:
        details.append(f"Target audience: {campaign.target_description}")

    return (
        f"You are helping a B2B AI consultancy called {settings.COMPANY_NAME} plan social posts "
        f"for a lead generation campaign.\n\n"
        f"{settings.COMPANY_NAME} offers {settings.COMPANY_PITCH}.\n\n"
        + "\n".join(details)
        + "\n\nCreate exactly 4 social post ideas:\n"
        "1) LinkedIn - educational story style\n"
        "2) Twitter (X) - short and punchy hook\n"
        "3) Facebook - conversational with soft CTA\n"
        "4) Instagram - caption style with emojis\n\n"
        "For each suggestion, include:\n"
        "- channel\n- tone\n- content\n"
        "- imageIdea: a short description of the visual that should accompany the post "
        "(no more than 2 lines).\n\n"
        "Return STRICT JSON ONLY, no extra text.\nShape:\n\n"
        f"{SUGGESTION_SHAPE}\n"
    )


def build_image_prompt(idea: str, channel: Optional[str]) -> str:
    return (
        f"Create a clean, modern marketing visual for a B2B AI consultancy called {settings.COMPANY_NAME}.\n\n"
        f"{settings.COMPANY_NAME} offers {settings.COMPANY_PITCH}.\n\n"
        f"Channel: {channel or 'generic'}\n"
        f"Visual idea: {idea}\n\n"
        "The style should be professional, minimal, and suitable for LinkedIn / Twitter / Facebook / Instagram.\n"
        "Avoid any text inside the image (no big slogans or UI text), focus on strong, clear visuals.\n"
    )


def parse_suggestions(raw: str) -> Optional[List[PostSuggestion]]:
    """Validate an LLM reply; None means the caller should use the fallback list."""
    if not raw:
        logger.warning("LLM suggestions returned empty output, using fallback")
        return None

    try:
        parsed = json.loads(extract_json(raw) or raw)
    except json.JSONDecodeError:
        logger.warning("Failed to parse LLM suggestions JSON, using fallback")
        return None

    if not isinstance(parsed, dict) or not isinstance(parsed.get("suggestions"), list):
        logger.warning("LLM suggestions JSON shape invalid, using fallback")
        return None

    suggestions = []
    for item in parsed["suggestions"]:
        if not isinstance(item, dict) or not isinstance(item.get("content"), str):
            continue
        try:
            suggestions.append(PostSuggestion(
                channel=item.get("channel") or "linkedin",
                tone=item.get("tone") or None,
                content=item["content"],
                image_idea=item.get("imageIdea") or item.get("image_idea") or None,
            ))
        except ValidationError:
            logger.warning(f"Skipping malformed LLM suggestion: {item}")
    return suggestions or None


class CampaignSuggestionService:
    """Drafts social posts for a campaign and renders image ideas."""

    def __init__(self, llm_client: Optional[LLMClient]):
        self.llm_client = llm_client

    async def suggest_posts(self, campaign: Campaign) -> List[PostSuggestion]:
        if self.llm_client is None:
            return list(FALLBACK_SUGGESTIONS)

        try:
            raw = await self.llm_client.complete(None, build_suggestion_prompt(campaign))
        except Exception as e:
            logger.error(f"Error calling LLM for campaign suggestions: {e}")
            return list(FALLBACK_SUGGESTIONS)

        return parse_suggestions(raw) or list(FALLBACK_SUGGESTIONS)

    async def image_from_idea(self, idea: str, channel: Optional[str]) -> str:
        """
        Generate a marketing visual for an image idea.

        Raises AINotConfigured without a client and LeadGenError (500) when
        generation fails or yields no URL.
        """
        if self.llm_client is None:
            logger.error("LLM not configured for image generation")
            raise AINotConfigured()

        try:
            url = await self.llm_client.generate_image(build_image_prompt(idea, channel))
        except Exception as e:
            logger.error(f"Error generating image from idea: {e}")
            raise LeadGenError("Failed to generate image")

        if not url:
            raise LeadGenError("Failed to generate image")
        return url
