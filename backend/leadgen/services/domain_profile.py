"""Read-through cache of company website excerpts used as AI context."""

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from sqlalchemy.ext.asyncio import AsyncSession

from leadgen.models import DomainProfile, utcnow

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def html_to_text(html: Optional[str], max_length: int = 8000) -> str:
    """Strip scripts, styles and tags; collapse whitespace; truncate."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = " ".join(soup.get_text(separator=" ").split())
    return text[:max_length]


def build_url_from_domain(domain: Optional[str]) -> Optional[str]:
    if not domain or not domain.strip():
        return None
    value = domain.strip()
    return value if _SCHEME_RE.match(value) else f"https://{value}"


class DomainProfileService:
    """Fetch and cache website text per domain."""

    def __init__(self, http_client: httpx.AsyncClient, max_length: int = 8000):
        self.http_client = http_client
        self.max_length = max_length

    async def _save(
        self,
        db: AsyncSession,
        domain: str,
        raw_excerpt: str,
        status: str,
        error: Optional[str],
    ) -> DomainProfile:
        profile = await db.get(DomainProfile, domain)
        if profile is None:
            profile = DomainProfile(domain=domain)
            db.add(profile)
        profile.raw_excerpt = raw_excerpt
        profile.status = status
        profile.error = error
        profile.last_fetched_at = utcnow()
        await db.commit()
        return profile

    async def fetch_and_cache(self, db: AsyncSession, domain: str) -> DomainProfile:
        """Fetch the site and upsert the result; fetch failures are recorded, not raised."""
        url = build_url_from_domain(domain)
        if not url:
            return await self._save(db, domain, "", "invalid", "invalid_domain")

        raw_excerpt = ""
        status = "ok"
        error = None
        try:
            response = await self.http_client.get(url, follow_redirects=True)
            if response.is_success:
                raw_excerpt = html_to_text(response.text, self.max_length)
            else:
                status = "error"
                error = f"HTTP {response.status_code}"
        except httpx.HTTPError as e:
            status = "error"
            error = str(e) or e.__class__.__name__

        if status != "ok":
            logger.warning(f"Domain fetch failed for {domain}: {error}")
        return await self._save(db, domain, raw_excerpt, status, error)

    async def get_or_fetch(self, db: AsyncSession, domain: Optional[str]) -> Optional[DomainProfile]:
        """Return a usable cached profile or refresh it."""
        if not domain:
            return None

        existing = await db.get(DomainProfile, domain)
        if existing and existing.status == "ok" and existing.raw_excerpt:
            logger.debug(f"Domain profile cache hit: {domain}")
            return existing

        return await self.fetch_and_cache(db, domain)
