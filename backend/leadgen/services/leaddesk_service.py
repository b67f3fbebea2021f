"""Lead Desk CRM integration."""

import logging
from typing import Any, Dict, Optional

import httpx

from leadgen.exceptions import UpstreamError
from leadgen.models import Prospect, Source, utcnow

logger = logging.getLogger(__name__)


class LeadDeskService:
    """Push qualified prospects to Lead Desk as leads."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, default_owner: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.default_owner = default_owner

    def build_lead_payload(self, prospect: Prospect, source: Optional[Source]) -> Dict[str, Any]:
        source_name = (source.name if source else None) or prospect.source_id or "lead-gen"
        owner = (prospect.owner_name or "").strip() or self.default_owner
        created_at = prospect.created_at or utcnow()

        return {
            "name": prospect.contact_name or prospect.company_name or "Lead from Lead Gen",
            "company": prospect.company_name or prospect.contact_name or "Lead Gen Prospect",
            "email": prospect.email or None,
            "phone": prospect.phone or None,
            "value": None,
            "source": source_name,
            "createdAt": created_at.isoformat(),
            "address": None,
            "ownerName": owner,
        }

    async def push_prospect(self, prospect: Prospect, source: Optional[Source]) -> Any:
        """
        Create a Lead Desk lead for the prospect.

        Raises UpstreamError on transport failure or a non-2xx reply.
        """
        payload = self.build_lead_payload(prospect, source)
        try:
            response = await self.http_client.post(f"{self.base_url}/leads", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Lead Desk request failed for {prospect.id}: {e}")
            raise UpstreamError("Failed to create lead in Lead Desk", status=None)

        if not response.is_success:
            logger.error(
                f"Lead Desk create lead failed for {prospect.id}: "
                f"{response.status_code} {response.text[:200]}"
            )
            raise UpstreamError("Failed to create lead in Lead Desk", status=response.status_code)

        logger.info(f"Pushed prospect {prospect.id} to Lead Desk")
        return response.json()
