"""Prospect identity normalization."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
_HOSTNAME_RE = re.compile(r"^[^\s/?#@:]+$")


@dataclass(frozen=True)
class IdentityKeys:
    """Normalized identity fields of one candidate prospect."""
    email: Optional[str] = None
    domain: Optional[str] = None
    contact_name: Optional[str] = None

    @property
    def email_key(self) -> Optional[str]:
        return f"email:{self.email}" if self.email else None

    @property
    def fallback_key(self) -> Optional[str]:
        if self.domain and self.contact_name:
            return f"domain+name:{self.domain}:{self.contact_name}"
        return None

    @property
    def primary_key(self) -> Optional[str]:
        """
        The single key used to match this candidate.

        Email wins whenever present; domain+name is only consulted when
        there is no email, so two people at one company are not conflated.
        """
        return self.email_key or self.fallback_key


class NormalizationService:
    """Turn raw contact fields into canonical comparison keys."""

    @staticmethod
    def normalize_email(email: Any) -> Optional[str]:
        """
        Normalize email address.
        - Strip whitespace
        - Convert to lowercase
        """
        if not email or not isinstance(email, str):
            return None
        return email.strip().lower() or None

    @staticmethod
    def normalize_name(name: Any) -> Optional[str]:
        """Lowercase, trim and collapse internal whitespace."""
        if not name or not isinstance(name, str):
            return None
        return " ".join(name.lower().split()) or None

    @staticmethod
    def _host_from_website(website: str) -> Optional[str]:
        value = website.strip()
        if not value:
            return None

        url = value if _SCHEME_RE.match(value) else f"https://{value}"
        try:
            host = urlsplit(url).hostname
        except ValueError:
            logger.debug(f"Unparseable website: {website}")
            return None

        if not host or not _HOSTNAME_RE.match(host):
            return None
        return _WWW_RE.sub("", host).lower() or None

    @classmethod
    def extract_domain(cls, website: Any = None, email: Any = None) -> Optional[str]:
        """
        Extract bare domain, preferring the website over the email.
        - Add https:// if no scheme
        - Strip leading www.
        - Lowercase
        """
        if website and isinstance(website, str):
            host = cls._host_from_website(website)
            if host:
                return host

        if email and isinstance(email, str) and "@" in email:
            domain_part = email.split("@")[1].strip()
            if domain_part:
                return _WWW_RE.sub("", domain_part).lower() or None

        return None

    def identity_keys(
        self,
        email: Any = None,
        website: Any = None,
        contact_name: Any = None,
    ) -> IdentityKeys:
        """Compute the identity key material for a candidate."""
        return IdentityKeys(
            email=self.normalize_email(email),
            domain=self.extract_domain(website, email),
            contact_name=self.normalize_name(contact_name),
        )


# Singleton instance
normalization_service = NormalizationService()
