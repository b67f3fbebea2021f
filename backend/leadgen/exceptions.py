"""Service-level errors, translated to HTTP responses in leadgen.main."""

from typing import Any, Dict, Optional

from fastapi import status


class LeadGenError(Exception):
    """Base class for errors raised by services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationFailed(LeadGenError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(LeadGenError):
    status_code = status.HTTP_404_NOT_FOUND


class PreconditionFailed(LeadGenError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateProspect(LeadGenError):
    """A prospect with the same identity already exists."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, existing_id: Optional[str]):
        super().__init__("DUPLICATE", existingId=existing_id)
        self.existing_id = existing_id


class NoValidProspects(LeadGenError):
    """A bulk import admitted zero rows."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, stats):
        super().__init__("No valid prospects to import")
        self.stats = stats

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return self.stats.as_headers()


class UpstreamError(LeadGenError):
    status_code = status.HTTP_502_BAD_GATEWAY


class AINotConfigured(LeadGenError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "AI image generation is not configured"):
        super().__init__(message)
