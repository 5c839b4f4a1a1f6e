# app/core/errors.py
"""
Error taxonomy shared by the scrape and news pipelines.

Every error that may reach a caller knows its HTTP status and renders its own
JSON body through ``to_payload()``; ``app.main`` has a single handler for the
whole family.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class NewsCoreError(Exception):
    status_code: int = 500
    error: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message or self.error)
        if message:
            self.error = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.details:
            payload["details"] = self.details
        return payload


class InputError(NewsCoreError):
    """Missing or malformed caller input. Never retried."""

    status_code = 400
    error = "Invalid request"


class DomainNotAllowedError(InputError):
    status_code = 403
    error = "Only Business Insider URLs are supported"


class FetchError(NewsCoreError):
    """Outbound call failed at the transport level."""

    error = "Failed to fetch upstream resource"


class FetchTimeoutError(FetchError, TimeoutError):
    status_code = 504
    error = "Upstream request timed out"


class UpstreamError(FetchError):
    """A third-party source answered with a non-2xx status."""

    error = "Upstream source returned an error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: int,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details, status_code=status_code)


class ExtractionEmptyResult(NewsCoreError):
    """The page parsed fine but yielded no usable title or body text."""

    status_code = 422
    error = "Article content could not be retrieved"

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["statusCode"] = self.status_code
        return payload


class FeedUnavailableError(NewsCoreError):
    error = "Failed to fetch Indonesian investment news"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "isTranslating": False}


class SearchConfigError(NewsCoreError):
    error = "News API key is not configured"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error}


class TranslationProviderError(Exception):
    """Raised by a single translation provider; the gateway always absorbs it."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
