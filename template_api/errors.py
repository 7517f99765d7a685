from __future__ import annotations
from typing import Optional


class InvalidSelections(ValueError):
    """Inbound selections are missing a required field."""


class GenerationError(Exception):
    """Base for provider-side failures; the orchestrator falls through on these."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class MissingCredential(GenerationError):
    """No API key configured for the provider; no call was attempted."""


class ProviderTimeout(GenerationError):
    """The remote call did not complete within its deadline."""


class TransportError(GenerationError):
    """Connection failure or non-2xx HTTP status."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, provider)
        self.status_code = status_code


class IncompleteResponse(GenerationError):
    """The backend replied but left out html, css or js."""


class MalformedPayload(GenerationError):
    """The backend text could not be read as a structured object."""
