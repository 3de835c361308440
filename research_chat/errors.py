"""Error kinds raised by the research chat workflow.

Only ``UnauthorizedError`` is surfaced to callers with its own status code.
Everything else collapses into a generic internal-error response at the
route boundary; the distinct types exist so logs say which stage failed.
"""
from __future__ import annotations


class ResearchChatError(Exception):
    """Base class for workflow errors."""


class UnauthorizedError(ResearchChatError):
    """No authenticated caller is attached to the request."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class MalformedUpstreamResponse(ResearchChatError):
    """An external provider answered with a payload that fails validation."""

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"Malformed {provider} response: {detail}")


class StoreError(ResearchChatError):
    """A store write did not return the row it was expected to return."""

    def __init__(self, table: str, detail: str):
        self.table = table
        self.detail = detail
        super().__init__(f"{table}: {detail}")


class AuthServiceError(ResearchChatError):
    """The session-verification service could not be reached or failed."""
