"""Error hierarchy for the categorization engine.

Each error carries the HTTP status the API layer answers with, so handlers
can translate engine failures without inspecting their type.
"""

from typing import Any


class CategorizationError(Exception):
    """Base class for every error the engine or its callers raise."""

    http_status = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.message = message
        self.details = details or {}
        if http_status is not None:
            self.http_status = http_status
        super().__init__(message)


class ConfigurationError(CategorizationError):
    """A required credential or setting is missing.

    Blocking and not retryable; raised before any network call.
    """

    http_status = 400


class UpstreamUnavailable(CategorizationError):
    """The language-model service could not be reached or returned an error status.

    The caller may retry the whole batch.
    """

    http_status = 502


class InvalidResponse(CategorizationError):
    """The language-model service answered with output that cannot be parsed."""

    http_status = 502


class NotFound(CategorizationError):
    http_status = 404


class Unauthorized(CategorizationError):
    """The referenced entity belongs to a different user."""

    http_status = 403
