"""Error taxonomy for the search and autocomplete paths.

Only TransportError and SchemaConformanceError ever reach the user, and only
through the orchestrator's error message. Suggestion failures are absorbed.
"""

from typing import List, Optional


class TripFinderError(Exception):
    """Base class for all trip finder errors."""


class QueryValidationError(TripFinderError):
    """Required form fields are missing or unusable; no request was made."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.missing = missing or []


class SuggestionLookupError(TripFinderError):
    """Autocomplete lookup failed. Never surfaced to the user."""


class TransportError(TripFinderError):
    """The text-generation call itself failed (network, auth, quota, model)."""


class SchemaConformanceError(TripFinderError):
    """Response text was not JSON or did not match the expected shape."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text
