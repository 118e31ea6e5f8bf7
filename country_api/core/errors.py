"""Country API - Error Taxonomy.

Every failure a request can surface is one of these. The HTTP layer maps
them to status codes in ``country_api.main``.
"""

from typing import Dict, Optional


class CountryAPIError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UpstreamUnavailable(CountryAPIError):
    """An external data source could not be reached or answered badly."""

    status_code = 503

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not fetch data from {source}")


class StorageFailure(CountryAPIError):
    """The database rejected a read or write."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class NotFound(CountryAPIError):
    """The requested resource does not exist."""

    status_code = 404


class ValidationFailed(CountryAPIError):
    """Malformed input. ``details`` maps each invalid field to a reason."""

    status_code = 400

    def __init__(self, details: Optional[Dict[str, str]] = None):
        self.details = details or {}
        super().__init__("Validation failed")
