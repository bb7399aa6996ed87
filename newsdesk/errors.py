"""Exception hierarchy for build failures that terminate a run."""

from __future__ import annotations

from typing import Sequence


class NewsdeskError(Exception):
    """Base class for unrecoverable build errors."""


class ConfigurationError(NewsdeskError):
    """Raised when required settings (such as API credentials) are missing."""


class FetchError(NewsdeskError):
    """Raised when content could not be retrieved from the delivery API."""


class AuthorizationError(FetchError):
    """Raised when the delivery API rejects the access token (401/403)."""

    def __init__(self, environment: str, status_code: int) -> None:
        self.environment = environment
        self.status_code = status_code
        super().__init__(
            f"Authorization failed (HTTP {status_code}) for environment '{environment}'. "
            "Use a Content Delivery API token with access to this environment."
        )


class EnvironmentsExhaustedError(FetchError):
    """Raised when every candidate environment answered with a non-success status."""

    def __init__(self, environments: Sequence[str], content_type: str) -> None:
        self.environments = list(environments)
        self.content_type = content_type
        checked = ", ".join(self.environments)
        super().__init__(
            f"Could not fetch entries. Checked environments: {checked}. "
            f"Verify the environment ID and content type '{content_type}'."
        )


class TemplateError(NewsdeskError):
    """Raised when the listing template cannot be read."""


class TemplateMarkerError(TemplateError):
    """Raised when a required marker pair is missing from the listing template."""

    def __init__(self, start_marker: str, end_marker: str) -> None:
        self.start_marker = start_marker
        self.end_marker = end_marker
        super().__init__(
            f"Listing template is missing the '{start_marker}' ... '{end_marker}' region."
        )
