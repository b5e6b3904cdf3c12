"""
quackci.core.exceptions - Custom Exception Hierarchy
======================================================

Components raise and catch specific exception types that carry contextual
information instead of bare strings.

Exception Hierarchy:
    QuackError (base)
        ├── ConfigurationError      - Missing org/token, invalid config file
        ├── CIClientError           - Transport failure or HTTP >= 400 on a GET
        ├── TriggerError            - HTTP >= 400 from the trigger endpoint
        ├── MalformedResponseError  - A required response field is absent
        ├── DiscoveryTimeoutError   - No workflows appeared in time
        └── ArtifactStoreError      - The artifact map could not be written

Fatal vs. Absorbed:
    Every exception here aborts the run when it escapes PipelineRunner.run().
    The only place one is absorbed is the step-log fetcher, which logs a
    CIClientError and moves on to the next action.

Usage:
    >>> raise TriggerError(
    ...     message="Failed to trigger pipeline",
    ...     status_code=404,
    ...     body='{"message": "Project not found"}',
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
class QuackError(Exception):
    """Base exception for all quackci errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable code, UPPER_SNAKE_CASE.
        details: Additional debugging context, JSON-serializable.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception for structured logging.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
# Raised before any network call when required inputs are missing.
# =============================================================================
class ConfigurationError(QuackError):
    """Raised when quackci configuration is invalid or incomplete.

    Example:
        >>> raise ConfigurationError(
        ...     message="Missing required configuration: org, token",
        ...     error_code="MISSING_CONFIG",
        ...     details={"missing": ["org", "token"]},
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# CI Client Error
# =============================================================================
class CIClientError(QuackError):
    """Raised by a CI client when a request cannot be completed.

    Covers connection failures, timeouts, undecodable JSON bodies and
    HTTP error statuses on read endpoints.

    Attributes:
        url: The request URL (token query parameters already stripped).
        status_code: HTTP status, or None for transport failures.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        error_code: str = "CI_CLIENT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["url"] = url
        if status_code is not None:
            enriched_details["status_code"] = status_code

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.url = url
        self.status_code = status_code


# =============================================================================
# Trigger Error
# =============================================================================
class TriggerError(QuackError):
    """Raised when the CI service rejects the pipeline trigger request.

    Attributes:
        status_code: The HTTP status returned (always >= 400).
        body: The raw response body, kept verbatim for the operator.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        error_code: str = "TRIGGER_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["status_code"] = status_code
        enriched_details["body"] = body

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.status_code = status_code
        self.body = body


class MalformedResponseError(QuackError):
    """Raised when a response lacks a field the run cannot proceed without."""

    def __init__(
        self,
        message: str,
        field: str,
        error_code: str = "MALFORMED_RESPONSE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["field"] = field

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.field = field


# =============================================================================
# Discovery Timeout Error
# =============================================================================
# The discovery wait is bounded; the completion wait is not. Only the former
# can time out.
# =============================================================================
class DiscoveryTimeoutError(QuackError):
    """Raised when a triggered pipeline never produced a workflow.

    Attributes:
        pipeline_id: The pipeline that was waited on.
        waited_seconds: Total time slept before giving up.
    """

    def __init__(
        self,
        message: str,
        pipeline_id: str,
        waited_seconds: float,
        error_code: str = "DISCOVERY_TIMEOUT",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["pipeline_id"] = pipeline_id
        enriched_details["waited_seconds"] = waited_seconds

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.pipeline_id = pipeline_id
        self.waited_seconds = waited_seconds


class ArtifactStoreError(QuackError):
    """Raised when the cumulative artifact map cannot be persisted."""

    def __init__(
        self,
        message: str,
        path: str,
        error_code: str = "ARTIFACT_WRITE_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["path"] = path

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.path = path
