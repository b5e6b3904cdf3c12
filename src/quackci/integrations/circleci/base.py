"""
quackci.integrations.circleci.base - Abstract CI Client Interface
===================================================================

The orchestration layer never builds URLs or touches HTTP. It calls the CI
service through this interface and receives decoded JSON:

    ┌──────────────────┐   list_pipeline_workflows()   ┌──────────────────┐
    │ Orchestration     │ ───────────────────────────→ │  BaseCIClient     │
    │ (trigger, poller, │                               │  (abstract)       │
    │  walker, logs)    │ ←──── dict / list[dict] ───── │                   │
    └──────────────────┘                               └────────┬─────────┘
                                                                │
                                                     ┌──────────┴─────────┐
                                                ┌────▼─────┐     ┌────────▼──────┐
                                                │   Mock   │     │ CircleCIClient│
                                                │  Client  │     │  (requests)   │
                                                └──────────┘     └───────────────┘

Error contract:
    - trigger_pipeline() never raises for an HTTP error status; it returns the
      status and raw body so the trigger stage can decide (TriggerError).
    - Every other method raises CIClientError on transport failure, on an
      HTTP status >= 400, or on an undecodable body.
    - List methods return the concatenated "items" of every page.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Status code and body of a request whose status the caller inspects.

    Attributes:
        status_code: HTTP status code.
        body: Decoded JSON body, or None when the body is not JSON.
        text: Raw response text, kept for error reporting.
    """

    status_code: int = Field(description="HTTP status code")
    body: Any = Field(default=None, description="Decoded JSON body, if any")
    text: str = Field(default="", description="Raw response body")


class BaseCIClient(ABC):
    """Abstract base class for remote CI service clients."""

    @abstractmethod
    def trigger_pipeline(self, branch: str) -> ApiResponse:
        """Start a pipeline on ``branch``.

        Returns:
            The raw response; a successful body carries ``id`` and ``number``.
        """

    @abstractmethod
    def list_pipeline_workflows(self, pipeline_id: str) -> list[dict[str, Any]]:
        """List the workflows a pipeline has produced so far."""

    @abstractmethod
    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        """Fetch a single workflow record (carries ``status``)."""

    @abstractmethod
    def list_workflow_jobs(self, workflow_id: str) -> list[dict[str, Any]]:
        """List the jobs of a workflow."""

    @abstractmethod
    def list_job_artifacts(self, build_number: int) -> list[dict[str, Any]]:
        """List the artifacts produced by a job build."""

    @abstractmethod
    def get_job_details(self, build_number: int) -> dict[str, Any]:
        """Fetch the legacy detailed job record (carries ``steps``)."""

    @abstractmethod
    def get_action_output(self, output_url: str) -> Any:
        """Fetch an action's log payload, a JSON array of entries."""

    def close(self) -> None:
        """Release any held resources. No-op by default."""
