"""
quackci.core.models - CI Data Models
======================================

Typed snapshots of what the remote CI service returns. Each stage of the run
parses raw JSON into these models once and hands typed values to the next
stage; nothing downstream re-reads raw response bodies.

Model Hierarchy:
    Pipeline            → one triggered run (id + human-facing number)
      └── Workflow      → independently-statused subdivision, re-polled
            └── Job     → snapshot taken once at walk time
                  ├── Artifact          → path → url, aggregated pipeline-wide
                  └── JobDetails        → legacy detailed record
                        └── Step
                              └── Action → optional output_url
                                    └── LogEntry (first entry only)

Status fields are plain strings and unknown values are kept verbatim.
Classification goes through the frozensets in quackci.core.enums.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from quackci.core.enums import FAILING_JOB_STATUSES, TERMINAL_WORKFLOW_STATUSES
from quackci.core.exceptions import MalformedResponseError


ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Pipeline
# =============================================================================
class Pipeline(BaseModel):
    """A triggered pipeline run. Immutable for the rest of the run.

    Attributes:
        id: Opaque pipeline identifier used by every later request.
        number: Human-facing pipeline number, used in web links.
        branch: The branch the pipeline was triggered on.
    """

    id: str = Field(description="Opaque pipeline identifier")
    number: int = Field(description="Human-facing pipeline number")
    branch: str = Field(description="Branch the pipeline was triggered on")


# =============================================================================
# Workflow
# =============================================================================
class Workflow(BaseModel):
    """A workflow belonging to a pipeline, as seen on one poll."""

    id: str = Field(description="Opaque workflow identifier")
    status: str = Field(default="", description="Raw workflow status")
    name: Optional[str] = Field(default=None, description="Workflow name")

    @property
    def is_terminal(self) -> bool:
        """True once the workflow will not change any further."""
        return self.status in TERMINAL_WORKFLOW_STATUSES


# =============================================================================
# Job
# =============================================================================
# The v2 API calls the build number "job_number". It is absent for approval
# jobs, which have no build to fetch artifacts or logs for.
# =============================================================================
class Job(BaseModel):
    """A job within a workflow, snapshotted once at walk time."""

    name: str = Field(default="", description="Job name")
    status: str = Field(default="", description="Raw job status")
    build_number: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("job_number", "build_number"),
        description="Build number used by the artifact and legacy endpoints",
    )

    @property
    def is_failing(self) -> bool:
        """True if this job's status marks the whole pipeline as failed."""
        return self.status in FAILING_JOB_STATUSES


class Artifact(BaseModel):
    """A file produced by a job, exposed as a download URL."""

    path: str = Field(description="Artifact path, unique key in the artifact map")
    url: str = Field(description="Download URL")


# =============================================================================
# Legacy Job Details
# =============================================================================
class Action(BaseModel):
    """One action within a step. Only actions with output carry output_url."""

    name: Optional[str] = None
    status: Optional[str] = None
    output_url: Optional[str] = None


class Step(BaseModel):
    """A named step of a job, holding one or more actions."""

    name: str = ""
    actions: list[Action] = Field(default_factory=list)


class JobDetails(BaseModel):
    """The legacy detailed job record. steps is None when not recorded."""

    steps: Optional[list[Step]] = None


class LogEntry(BaseModel):
    """One entry from an action's output payload."""

    time: Optional[str] = None
    message: str = ""


# =============================================================================
# Parsing Helpers
# =============================================================================
# Response bodies are validated into models exactly once, at the stage that
# fetched them. A record that cannot be validated is a malformed response.
# =============================================================================
def parse_record(model: type[ModelT], record: Any, source: str) -> ModelT:
    """Validate one decoded JSON record into ``model``.

    Raises:
        MalformedResponseError: Naming the first offending field.
    """
    try:
        return model.model_validate(record)
    except ValidationError as e:
        errors = e.errors()
        field = ".".join(str(p) for p in errors[0]["loc"]) if errors and errors[0]["loc"] else source
        raise MalformedResponseError(
            message=f"Malformed {source} record: {e.error_count()} validation error(s)",
            field=field,
            details={"source": source, "errors": [err["msg"] for err in errors]},
        ) from e


def parse_records(model: type[ModelT], records: list[Any], source: str) -> list[ModelT]:
    """Validate a list of records, preserving listing order."""
    return [parse_record(model, record, source) for record in records]
