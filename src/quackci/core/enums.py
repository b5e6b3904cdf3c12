"""
quackci.core.enums - Type-Safe Enumerations
=============================================

All enums inherit from both `str` and `Enum`, which means:
    - They serialize to strings in JSON (Pydantic-friendly)
    - They compare equal to the raw API strings: JobStatus.FAILED == "failed"

    ┌─────────────────────────────────────────────────────────────────┐
    │  REMOTE CI SERVICE                                              │
    │    WorkflowStatus: status of one workflow in a pipeline         │
    │    JobStatus:      status of one job in a workflow              │
    ├─────────────────────────────────────────────────────────────────┤
    │  RUNNER                                                         │
    │    RunPhase: PipelineRunner state machine                       │
    │    ExitCode: process exit codes                                 │
    └─────────────────────────────────────────────────────────────────┘
"""

from enum import Enum, IntEnum


# =============================================================================
# Workflow Status Enumeration
# =============================================================================
# The CI service reports more statuses than we model; unknown values are kept
# as raw strings on the Workflow model and treated as non-terminal.
# =============================================================================
class WorkflowStatus(str, Enum):
    """Statuses reported for a workflow.

    Terminal statuses (the workflow will not change any further):
        SUCCESS, FAILED, ERROR, CANCELED
    """

    SUCCESS = "success"
    RUNNING = "running"
    NOT_RUN = "not_run"
    FAILED = "failed"
    ERROR = "error"
    FAILING = "failing"
    ON_HOLD = "on_hold"
    CANCELED = "canceled"
    UNAUTHORIZED = "unauthorized"


TERMINAL_WORKFLOW_STATUSES: frozenset[str] = frozenset({
    WorkflowStatus.SUCCESS.value,
    WorkflowStatus.FAILED.value,
    WorkflowStatus.ERROR.value,
    WorkflowStatus.CANCELED.value,
})


class JobStatus(str, Enum):
    """Statuses reported for a job within a workflow."""

    SUCCESS = "success"
    RUNNING = "running"
    NOT_RUN = "not_run"
    FAILED = "failed"
    ERROR = "error"
    FAILING = "failing"
    BLOCKED = "blocked"
    QUEUED = "queued"
    ON_HOLD = "on_hold"
    CANCELED = "canceled"
    INFRASTRUCTURE_FAIL = "infrastructure_fail"
    TIMEDOUT = "timedout"


# Only these two mark the pipeline as failed. "canceled" or "timedout" jobs
# do not.
FAILING_JOB_STATUSES: frozenset[str] = frozenset({
    JobStatus.FAILED.value,
    JobStatus.ERROR.value,
})


# =============================================================================
# Run Phase Enumeration
# =============================================================================
# The PipelineRunner is an explicit state machine:
#
#   TRIGGERING → DISCOVERING → POLLING → WALKING → REDUCING → COMPLETED
#        │             │
#        └─────────────┴──→ ABORTED (fatal error)
# =============================================================================
class RunPhase(str, Enum):
    """Lifecycle phases of one pipeline run."""

    PENDING = "pending"
    TRIGGERING = "triggering"
    DISCOVERING = "discovering"
    POLLING = "polling"
    WALKING = "walking"
    REDUCING = "reducing"
    COMPLETED = "completed"
    ABORTED = "aborted"


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    FAILURE = 1
