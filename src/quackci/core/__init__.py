"""
quackci.core - Foundation Layer
=================================

    - config:      QuackConfig, PollingConfig, HttpConfig, load_config
    - enums:       WorkflowStatus, JobStatus, RunPhase, ExitCode
    - models:      Pipeline, Workflow, Job, Artifact, JobDetails, Step, Action, LogEntry
    - state:       AggregateResult, RunOutcome
    - exceptions:  QuackError hierarchy

Dependency Rule:
    core/ depends on NOTHING else in the quackci package.
"""

from quackci.core.config import HttpConfig, PollingConfig, QuackConfig, load_config
from quackci.core.enums import ExitCode, JobStatus, RunPhase, WorkflowStatus
from quackci.core.exceptions import (
    ArtifactStoreError,
    CIClientError,
    ConfigurationError,
    DiscoveryTimeoutError,
    MalformedResponseError,
    QuackError,
    TriggerError,
)
from quackci.core.models import (
    Action,
    Artifact,
    Job,
    JobDetails,
    LogEntry,
    Pipeline,
    Step,
    Workflow,
)
from quackci.core.state import AggregateResult, RunOutcome

__all__ = [
    # Config
    "QuackConfig",
    "PollingConfig",
    "HttpConfig",
    "load_config",
    # Enums
    "WorkflowStatus",
    "JobStatus",
    "RunPhase",
    "ExitCode",
    # Models
    "Pipeline",
    "Workflow",
    "Job",
    "Artifact",
    "JobDetails",
    "Step",
    "Action",
    "LogEntry",
    # State
    "AggregateResult",
    "RunOutcome",
    # Exceptions
    "QuackError",
    "ConfigurationError",
    "CIClientError",
    "TriggerError",
    "MalformedResponseError",
    "DiscoveryTimeoutError",
    "ArtifactStoreError",
]
