"""
quackci.orchestration - Run Orchestration Layer
=================================================

    PipelineRunner            - explicit phase state machine (entry point)
    PipelineTrigger           - start the run
    WorkflowDiscoveryWaiter   - bounded wait for the first workflows
    CompletionPoller          - unbounded wait for terminal workflows
    JobTreeWalker             - per-job status, artifacts, logs
    JobLogFetcher             - legacy step/action log retrieval
    merge_artifact_map        - earlier-job-wins artifact merge
    reduce_status             - job statuses → RunOutcome

Usage:
    from quackci.orchestration import PipelineRunner
"""

from quackci.orchestration.artifacts import collect_job_artifacts, merge_artifact_map
from quackci.orchestration.discovery import WorkflowDiscoveryWaiter
from quackci.orchestration.logs import JobLogFetcher, render_log_entry
from quackci.orchestration.poller import CompletionPoller
from quackci.orchestration.reducer import reduce_status
from quackci.orchestration.runner import PipelineRunner
from quackci.orchestration.trigger import DEFAULT_BRANCH, PipelineTrigger, resolve_branch
from quackci.orchestration.walker import JobTreeWalker

__all__ = [
    "PipelineRunner",
    "PipelineTrigger",
    "WorkflowDiscoveryWaiter",
    "CompletionPoller",
    "JobTreeWalker",
    "JobLogFetcher",
    "collect_job_artifacts",
    "merge_artifact_map",
    "reduce_status",
    "render_log_entry",
    "resolve_branch",
    "DEFAULT_BRANCH",
]
