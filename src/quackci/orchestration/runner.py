"""
quackci.orchestration.runner - Pipeline Runner
================================================

The top-level orchestrator. Runs one CI pipeline end to end as an explicit
state machine; every stage is a separate component that takes and returns
typed values.

    ┌────────────────────────────────────────────────────────────────────┐
    │                          PipelineRunner                             │
    │                                                                     │
    │  TRIGGERING   PipelineTrigger.trigger(branch)       → Pipeline      │
    │       │                                                             │
    │  DISCOVERING  WorkflowDiscoveryWaiter.wait()        → [Workflow]    │
    │       │       (bounded: DiscoveryTimeoutError)                      │
    │       │                                                             │
    │  POLLING      CompletionPoller.wait_for_completion()                │
    │       │       (unbounded)                                           │
    │       │                                                             │
    │  WALKING      JobTreeWalker.walk()                  → AggregateResult│
    │       │       (+ ArtifactMapStore.save per job)                     │
    │       │                                                             │
    │  REDUCING     reduce_status()                       → RunOutcome    │
    │       │                                                             │
    │  COMPLETED                                                          │
    │                                                                     │
    │  Any QuackError ──→ ABORTED, re-raised to the caller                │
    └────────────────────────────────────────────────────────────────────┘

Usage:
    >>> runner = PipelineRunner(QuackConfig(org="acme", token="...", repo="widgets"))
    >>> outcome = runner.run()
    >>> sys.exit(outcome.exit_code)
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import structlog

from quackci.core.config import QuackConfig
from quackci.core.enums import RunPhase
from quackci.core.exceptions import QuackError
from quackci.core.models import Pipeline, Workflow
from quackci.core.state import AggregateResult, RunOutcome
from quackci.infrastructure.artifact_store import ArtifactMapStore, JsonFileArtifactMapStore
from quackci.integrations.circleci.base import BaseCIClient
from quackci.integrations.circleci.client import CircleCIClient
from quackci.orchestration.discovery import WorkflowDiscoveryWaiter
from quackci.orchestration.logs import JobLogFetcher
from quackci.orchestration.poller import CompletionPoller
from quackci.orchestration.reducer import reduce_status
from quackci.orchestration.trigger import PipelineTrigger
from quackci.orchestration.walker import JobTreeWalker


logger = structlog.get_logger()


class PipelineRunner:
    """Runs one pipeline from trigger to pass/fail.

    Args:
        config: Run configuration.
        client: CI client. Built from config (credentials required) if None.
        store: Artifact map store. Defaults to config.artifacts_path on disk.
        sleep: Sleep function shared by both polling loops.
        emit: Receives rendered step-log text.

    Attributes:
        phase: The current RunPhase, observable during and after run().
    """

    def __init__(
        self,
        config: QuackConfig,
        client: Optional[BaseCIClient] = None,
        store: Optional[ArtifactMapStore] = None,
        sleep: Callable[[float], None] = time.sleep,
        emit: Callable[[str], None] = print,
    ) -> None:
        if client is None:
            config.require_credentials()
            client = CircleCIClient(
                org=config.org,
                repo=config.repo,
                token=config.token or "",
                vcs=config.vcs,
                http=config.http,
            )

        self._config = config
        self._client = client
        self._store = store or JsonFileArtifactMapStore(config.artifacts_path)
        self._phase = RunPhase.PENDING
        self._logger = logger.bind(component="pipeline_runner", repo=config.repo)

        polling = config.polling
        self._trigger = PipelineTrigger(client)
        self._discovery = WorkflowDiscoveryWaiter(
            client,
            interval_seconds=polling.discovery_interval_seconds,
            timeout_seconds=polling.discovery_timeout_seconds,
            sleep=sleep,
        )
        self._poller = CompletionPoller(
            client,
            interval_seconds=polling.completion_interval_seconds,
            sleep=sleep,
        )
        self._walker = JobTreeWalker(
            client,
            self._store,
            log_fetcher=JobLogFetcher(client, emit=emit) if config.get_logs else None,
        )

    @property
    def phase(self) -> RunPhase:
        return self._phase

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def run(self) -> RunOutcome:
        """Execute the full run.

        Returns:
            The reduced RunOutcome. A failed job yields exit_code FAILURE;
            it is not raised.

        Raises:
            QuackError: On any fatal condition (trigger rejected, malformed
                trigger response, discovery timeout, CI request failure,
                artifact map write failure). phase is ABORTED afterwards.
        """
        self._logger.info(
            "run_starting",
            org=self._config.org,
            get_logs=self._config.get_logs,
        )
        try:
            self._enter(RunPhase.TRIGGERING)
            pipeline = self._trigger.trigger(self._config.branch)

            self._enter(RunPhase.DISCOVERING)
            workflows = self._discovery.wait(pipeline)
            for workflow in workflows:
                self._logger.info(
                    "pipeline_url",
                    url=self.pipeline_url(pipeline, workflow),
                )

            self._enter(RunPhase.POLLING)
            self._poller.wait_for_completion(pipeline, workflows)

            self._enter(RunPhase.WALKING)
            self._store.initialize()
            result = self._walker.walk(workflows, AggregateResult())

            self._enter(RunPhase.REDUCING)
            outcome = reduce_status(result, pipeline)
        except QuackError as e:
            self._phase = RunPhase.ABORTED
            self._logger.error("run_aborted", **e.to_dict())
            raise
        finally:
            self._client.close()

        self._enter(RunPhase.COMPLETED)
        if outcome.failed:
            self._logger.error(
                "pipeline_failed",
                pipeline_id=pipeline.id,
                failed_jobs=outcome.failed_jobs,
            )
        else:
            self._logger.info(
                "pipeline_succeeded",
                pipeline_id=pipeline.id,
                artifact_count=len(outcome.artifact_map),
            )
        return outcome

    def pipeline_url(self, pipeline: Pipeline, workflow: Workflow) -> str:
        """Web UI link to one workflow of the pipeline."""
        base = self._config.http.app_base_url.rstrip("/")
        return (
            f"{base}/pipelines/{self._config.vcs}/{self._config.org}/{self._config.repo}"
            f"/{pipeline.number}/workflows/{workflow.id}"
        )

    def _enter(self, phase: RunPhase) -> None:
        self._logger.debug("phase_transition", from_phase=self._phase.value, to_phase=phase.value)
        self._phase = phase
