"""
quackci.orchestration.walker - Job Tree Walker
================================================

Walks every discovered workflow and every job in it, strictly one at a time in
listing order, folding what it sees into an AggregateResult.

Per workflow:
    1. Re-fetch the workflow (status is logged, not used for pass/fail).
    2. List its jobs.

Per job:
    a. Classify: failed/error sets the sticky failure flag.
    b. Fetch artifacts, merge into the cumulative map (earlier jobs win).
    c. Persist the cumulative map.
    d. If log retrieval is enabled, emit the job's step logs.

A failed job never stops the walk; later jobs' artifacts and logs are still
collected.
"""

from __future__ import annotations

from typing import Optional

import structlog

from quackci.core.models import Job, Workflow, parse_records
from quackci.core.state import AggregateResult
from quackci.infrastructure.artifact_store import ArtifactMapStore
from quackci.integrations.circleci.base import BaseCIClient
from quackci.orchestration.artifacts import collect_job_artifacts, merge_artifact_map
from quackci.orchestration.logs import JobLogFetcher


logger = structlog.get_logger()


class JobTreeWalker:
    """Collects job statuses, artifacts and logs across a pipeline.

    Args:
        client: CI client.
        store: Receives the cumulative artifact map after every job.
        log_fetcher: Emits step logs; None disables log retrieval entirely.
    """

    def __init__(
        self,
        client: BaseCIClient,
        store: ArtifactMapStore,
        log_fetcher: Optional[JobLogFetcher] = None,
    ) -> None:
        self._client = client
        self._store = store
        self._log_fetcher = log_fetcher
        self._logger = logger.bind(component="job_tree_walker")

    def walk(
        self,
        workflows: list[Workflow],
        result: Optional[AggregateResult] = None,
    ) -> AggregateResult:
        """Walk all jobs of ``workflows`` and return the accumulated result."""
        result = result or AggregateResult()
        for workflow in workflows:
            result = self.walk_workflow(workflow, result)
        return result

    def walk_workflow(self, workflow: Workflow, result: AggregateResult) -> AggregateResult:
        """Re-fetch one workflow, then walk each of its jobs in listing order."""
        self._logger.info("processing_workflow", workflow_id=workflow.id)

        status = self._client.get_workflow(workflow.id).get("status")
        jobs = parse_records(Job, self._client.list_workflow_jobs(workflow.id), "job")
        self._logger.info(
            "workflow_jobs_listed",
            workflow_id=workflow.id,
            workflow_status=status,
            job_count=len(jobs),
        )

        for job in jobs:
            result = self.walk_job(job, result)
        return result

    def walk_job(self, job: Job, result: AggregateResult) -> AggregateResult:
        """Classify one job, merge and persist its artifacts, then emit its logs.

        Jobs without a build number are classified and the map is persisted,
        but nothing is fetched for them.
        """
        self._logger.info(
            "job_finished",
            job_name=job.name,
            build_number=job.build_number,
            status=job.status,
        )
        result = result.record_job(job)
        if job.is_failing:
            self._logger.warning("job_failed", job_name=job.name, status=job.status)

        if job.build_number is None:
            self._logger.info("job_has_no_build_number", job_name=job.name)
            self._store.save(result.artifact_map)
            return result

        self._logger.info("fetching_artifacts", build_number=job.build_number)
        job_artifacts = collect_job_artifacts(
            self._client.list_job_artifacts(job.build_number)
        )
        result = result.with_artifact_map(
            merge_artifact_map(result.artifact_map, job_artifacts)
        )
        self._store.save(result.artifact_map)
        self._logger.info(
            "artifacts_merged",
            build_number=job.build_number,
            job_artifact_count=len(job_artifacts),
            total_artifact_count=len(result.artifact_map),
        )

        if self._log_fetcher is not None:
            self._log_fetcher.fetch(job)
            self._logger.info("end_of_job_logs", build_number=job.build_number)

        return result
