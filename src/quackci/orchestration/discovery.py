"""
quackci.orchestration.discovery - Workflow Discovery Waiter
=============================================================

Waits until a freshly triggered pipeline has produced at least one workflow.

Timing (defaults: interval 10s, timeout 30s):

    t=0   list → empty → sleep 10
    t=10  list → empty → sleep 10
    t=20  list → empty → sleep 10 → waited 30 >= 30 → DiscoveryTimeoutError

The set of workflows returned here is fixed for the rest of the run; workflows
the pipeline creates later are not picked up.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

from quackci.core.exceptions import DiscoveryTimeoutError
from quackci.core.models import Pipeline, Workflow, parse_records
from quackci.integrations.circleci.base import BaseCIClient


logger = structlog.get_logger()


class WorkflowDiscoveryWaiter:
    """Bounded wait for a pipeline's first workflows.

    Args:
        client: CI client.
        interval_seconds: Sleep between attempts.
        timeout_seconds: Total sleep after which discovery fails.
        sleep: Sleep function; tests pass a recording fake.
    """

    def __init__(
        self,
        client: BaseCIClient,
        interval_seconds: float = 10.0,
        timeout_seconds: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._sleep = sleep
        self._logger = logger.bind(component="workflow_discovery")

    def wait(self, pipeline: Pipeline) -> list[Workflow]:
        """Poll until the pipeline lists at least one workflow.

        Returns:
            The discovered workflows, in listing order.

        Raises:
            DiscoveryTimeoutError: If none appeared within the timeout.
        """
        self._logger.info("waiting_for_workflows", pipeline_id=pipeline.id)
        waited = 0.0
        while True:
            records = self._client.list_pipeline_workflows(pipeline.id)
            if records:
                workflows = parse_records(Workflow, records, "workflow")
                self._logger.info(
                    "workflows_found",
                    pipeline_id=pipeline.id,
                    workflow_count=len(workflows),
                )
                return workflows

            self._logger.info(
                "no_workflows_yet",
                pipeline_id=pipeline.id,
                retry_in_seconds=self._interval,
            )
            self._sleep(self._interval)
            waited += self._interval
            if waited >= self._timeout:
                self._logger.error(
                    "workflow_discovery_timed_out",
                    pipeline_id=pipeline.id,
                    waited_seconds=waited,
                )
                raise DiscoveryTimeoutError(
                    message="Timed out waiting for workflows",
                    pipeline_id=pipeline.id,
                    waited_seconds=waited,
                )
