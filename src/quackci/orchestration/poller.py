"""
quackci.orchestration.poller - Completion Poller
==================================================

Waits until every discovered workflow has reached a terminal status
(success, failed, error, canceled).

Each poll is one list-workflows call for the whole pipeline, not one call per
workflow. There is no timeout; a hung wait is aborted by killing the process.
Only the discovery wait is bounded.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

from quackci.core.models import Pipeline, Workflow, parse_records
from quackci.integrations.circleci.base import BaseCIClient


logger = structlog.get_logger()


class CompletionPoller:
    """Unbounded fixed-interval poll for workflow completion."""

    def __init__(
        self,
        client: BaseCIClient,
        interval_seconds: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._interval = interval_seconds
        self._sleep = sleep
        self._logger = logger.bind(component="completion_poller")

    def wait_for_completion(
        self,
        pipeline: Pipeline,
        workflows: list[Workflow],
    ) -> list[Workflow]:
        """Block until every workflow in ``workflows`` is terminal.

        A discovered workflow missing from a listing counts as unfinished.

        Args:
            pipeline: The pipeline whose workflows are listed.
            workflows: The workflows captured by discovery.

        Returns:
            The final snapshot of the discovered workflows, in discovery order.
        """
        self._logger.info("polling_for_completion", pipeline_id=pipeline.id)
        polls = 0
        while True:
            polls += 1
            listing = parse_records(
                Workflow,
                self._client.list_pipeline_workflows(pipeline.id),
                "workflow",
            )
            by_id = {w.id: w for w in listing}
            current = [by_id.get(w.id, w) for w in workflows]
            finished = sum(
                1 for w in current
                if w.id in by_id and w.is_terminal
            )

            self._logger.info(
                "workflows_progress",
                pipeline_id=pipeline.id,
                finished=finished,
                total=len(workflows),
                poll=polls,
            )
            if finished == len(workflows):
                self._logger.info("all_workflows_finished", pipeline_id=pipeline.id, polls=polls)
                return current

            self._sleep(self._interval)
