"""
quackci.orchestration.trigger - Pipeline Trigger
==================================================

Starts one pipeline run and turns the response into a Pipeline value.

    branch ──→ resolve_branch() ──→ POST trigger ──→ status >= 400? ──→ TriggerError
                                                         │
                                                         └──→ {id, number} ──→ Pipeline
                                                                  │
                                                     missing ─────┴──→ MalformedResponseError

The trigger is never retried: a rejected trigger aborts the run before any
polling starts.
"""

from __future__ import annotations

from typing import Optional

import structlog

from quackci.core.exceptions import MalformedResponseError, TriggerError
from quackci.core.models import Pipeline
from quackci.integrations.circleci.base import BaseCIClient


logger = structlog.get_logger()


DEFAULT_BRANCH = "main"


def resolve_branch(branch: Optional[str]) -> str:
    """Return ``branch``, or the default branch when it is absent or blank."""
    if branch is None or not branch.strip():
        logger.info("no_branch_detected", default_branch=DEFAULT_BRANCH)
        return DEFAULT_BRANCH
    return branch.strip()


class PipelineTrigger:
    """Starts a pipeline run on the CI service."""

    def __init__(self, client: BaseCIClient) -> None:
        self._client = client
        self._logger = logger.bind(component="pipeline_trigger")

    def trigger(self, branch: Optional[str]) -> Pipeline:
        """Trigger a pipeline and return its identity.

        Args:
            branch: Branch to build; blank or None means DEFAULT_BRANCH.

        Returns:
            The triggered Pipeline.

        Raises:
            TriggerError: If the service answered with HTTP status >= 400.
            MalformedResponseError: If ``id`` or ``number`` is missing.
        """
        resolved = resolve_branch(branch)
        self._logger.info("triggering_pipeline", branch=resolved)

        response = self._client.trigger_pipeline(resolved)
        if response.status_code >= 400:
            self._logger.error(
                "trigger_failed",
                status_code=response.status_code,
                body=response.text,
            )
            raise TriggerError(
                message=f"Failed to trigger pipeline. HTTP status: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        body = response.body if isinstance(response.body, dict) else {}
        for field in ("id", "number"):
            if body.get(field) is None:
                raise MalformedResponseError(
                    message=f"Trigger response has no '{field}'",
                    field=field,
                    details={"body": response.text},
                )

        try:
            number = int(body["number"])
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(
                message=f"Trigger response 'number' is not an integer: {body['number']!r}",
                field="number",
            ) from e

        pipeline = Pipeline(id=str(body["id"]), number=number, branch=resolved)
        self._logger.info(
            "pipeline_triggered",
            pipeline_id=pipeline.id,
            pipeline_number=pipeline.number,
        )
        return pipeline
