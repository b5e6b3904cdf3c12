"""
quackci.integrations.circleci.mock - Scripted CI Client for Testing
=====================================================================

A BaseCIClient that answers from in-memory scripts instead of the network.

How It Works:
    - Workflow listings are a FIFO queue of snapshots. Each call to
      list_pipeline_workflows() pops the next snapshot; the last one is
      sticky, so a test scripts "empty, empty, [running], [success]" and
      every later poll keeps seeing [success].
    - Jobs, artifacts, job details and action outputs are keyed lookups.
    - get_workflow() answers from the most recently returned listing.
    - Every call is appended to call_history as (method, argument).

Usage:
    >>> client = MockCIClient()
    >>> client.queue_workflows([])
    >>> client.queue_workflows([{"id": "wf-1", "status": "success"}])
    >>> client.set_jobs("wf-1", [{"name": "build", "status": "success", "job_number": 7}])
    >>> client.set_artifacts(7, [{"path": "out/app.whl", "url": "https://..."}])
"""

from __future__ import annotations

from collections import deque
from typing import Any, Optional

import structlog

from quackci.core.exceptions import CIClientError
from quackci.integrations.circleci.base import ApiResponse, BaseCIClient


logger = structlog.get_logger()


class MockCIClient(BaseCIClient):
    """Scripted CI client with call tracking.

    Attributes:
        _trigger_response: Response returned by trigger_pipeline().
        _workflow_snapshots: FIFO of workflow listings; last one sticks.
        _jobs: workflow_id → job records.
        _artifacts: build number → artifact records.
        _job_details: build number → legacy detail record.
        _outputs: output_url → log payload.
        _failing: method name → exception to raise from it.
    """

    def __init__(self, pipeline_id: str = "pipeline-1", pipeline_number: int = 1) -> None:
        self._trigger_response = ApiResponse(
            status_code=201,
            body={"id": pipeline_id, "number": pipeline_number, "state": "created"},
        )
        self._workflow_snapshots: deque[list[dict[str, Any]]] = deque()
        self._last_snapshot: list[dict[str, Any]] = []
        self._jobs: dict[str, list[dict[str, Any]]] = {}
        self._artifacts: dict[int, list[dict[str, Any]]] = {}
        self._job_details: dict[int, dict[str, Any]] = {}
        self._outputs: dict[str, Any] = {}
        self._failing: dict[str, Exception] = {}
        self._call_history: list[tuple[str, Any]] = []
        self._logger = logger.bind(component="mock_ci_client")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def call_history(self) -> list[tuple[str, Any]]:
        """All recorded calls as (method, argument) pairs."""
        return self._call_history

    def calls_to(self, method: str) -> list[Any]:
        """Arguments of every recorded call to ``method``."""
        return [arg for name, arg in self._call_history if name == method]

    # =========================================================================
    # Scripting
    # =========================================================================

    def set_trigger_response(self, status_code: int, body: Any = None, text: str = "") -> None:
        self._trigger_response = ApiResponse(status_code=status_code, body=body, text=text)

    def queue_workflows(self, workflows: list[dict[str, Any]]) -> None:
        """Append one workflow-listing snapshot."""
        self._workflow_snapshots.append(list(workflows))

    def set_jobs(self, workflow_id: str, jobs: list[dict[str, Any]]) -> None:
        self._jobs[workflow_id] = list(jobs)

    def set_artifacts(self, build_number: int, artifacts: list[dict[str, Any]]) -> None:
        self._artifacts[build_number] = list(artifacts)

    def set_job_details(self, build_number: int, details: dict[str, Any]) -> None:
        self._job_details[build_number] = details

    def set_action_output(self, output_url: str, payload: Any) -> None:
        self._outputs[output_url] = payload

    def set_failure(self, method: str, error: Optional[Exception] = None) -> None:
        """Make every call to ``method`` raise ``error`` (a CIClientError by default)."""
        self._failing[method] = error or CIClientError(
            message=f"Simulated failure in {method}",
            url=f"mock://{method}",
            status_code=500,
        )

    # =========================================================================
    # BaseCIClient
    # =========================================================================

    def trigger_pipeline(self, branch: str) -> ApiResponse:
        self._record("trigger_pipeline", branch)
        return self._trigger_response

    def list_pipeline_workflows(self, pipeline_id: str) -> list[dict[str, Any]]:
        self._record("list_pipeline_workflows", pipeline_id)
        if self._workflow_snapshots:
            self._last_snapshot = self._workflow_snapshots.popleft()
        return [dict(w) for w in self._last_snapshot]

    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        self._record("get_workflow", workflow_id)
        for workflow in self._last_snapshot:
            if workflow.get("id") == workflow_id:
                return dict(workflow)
        raise CIClientError(
            message=f"Workflow not found: {workflow_id}",
            url=f"mock://workflow/{workflow_id}",
            status_code=404,
        )

    def list_workflow_jobs(self, workflow_id: str) -> list[dict[str, Any]]:
        self._record("list_workflow_jobs", workflow_id)
        return [dict(j) for j in self._jobs.get(workflow_id, [])]

    def list_job_artifacts(self, build_number: int) -> list[dict[str, Any]]:
        self._record("list_job_artifacts", build_number)
        return [dict(a) for a in self._artifacts.get(build_number, [])]

    def get_job_details(self, build_number: int) -> dict[str, Any]:
        self._record("get_job_details", build_number)
        return self._job_details.get(build_number, {"steps": None})

    def get_action_output(self, output_url: str) -> Any:
        self._record("get_action_output", output_url)
        if output_url not in self._outputs:
            raise CIClientError(
                message=f"No output at {output_url}",
                url=output_url,
                status_code=404,
            )
        return self._outputs[output_url]

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _record(self, method: str, argument: Any) -> None:
        self._call_history.append((method, argument))
        self._logger.debug("mock_ci_call", method=method, argument=argument)
        if method in self._failing:
            raise self._failing[method]
