"""
Tests for quackci.orchestration.walker
========================================

    - Every job of every workflow is visited, in listing order
    - A failed job sets the sticky flag but never stops the walk
    - The cumulative map is persisted after every job
    - Log retrieval only happens when a log fetcher is given
"""

import pytest

from quackci.core.exceptions import CIClientError
from quackci.core.models import Workflow
from quackci.core.state import AggregateResult
from quackci.orchestration.logs import JobLogFetcher
from quackci.orchestration.walker import JobTreeWalker


def workflows(*ids: str) -> list[Workflow]:
    return [Workflow(id=i, status="success") for i in ids]


@pytest.fixture
def two_workflow_client(mock_client):
    """wf-a: build (ok), lint (failed). wf-b: deploy (ok)."""
    mock_client.queue_workflows([
        {"id": "wf-a", "status": "failed"},
        {"id": "wf-b", "status": "success"},
    ])
    mock_client.list_pipeline_workflows("pipe-123")
    mock_client.set_jobs("wf-a", [
        {"name": "build", "status": "success", "job_number": 1},
        {"name": "lint", "status": "failed", "job_number": 2},
    ])
    mock_client.set_jobs("wf-b", [
        {"name": "deploy", "status": "success", "job_number": 3},
    ])
    mock_client.set_artifacts(1, [{"path": "shared.txt", "url": "https://job1/shared"}])
    mock_client.set_artifacts(2, [{"path": "lint.txt", "url": "https://job2/lint"}])
    mock_client.set_artifacts(3, [
        {"path": "shared.txt", "url": "https://job3/shared"},
        {"path": "deploy.txt", "url": "https://job3/deploy"},
    ])
    return mock_client


class TestJobTreeWalker:
    """Tests for JobTreeWalker.walk()."""

    def test_visits_jobs_in_order(self, two_workflow_client, memory_store) -> None:
        """Workflows and jobs are walked in listing order."""
        JobTreeWalker(two_workflow_client, memory_store).walk(workflows("wf-a", "wf-b"))

        assert two_workflow_client.calls_to("get_workflow") == ["wf-a", "wf-b"]
        assert two_workflow_client.calls_to("list_job_artifacts") == [1, 2, 3]

    def test_failed_job_does_not_stop_walk(self, two_workflow_client, memory_store) -> None:
        """Jobs after a failed one are still walked."""
        result = JobTreeWalker(two_workflow_client, memory_store).walk(workflows("wf-a", "wf-b"))

        assert result.failed is True
        assert result.failed_jobs == ["lint"]
        assert result.jobs_walked == 3
        assert "deploy.txt" in result.artifact_map

    def test_earlier_job_wins_collision(self, two_workflow_client, memory_store) -> None:
        """The first job to report a path keeps its URL."""
        result = JobTreeWalker(two_workflow_client, memory_store).walk(workflows("wf-a", "wf-b"))

        assert result.artifact_map == {
            "shared.txt": "https://job1/shared",
            "lint.txt": "https://job2/lint",
            "deploy.txt": "https://job3/deploy",
        }

    def test_map_persisted_after_every_job(self, two_workflow_client, memory_store) -> None:
        """The cumulative map is saved after each job."""
        JobTreeWalker(two_workflow_client, memory_store).walk(workflows("wf-a", "wf-b"))

        assert memory_store.snapshots == [
            {"shared.txt": "https://job1/shared"},
            {"shared.txt": "https://job1/shared", "lint.txt": "https://job2/lint"},
            {
                "shared.txt": "https://job1/shared",
                "lint.txt": "https://job2/lint",
                "deploy.txt": "https://job3/deploy",
            },
        ]

    def test_successful_pipeline(self, finished_client, memory_store) -> None:
        """An all-green pipeline collects every artifact."""
        finished_client.list_pipeline_workflows("pipe-123")

        result = JobTreeWalker(finished_client, memory_store).walk(workflows("wf-1"))

        assert result.failed is False
        assert result.artifact_map == {
            "dist/app.whl": "https://a/app.whl",
            "reports/junit.xml": "https://a/junit.xml",
        }

    def test_workflow_status_does_not_decide_failure(self, mock_client, memory_store) -> None:
        """Only job statuses decide failure."""
        mock_client.queue_workflows([{"id": "wf-1", "status": "failed"}])
        mock_client.list_pipeline_workflows("pipe-123")
        mock_client.set_jobs("wf-1", [{"name": "build", "status": "success", "job_number": 1}])

        result = JobTreeWalker(mock_client, memory_store).walk(workflows("wf-1"))

        assert result.failed is False

    def test_errored_job_fails(self, mock_client, memory_store) -> None:
        """An errored job fails the pipeline."""
        mock_client.queue_workflows([{"id": "wf-1", "status": "failed"}])
        mock_client.list_pipeline_workflows("pipe-123")
        mock_client.set_jobs("wf-1", [{"name": "infra", "status": "error", "job_number": 1}])

        assert JobTreeWalker(mock_client, memory_store).walk(workflows("wf-1")).failed is True

    def test_job_without_build_number(self, mock_client, memory_store) -> None:
        """Approval jobs are classified and persisted but have nothing to fetch."""
        mock_client.queue_workflows([{"id": "wf-1", "status": "success"}])
        mock_client.list_pipeline_workflows("pipe-123")
        mock_client.set_jobs("wf-1", [
            {"name": "approve", "status": "success", "type": "approval"},
            {"name": "build", "status": "success", "job_number": 5},
        ])
        mock_client.set_artifacts(5, [{"path": "a", "url": "u"}])

        result = JobTreeWalker(
            mock_client, memory_store, log_fetcher=JobLogFetcher(mock_client, emit=lambda _: None)
        ).walk(workflows("wf-1"))

        assert result.jobs_walked == 2
        assert mock_client.calls_to("list_job_artifacts") == [5]
        assert mock_client.calls_to("get_job_details") == [5]
        assert memory_store.snapshots == [{}, {"a": "u"}]

    def test_no_log_fetcher_no_detail_calls(self, finished_client, memory_store) -> None:
        """Without a log fetcher no job details are requested."""
        finished_client.list_pipeline_workflows("pipe-123")

        JobTreeWalker(finished_client, memory_store).walk(workflows("wf-1"))

        assert finished_client.calls_to("get_job_details") == []

    def test_log_fetcher_called_per_job(self, finished_client, memory_store, emitted) -> None:
        """With a log fetcher every job's details are requested."""
        finished_client.list_pipeline_workflows("pipe-123")
        fetcher = JobLogFetcher(finished_client, emit=emitted.append)

        JobTreeWalker(finished_client, memory_store, log_fetcher=fetcher).walk(workflows("wf-1"))

        assert finished_client.calls_to("get_job_details") == [101, 102]

    def test_continues_from_given_result(self, finished_client, memory_store) -> None:
        """Walking continues from a supplied result."""
        finished_client.list_pipeline_workflows("pipe-123")
        start = AggregateResult(artifact_map={"dist/app.whl": "https://earlier"}, failed=True)

        result = JobTreeWalker(finished_client, memory_store).walk(workflows("wf-1"), start)

        assert result.failed is True
        assert result.artifact_map["dist/app.whl"] == "https://earlier"

    def test_artifact_listing_failure_is_fatal(self, finished_client, memory_store) -> None:
        """A failed artifact listing aborts the walk."""
        finished_client.list_pipeline_workflows("pipe-123")
        finished_client.set_failure("list_job_artifacts")

        with pytest.raises(CIClientError):
            JobTreeWalker(finished_client, memory_store).walk(workflows("wf-1"))

    def test_empty_workflow(self, mock_client, memory_store) -> None:
        """A workflow with no jobs saves nothing."""
        mock_client.queue_workflows([{"id": "wf-1", "status": "success"}])
        mock_client.list_pipeline_workflows("pipe-123")

        result = JobTreeWalker(mock_client, memory_store).walk(workflows("wf-1"))

        assert result.jobs_walked == 0
        assert memory_store.snapshots == []
