"""
Tests for quackci.orchestration.artifacts
===========================================

    - Per-job collection (later duplicates inside one listing win)
    - Pipeline-wide merge (the first job to report a path wins)
    - Merging is idempotent and never mutates its inputs
"""

import pytest

from quackci.core.exceptions import MalformedResponseError
from quackci.orchestration.artifacts import collect_job_artifacts, merge_artifact_map


class TestCollectJobArtifacts:
    def test_empty_listing(self) -> None:
        """A job without artifacts contributes nothing."""
        assert collect_job_artifacts([]) == {}

    def test_builds_path_to_url_map(self) -> None:
        """Each artifact maps its path to its URL."""
        records = [
            {"path": "dist/app.whl", "url": "https://a/app.whl", "node_index": 0},
            {"path": "reports/junit.xml", "url": "https://a/junit.xml", "node_index": 0},
        ]
        assert collect_job_artifacts(records) == {
            "dist/app.whl": "https://a/app.whl",
            "reports/junit.xml": "https://a/junit.xml",
        }

    def test_duplicate_path_within_job_last_wins(self) -> None:
        """Within one job the last listed duplicate wins."""
        records = [
            {"path": "log.txt", "url": "https://node0/log.txt"},
            {"path": "log.txt", "url": "https://node1/log.txt"},
        ]
        assert collect_job_artifacts(records) == {"log.txt": "https://node1/log.txt"}

    def test_record_without_url_is_malformed(self) -> None:
        """An artifact without a URL is a malformed response."""
        with pytest.raises(MalformedResponseError):
            collect_job_artifacts([{"path": "a"}])


class TestMergeArtifactMap:
    def test_adds_new_paths(self) -> None:
        """New paths are added to the cumulative map."""
        assert merge_artifact_map({"a": "1"}, {"b": "2"}) == {"a": "1", "b": "2"}

    def test_earlier_job_wins_on_collision(self) -> None:
        """A path reported by two jobs keeps the first URL."""
        cumulative = merge_artifact_map({}, {"coverage.xml": "https://job-1"})
        cumulative = merge_artifact_map(cumulative, {"coverage.xml": "https://job-2"})

        assert cumulative == {"coverage.xml": "https://job-1"}

    def test_idempotent(self) -> None:
        """Merging the same job twice changes nothing."""
        job = {"a": "1", "b": "2"}
        once = merge_artifact_map({"a": "0"}, job)
        twice = merge_artifact_map(once, job)

        assert once == twice == {"a": "0", "b": "2"}

    def test_inputs_not_mutated(self) -> None:
        """Merging returns a new dict and leaves inputs alone."""
        cumulative = {"a": "1"}
        job = {"b": "2"}

        merged = merge_artifact_map(cumulative, job)

        assert cumulative == {"a": "1"}
        assert job == {"b": "2"}
        assert merged is not cumulative

    def test_keys_only_grow(self) -> None:
        """Keys are never removed and values never replaced."""
        cumulative: dict[str, str] = {}
        for job in ({"a": "1"}, {}, {"a": "x", "b": "2"}, {"c": "3"}):
            previous = dict(cumulative)
            cumulative = merge_artifact_map(cumulative, job)
            assert set(previous) <= set(cumulative)
            assert all(cumulative[k] == v for k, v in previous.items())
