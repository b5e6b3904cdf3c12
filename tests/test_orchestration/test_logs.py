"""
Tests for quackci.orchestration.logs
======================================

    - render_log_entry() text layout
    - first_log_entry() on empty, non-list and malformed payloads
    - JobLogFetcher: steps None, actions without output, failing fetches.
      None of these is fatal.
"""

from unittest.mock import MagicMock

import requests
from structlog.testing import capture_logs

from quackci.core.models import Job, LogEntry
from quackci.integrations.circleci.client import CircleCIClient
from quackci.orchestration.logs import RULE, JobLogFetcher, first_log_entry, render_log_entry


def job(build_number=101) -> Job:
    return Job(name="build", status="success", build_number=build_number)


# =============================================================================
# Test: Rendering
# =============================================================================
class TestRenderLogEntry:
    def test_layout(self) -> None:
        """A log block has a header, the message and an end rule."""
        text = render_log_entry(
            "Run tests",
            2,
            LogEntry(time="2024-01-01T00:00:00Z", message="3 passed\n"),
        )

        assert text.split("\n") == [
            RULE,
            "| Logs for action 2 in step 'Run tests'",
            "| Time: 2024-01-01T00:00:00Z",
            RULE,
            "3 passed",
            "------------------ End Output --------------------",
            "",
        ]

    def test_missing_time(self) -> None:
        """An entry without a time is shown as unknown."""
        assert "| Time: unknown" in render_log_entry("s", 1, LogEntry(message="x"))


class TestFirstLogEntry:
    def test_takes_first_entry_only(self) -> None:
        """Only the first entry of an output is used."""
        entry = first_log_entry([
            {"time": "t1", "message": "first", "type": "out"},
            {"time": "t2", "message": "second", "type": "out"},
        ])
        assert entry.message == "first"

    def test_empty_list(self) -> None:
        """An empty output has no entry."""
        assert first_log_entry([]) is None

    def test_not_a_list(self) -> None:
        """Outputs that are not lists have no entry."""
        assert first_log_entry({"message": "x"}) is None
        assert first_log_entry(None) is None

    def test_malformed_entry(self) -> None:
        """An entry that is not an object is ignored."""
        assert first_log_entry(["just a string"]) is None


# =============================================================================
# Test: JobLogFetcher
# =============================================================================
class TestJobLogFetcher:
    """Tests for JobLogFetcher.fetch()."""

    def test_emits_each_action_with_output(self, mock_client, emitted) -> None:
        """Every step header and action log block is emitted in order."""
        mock_client.set_job_details(101, {"steps": [
            {"name": "Checkout", "actions": [{"output_url": "https://o/1"}]},
            {"name": "Test", "actions": [
                {"output_url": "https://o/2"},
                {"output_url": "https://o/3"},
            ]},
        ]})
        mock_client.set_action_output("https://o/1", [{"time": "t1", "message": "cloned"}])
        mock_client.set_action_output("https://o/2", [{"time": "t2", "message": "node 0"}])
        mock_client.set_action_output("https://o/3", [{"time": "t3", "message": "node 1"}])

        count = JobLogFetcher(mock_client, emit=emitted.append).fetch(job())

        assert count == 3
        assert emitted[:2] == ["", "Step: Checkout"]
        assert "| Logs for action 1 in step 'Checkout'" in emitted[2]
        assert "cloned" in emitted[2]
        assert emitted[3:5] == ["", "Step: Test"]
        assert "| Logs for action 2 in step 'Test'" in emitted[6]
        assert "node 1" in emitted[6]

    def test_steps_none_emits_nothing(self, mock_client, emitted) -> None:
        """A job with no recorded steps emits nothing."""
        mock_client.set_job_details(101, {"steps": None})

        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job()) == 0
        assert emitted == []
        assert mock_client.calls_to("get_action_output") == []

    def test_empty_steps_list(self, mock_client, emitted) -> None:
        """An empty step list emits nothing."""
        mock_client.set_job_details(101, {"steps": []})

        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job()) == 0
        assert emitted == []

    def test_action_without_output_url_skipped(self, mock_client, emitted) -> None:
        """Actions without output are skipped without a request."""
        mock_client.set_job_details(101, {"steps": [
            {"name": "Spin up environment", "actions": [{"name": "setup"}, {"output_url": None}]},
        ]})

        count = JobLogFetcher(mock_client, emit=emitted.append).fetch(job())

        assert count == 0
        assert emitted == ["", "Step: Spin up environment"]
        assert mock_client.calls_to("get_action_output") == []

    def test_empty_output_skipped(self, mock_client, emitted) -> None:
        """An empty output payload emits no block."""
        mock_client.set_job_details(101, {"steps": [
            {"name": "Quiet", "actions": [{"output_url": "https://o/quiet"}]},
        ]})
        mock_client.set_action_output("https://o/quiet", [])

        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job()) == 0

    def test_failed_output_fetch_moves_on(self, mock_client, emitted) -> None:
        """A failed output fetch is skipped and the next action runs."""
        mock_client.set_job_details(101, {"steps": [
            {"name": "Test", "actions": [
                {"output_url": "https://o/gone"},
                {"output_url": "https://o/ok"},
            ]},
        ]})
        mock_client.set_action_output("https://o/ok", [{"message": "fine"}])

        count = JobLogFetcher(mock_client, emit=emitted.append).fetch(job())

        assert count == 1
        assert mock_client.calls_to("get_action_output") == ["https://o/gone", "https://o/ok"]
        assert "fine" in emitted[-1]

    def test_failed_details_fetch_is_not_fatal(self, mock_client, emitted) -> None:
        """A failed details request is logged, not raised."""
        mock_client.set_failure("get_job_details")

        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job()) == 0
        assert emitted == []

    def test_malformed_details_not_fatal(self, mock_client, emitted) -> None:
        """Unparseable job details are logged, not raised."""
        mock_client.set_job_details(101, {"steps": "not-a-list"})

        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job()) == 0

    def test_job_without_build_number(self, mock_client, emitted) -> None:
        """Jobs without a build number are not looked up."""
        assert JobLogFetcher(mock_client, emit=emitted.append).fetch(job(None)) == 0
        assert mock_client.calls_to("get_job_details") == []

    def test_unreachable_details_warning_has_no_token(self, emitted) -> None:
        """The warning for an unreachable legacy endpoint never contains the token."""
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.ConnectionError(
            "Max retries exceeded with url: /api/v1.1/project/github/acme/widgets/101"
            "?circle-token=SUPERSECRET"
        )
        client = CircleCIClient(org="acme", repo="widgets", token="SUPERSECRET", session=session)

        with capture_logs() as logs:
            count = JobLogFetcher(client, emit=emitted.append).fetch(job())

        assert count == 0
        warnings = [entry for entry in logs if entry["event"] == "job_details_unavailable"]
        assert len(warnings) == 1
        assert all("SUPERSECRET" not in str(entry) for entry in logs)
