"""
quackci.orchestration.logs - Step Log Retrieval
=================================================

Fetches the legacy detailed job record and surfaces the first log entry of
every action that has output.

    get_job_details(n)
        └── steps is None ──→ log "no steps", done
        └── for step in steps
              └── for action in step.actions
                    ├── no output_url ──→ log "no output", next
                    └── get_action_output(url)[0] ──→ render ──→ emit

Nothing at this level is fatal. A failed request, an empty payload or an
unparseable record is logged and the walk moves on. The rendered text goes
to the ``emit`` callable (console output); structured events go to structlog.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import structlog

from quackci.core.exceptions import CIClientError, MalformedResponseError
from quackci.core.models import Job, JobDetails, LogEntry, parse_record
from quackci.integrations.circleci.base import BaseCIClient


logger = structlog.get_logger()


RULE = "-" * 50


def render_log_entry(step_name: str, action_index: int, entry: LogEntry) -> str:
    """Render one action's log entry as an operator-facing text block.

    Args:
        step_name: Name of the step the action belongs to.
        action_index: 1-based position of the action within the step.
        entry: The first log entry of the action's output.
    """
    return "\n".join([
        RULE,
        f"| Logs for action {action_index} in step '{step_name}'",
        f"| Time: {entry.time or 'unknown'}",
        RULE,
        entry.message.rstrip("\n"),
        "------------------ End Output --------------------",
        "",
    ])


def first_log_entry(payload: Any) -> Optional[LogEntry]:
    """Return the first entry of an action output payload, if it has one."""
    if not isinstance(payload, list) or not payload:
        return None
    try:
        return parse_record(LogEntry, payload[0], "log entry")
    except MalformedResponseError:
        return None


class JobLogFetcher:
    """Retrieves and emits step logs for one job at a time."""

    def __init__(
        self,
        client: BaseCIClient,
        emit: Callable[[str], None] = print,
    ) -> None:
        self._client = client
        self._emit = emit
        self._logger = logger.bind(component="job_log_fetcher")

    def fetch(self, job: Job) -> int:
        """Emit the step logs of ``job``.

        Returns:
            The number of log blocks emitted.
        """
        if job.build_number is None:
            return 0
        build_number = job.build_number

        self._logger.info("fetching_job_details", build_number=build_number)
        try:
            details = parse_record(
                JobDetails,
                self._client.get_job_details(build_number),
                "job details",
            )
        except (CIClientError, MalformedResponseError) as e:
            self._logger.warning(
                "job_details_unavailable",
                build_number=build_number,
                error=e.message,
            )
            return 0

        if details.steps is None:
            self._logger.info("no_steps_found", build_number=build_number)
            return 0

        self._logger.info(
            "steps_found",
            build_number=build_number,
            step_count=len(details.steps),
        )

        emitted = 0
        for step in details.steps:
            self._emit("")
            self._emit(f"Step: {step.name}")
            for index, action in enumerate(step.actions, start=1):
                if self._emit_action(build_number, step.name, index, action.output_url):
                    emitted += 1
        return emitted

    def _emit_action(
        self,
        build_number: int,
        step_name: str,
        index: int,
        output_url: Optional[str],
    ) -> bool:
        if not output_url:
            self._logger.info(
                "no_output_url",
                build_number=build_number,
                step=step_name,
                action=index,
            )
            return False

        try:
            payload = self._client.get_action_output(output_url)
        except CIClientError as e:
            self._logger.warning(
                "action_output_unavailable",
                build_number=build_number,
                step=step_name,
                action=index,
                error=e.message,
            )
            return False

        entry = first_log_entry(payload)
        if entry is None:
            self._logger.info(
                "empty_action_output",
                build_number=build_number,
                step=step_name,
                action=index,
            )
            return False

        self._emit(render_log_entry(step_name, index, entry))
        return True
