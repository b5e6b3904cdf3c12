"""
quackci.orchestration.reducer - Status Reduction
==================================================

The single place where overall pass/fail is decided. It looks only at the
job-level failure flag accumulated by the walker; workflow-level statuses
play no part.
"""

from __future__ import annotations

from typing import Optional

from quackci.core.enums import ExitCode
from quackci.core.models import Pipeline
from quackci.core.state import AggregateResult, RunOutcome


def reduce_status(
    result: AggregateResult,
    pipeline: Optional[Pipeline] = None,
) -> RunOutcome:
    """Fold an AggregateResult into the final RunOutcome."""
    return RunOutcome(
        failed=result.failed,
        exit_code=ExitCode.FAILURE if result.failed else ExitCode.SUCCESS,
        artifact_map=dict(result.artifact_map),
        failed_jobs=list(result.failed_jobs),
        pipeline=pipeline,
    )
