"""
quackci.core.state - Run Accumulators
=======================================

The walk accumulates exactly two things across every job of every workflow:
the pipeline-wide artifact map and a sticky failure flag. Both live on an
explicit AggregateResult value that the JobTreeWalker threads through and
returns; no module-level state.

Monotonicity:
    - failed goes False → True and never back.
    - artifact_map only gains keys; an existing key keeps its first value.

Both update methods return a new snapshot (model_copy), following the
immutable-by-convention pattern for state models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from quackci.core.enums import ExitCode
from quackci.core.models import Job, Pipeline


class AggregateResult(BaseModel):
    """Cumulative result of walking a pipeline's job tree.

    Attributes:
        artifact_map: path → url across all jobs walked so far.
        failed: Sticky flag, set once any job is failed or errored.
        failed_jobs: Names of the jobs that set the flag, in walk order.
        jobs_walked: Number of jobs classified so far.
    """

    artifact_map: dict[str, str] = Field(default_factory=dict)
    failed: bool = False
    failed_jobs: list[str] = Field(default_factory=list)
    jobs_walked: int = 0

    def record_job(self, job: Job) -> AggregateResult:
        """Classify one job and return the updated snapshot."""
        update: dict = {"jobs_walked": self.jobs_walked + 1}
        if job.is_failing:
            update["failed"] = True
            update["failed_jobs"] = list(self.failed_jobs) + [job.name]
        return self.model_copy(update=update)

    def with_artifact_map(self, artifact_map: dict[str, str]) -> AggregateResult:
        """Return a snapshot carrying an already-merged artifact map."""
        return self.model_copy(update={"artifact_map": dict(artifact_map)})


class RunOutcome(BaseModel):
    """Final, reduced outcome of one run. The CLI exits with exit_code."""

    failed: bool
    exit_code: ExitCode
    artifact_map: dict[str, str] = Field(default_factory=dict)
    failed_jobs: list[str] = Field(default_factory=list)
    pipeline: Optional[Pipeline] = None
