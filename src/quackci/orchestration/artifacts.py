"""
quackci.orchestration.artifacts - Artifact Map Aggregation
============================================================

Two pure functions:

    collect_job_artifacts(records)        one job's listing → {path: url}
                                          (later duplicates in the same listing win)

    merge_artifact_map(cumulative, job)   fold the cumulative map over the job's
                                          map: new paths are added, a path that
                                          is already present keeps its value

So on a path collision the job walked FIRST wins. Merging the same job map
twice gives the same result as merging it once.
"""

from __future__ import annotations

from typing import Any

from quackci.core.models import Artifact, parse_records


def collect_job_artifacts(records: list[dict[str, Any]]) -> dict[str, str]:
    """Build the path → url map for one job's artifact listing."""
    job_map: dict[str, str] = {}
    for artifact in parse_records(Artifact, records, "artifact"):
        job_map[artifact.path] = artifact.url
    return job_map


def merge_artifact_map(
    cumulative: dict[str, str],
    job_artifacts: dict[str, str],
) -> dict[str, str]:
    """Merge one job's artifacts into the cumulative map.

    Neither input is modified.

    Example:
        >>> merge_artifact_map({"x": "a"}, {"x": "b", "y": "c"})
        {'x': 'a', 'y': 'c'}
    """
    merged = dict(cumulative)
    for path, url in job_artifacts.items():
        merged.setdefault(path, url)
    return merged
