"""
quackci.infrastructure.artifact_store - Artifact Map Persistence
==================================================================

The cumulative artifact map (artifact path → download URL) is the one piece of
state that outlives the process. It is overwritten wholesale after every job,
so that a fatal error later in the walk still leaves the partial map on disk.

    ┌────────────────┐   save(map) after each job   ┌─────────────────────┐
    │ JobTreeWalker   │ ───────────────────────────→ │  ArtifactMapStore    │
    └────────────────┘                               │                      │
                                                     │  JsonFile → disk     │
                                                     │  InMemory → tests    │
                                                     └─────────────────────┘

Storage Implementations:
    - JsonFileArtifactMapStore: writes <work_dir>/artifacts.json
    - InMemoryArtifactMapStore: keeps every saved snapshot, for tests

Usage:
    >>> store = JsonFileArtifactMapStore(Path("/workspace/artifacts.json"))
    >>> store.initialize()                      # writes {}
    >>> store.save({"dist/app.whl": "https://..."})
    >>> store.load()
    {'dist/app.whl': 'https://...'}
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from quackci.core.exceptions import ArtifactStoreError


logger = structlog.get_logger()


# =============================================================================
# Abstract Base Class
# =============================================================================
class ArtifactMapStore(ABC):
    """Abstract interface for persisting the cumulative artifact map."""

    def initialize(self) -> None:
        """Reset the persisted map to empty before a run starts."""
        self.save({})

    @abstractmethod
    def save(self, artifact_map: dict[str, str]) -> None:
        """Replace the persisted map with ``artifact_map``.

        Raises:
            ArtifactStoreError: If the map cannot be written.
        """

    @abstractmethod
    def load(self) -> dict[str, str]:
        """Return the most recently saved map ({} if none)."""


# =============================================================================
# JSON File Implementation
# =============================================================================
class JsonFileArtifactMapStore(ArtifactMapStore):
    """Persists the artifact map as a single JSON object file.

    Writes go to a temporary file in the same directory followed by
    os.replace(), so readers never observe a half-written file.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._logger = logger.bind(component="artifact_map_store", path=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    def save(self, artifact_map: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".artifacts-",
                suffix=".json",
                dir=str(self._path.parent),
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(artifact_map, f, ensure_ascii=False, indent=2, sort_keys=True)
                    f.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ArtifactStoreError(
                message=f"Failed to write artifact map: {e}",
                path=str(self._path),
            ) from e

        self._logger.debug("artifact_map_saved", artifact_count=len(artifact_map))

    def load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}


# =============================================================================
# In-Memory Implementation
# =============================================================================
class InMemoryArtifactMapStore(ArtifactMapStore):
    """Keeps every saved snapshot in memory. Not shared between processes."""

    def __init__(self) -> None:
        self._snapshots: list[dict[str, str]] = []

    @property
    def snapshots(self) -> list[dict[str, str]]:
        """Every map passed to save(), oldest first."""
        return self._snapshots

    def save(self, artifact_map: dict[str, str]) -> None:
        self._snapshots.append(dict(artifact_map))

    def load(self) -> dict[str, str]:
        return dict(self._snapshots[-1]) if self._snapshots else {}
