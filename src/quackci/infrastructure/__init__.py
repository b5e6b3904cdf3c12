"""
quackci.infrastructure - Persistence Layer
============================================

    ArtifactMapStore (ABC)
        ├── JsonFileArtifactMapStore  - <work_dir>/artifacts.json
        └── InMemoryArtifactMapStore  - snapshot history, for tests

Usage:
    from quackci.infrastructure import JsonFileArtifactMapStore
"""

from quackci.infrastructure.artifact_store import (
    ArtifactMapStore,
    InMemoryArtifactMapStore,
    JsonFileArtifactMapStore,
)

__all__ = [
    "ArtifactMapStore",
    "InMemoryArtifactMapStore",
    "JsonFileArtifactMapStore",
]
