"""
Shared Test Fixtures for quackci
==================================

    1. Configuration fixtures
    2. Time: a recording fake sleep (no test ever really waits)
    3. Integration fixtures (MockCIClient)
    4. Infrastructure fixtures (artifact map stores)
"""

from __future__ import annotations

import pytest

from quackci.core.config import QuackConfig
from quackci.infrastructure.artifact_store import InMemoryArtifactMapStore
from quackci.integrations.circleci.mock import MockCIClient


class FakeSleep:
    """Stands in for time.sleep; records every requested duration."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def config(tmp_path):
    """Complete run configuration writing into a temporary directory."""
    return QuackConfig(
        org="acme",
        token="test-token",
        repo="acme/widgets",
        branch="feature/ducks",
        work_dir=tmp_path,
    )


# =============================================================================
# Time
# =============================================================================

@pytest.fixture
def fake_sleep():
    """Recording replacement for time.sleep."""
    return FakeSleep()


# =============================================================================
# CI Client
# =============================================================================

@pytest.fixture
def mock_client():
    """Fresh MockCIClient with nothing scripted."""
    return MockCIClient(pipeline_id="pipe-123", pipeline_number=42)


@pytest.fixture
def finished_client(mock_client):
    """MockCIClient scripted for one finished workflow with two green jobs."""
    mock_client.queue_workflows([{"id": "wf-1", "status": "success"}])
    mock_client.set_jobs("wf-1", [
        {"name": "build", "status": "success", "job_number": 101},
        {"name": "test", "status": "success", "job_number": 102},
    ])
    mock_client.set_artifacts(101, [{"path": "dist/app.whl", "url": "https://a/app.whl"}])
    mock_client.set_artifacts(102, [{"path": "reports/junit.xml", "url": "https://a/junit.xml"}])
    return mock_client


# =============================================================================
# Infrastructure
# =============================================================================

@pytest.fixture
def memory_store():
    """Fresh InMemoryArtifactMapStore."""
    return InMemoryArtifactMapStore()


@pytest.fixture
def emitted():
    """List collecting rendered log text; pass ``emitted.append`` as emit."""
    return []
