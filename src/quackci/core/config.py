"""
quackci.core.config - Configuration Management
================================================

Configuration can be loaded from multiple sources with the following priority
(highest first):

    1. Explicit constructor arguments (the CLI passes its options here)
    2. YAML configuration file (quackci.yaml), passed through load_config()
    3. Environment variables (prefixed with QUACKCI_)
    4. Default values defined in the models below

    QuackConfig
        ├── PollingConfig   → WorkflowDiscoveryWaiter, CompletionPoller
        ├── HttpConfig      → CircleCIClient
        └── (run inputs)    → PipelineTrigger, JobTreeWalker, ArtifactMapStore

Environment Variables:
    QUACKCI_ORG=my-org
    QUACKCI_TOKEN=...
    QUACKCI_REPO=my-org/my-repo
    QUACKCI_BRANCH=feature/x
    QUACKCI_GET_LOGS=false
    QUACKCI_POLLING__COMPLETION_INTERVAL_SECONDS=30
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from quackci.core.exceptions import ConfigurationError


ARTIFACTS_FILENAME = "artifacts.json"


# =============================================================================
# Polling Configuration
# =============================================================================
# Discovery is bounded by discovery_timeout_seconds. Completion polling has an
# interval and no timeout; the operator kills the process to abort.
# =============================================================================
class PollingConfig(BaseModel):
    """Timing of the two polling loops.

    Attributes:
        discovery_interval_seconds: Sleep between workflow-discovery attempts.
        discovery_timeout_seconds: Total sleep after which discovery gives up.
        completion_interval_seconds: Sleep between completion polls.
    """

    discovery_interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to sleep between workflow discovery attempts",
    )
    discovery_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Maximum total wait for the first workflow to appear",
    )
    completion_interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to sleep between completion polls (no timeout)",
    )


class HttpConfig(BaseModel):
    """Remote CI service endpoints and transport settings."""

    api_base_url: str = Field(
        default="https://circleci.com/api",
        description="Base URL of the CI REST API (v2 and v1.1 live below it)",
    )
    app_base_url: str = Field(
        default="https://app.circleci.com",
        description="Base URL of the CI web UI, used for pipeline links",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )


# =============================================================================
# Main Configuration
# =============================================================================
class QuackConfig(BaseSettings):
    """Top-level configuration for one pipeline run.

    org and token have empty defaults so the object can be built anywhere
    (tests, YAML loading); require_credentials() enforces them before the
    run starts.

    Attributes:
        org: CI organization name.
        token: CI API token.
        repo: Repository name. "owner/name" is reduced to "name".
        branch: Branch to build. Empty or None falls back to "main" at
            trigger time.
        get_logs: Whether to fetch step logs through the legacy endpoint.
        work_dir: Directory receiving artifacts.json.
        vcs: VCS segment of project slugs ("github", "bitbucket").
        log_level: Logging level for structlog.
        polling: Timing of the discovery and completion loops.
        http: Endpoint and transport settings.

    Example:
        >>> config = QuackConfig(org="acme", token="t0k", repo="acme/widgets")
        >>> config.repo
        'widgets'
    """

    org: str = Field(default="", description="CI organization name")
    token: Optional[str] = Field(default=None, description="CI API token")
    repo: str = Field(default="", description="Repository name")
    branch: Optional[str] = Field(
        default=None,
        description="Branch to trigger the pipeline on (default: main)",
    )
    get_logs: bool = Field(
        default=True,
        description="Fetch per-action step logs after the run",
    )
    work_dir: Path = Field(
        default=Path("."),
        description="Directory receiving the artifacts.json output",
    )
    vcs: str = Field(default="github", description="VCS segment of project slugs")
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    polling: PollingConfig = Field(default_factory=PollingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = {
        "env_prefix": "QUACKCI_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @field_validator("repo")
    @classmethod
    def _strip_owner(cls, value: str) -> str:
        # GITHUB_REPOSITORY is "owner/name"; the CI project slug wants "name".
        if "/" in value:
            return value.split("/", 1)[1]
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def artifacts_path(self) -> Path:
        """Location of the persisted artifact map."""
        return self.work_dir / ARTIFACTS_FILENAME

    def require_credentials(self) -> None:
        """Fail fast if a value needed to talk to the CI service is missing.

        Raises:
            ConfigurationError: Naming every missing value.
        """
        missing = [
            name for name, value in (
                ("org", self.org),
                ("token", self.token),
                ("repo", self.repo),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                message=f"Missing required configuration: {', '.join(missing)}",
                error_code="MISSING_CONFIG",
                details={"missing": missing},
            )


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None, **overrides: Any) -> QuackConfig:
    """Load configuration from a YAML file, environment and overrides.

    Args:
        path: Path to a YAML file. If None, 'quackci.yaml' in the current
            directory is used when present.
        **overrides: Explicit values; they win over YAML, and YAML wins
            over the environment.
            None values are ignored so unset CLI options fall through.

    Returns:
        A validated QuackConfig.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigurationError: If the YAML file cannot be parsed.
    """
    if path is None:
        default_path = Path("quackci.yaml")
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path) as f:
            try:
                raw_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    message=f"Invalid YAML in {path}: {e}",
                    details={"path": path},
                ) from e
            if isinstance(raw_data, dict):
                yaml_data = raw_data

    yaml_data.update({k: v for k, v in overrides.items() if v is not None})
    return QuackConfig(**yaml_data)
