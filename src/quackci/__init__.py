"""
quackci - Drive a CI Pipeline Run End to End
==============================================

quackci triggers a pipeline on a remote CI service, waits for it to finish,
collects the artifacts and step logs of every job, and reduces the result to
a single pass/fail exit code:

    Trigger → Discover workflows → Poll to completion → Walk jobs → Reduce

Architecture Layers (top to bottom):
    1. CLI            - `quackci run`
    2. Orchestration  - PipelineRunner and its stages
    3. Infrastructure - artifact map persistence
    4. Integrations   - CI service clients (HTTP, mock)
    5. Core           - config, models, enums, exceptions

Quick Start:
    >>> from quackci import PipelineRunner
    >>> from quackci.core.config import load_config
    >>> outcome = PipelineRunner(load_config(org="acme", token="...", repo="widgets")).run()
"""

__version__ = "0.1.0"

from quackci.orchestration.runner import PipelineRunner

__all__ = ["PipelineRunner", "__version__"]
