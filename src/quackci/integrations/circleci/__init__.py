"""
quackci.integrations.circleci - Remote CI Service Clients
===========================================================

    BaseCIClient (ABC)
        ├── CircleCIClient  - requests-based, talks to the real API
        └── MockCIClient    - scripted, for tests and dry runs

Usage:
    from quackci.integrations.circleci import CircleCIClient, MockCIClient
"""

from quackci.integrations.circleci.base import ApiResponse, BaseCIClient
from quackci.integrations.circleci.client import CircleCIClient
from quackci.integrations.circleci.mock import MockCIClient

__all__ = [
    "ApiResponse",
    "BaseCIClient",
    "CircleCIClient",
    "MockCIClient",
]
