"""
quackci Test Suite
==================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/           → quackci.core (config, models, state, exceptions)
    ├── test_integrations/   → quackci.integrations (HTTP and mock CI clients)
    ├── test_infrastructure/ → quackci.infrastructure (artifact map store)
    ├── test_orchestration/  → quackci.orchestration (every run stage)
    ├── test_integration/    → End-to-end runs and the CLI
    └── conftest.py          → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_orchestration # Run only orchestration tests
    pytest --cov=quackci            # Run with coverage report
"""
