"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── warden_identity/       # Identity core (domain, services, lifecycle)
    │   ├── unit/              # Fast, isolated tests
    │   └── integration/       # Credential store and lifecycle scenarios
    ├── warden_config/         # Settings loading and validation
    ├── warden/                # HTTP API tests (in-memory SQLite)
    └── shared/                # Shared fixtures and utilities

SQLite-backed tests always run. Tests marked ``@pytest.mark.integration``
need Docker (Testcontainers PostgreSQL) and are skipped unless enabled.

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests

Pytest Options:
    --run-integration    Run integration tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from warden_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Optional overrides for the test run (e.g. a different Postgres image)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.test").exists():
    load_dotenv(CONFIG_DIR / ".env.test")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests against a real PostgreSQL container (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    run_integration = config.getoption("--run-integration") or os.environ.get(
        "RUN_INTEGRATION",
        "",
    ).lower() in ("1", "true", "yes")

    if run_integration:
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )

    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Keep cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
