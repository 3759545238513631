"""Root pytest configuration for test discovery and auto-skip behavior.

All tests stay visible in the test explorer while slow or manual tests are
auto-skipped unless explicitly enabled via environment variables or pytest
options.

Test Structure:
    tests/
    ├── bigbank/
    │   └── unit/              # Fast, isolated tests (fake portal, no network)
    ├── external/              # Real bank tests (requires credentials + SMS)
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_MANUAL_TAN=1     Run @pytest.mark.tan and @pytest.mark.manual tests
    RUN_EXTERNAL=1       Run external bank tests (requires credentials)
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-manual         Run manual/TAN tests
    --run-external       Run external bank tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from bigbank_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-manual",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.manual or @pytest.mark.tan",
    )
    parser.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests that connect to the real Bigbank portal",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "manual: Tests requiring manual intervention (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "tan: Tests requiring an SMS mTAN (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "external: Tests connecting to real external services (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip tests based on markers unless explicitly enabled."""
    if config.getoption("--run-all") or _env_flag("RUN_ALL_TESTS"):
        return

    run_manual = config.getoption("--run-manual") or _env_flag("RUN_MANUAL_TAN")
    run_external = config.getoption("--run-external") or _env_flag("RUN_EXTERNAL")

    skip_manual = pytest.mark.skip(
        reason="Manual/TAN test - run with --run-manual or RUN_MANUAL_TAN=1",
    )
    skip_external = pytest.mark.skip(
        reason="External test - run with --run-external or RUN_EXTERNAL=1",
    )

    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}

        if not run_manual and ("manual" in item_markers or "tan" in item_markers):
            item.add_marker(skip_manual)

        if not run_external and "external" in item_markers:
            item.add_marker(skip_external)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Ensure every test session starts from freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
