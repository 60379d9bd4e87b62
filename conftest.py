"""
Repository-level pytest configuration.

Command line options:
  --run-ui        run browser tests against the live application (off by default)
  --ui-browser    override ui.browser from config/config.yaml
  --ui-headed     show the browser window

Values come from config/config.yaml; credentials and other test data live in
testsuites/ui_testing/testdata/, never in code.
"""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_addoption(parser):
    group = parser.getgroup("ui", "UI automation")
    group.addoption(
        "--run-ui",
        action="store_true",
        default=False,
        help="Run browser (ui/e2e) tests against the live application",
    )
    group.addoption(
        "--ui-browser",
        action="store",
        default=None,
        choices=("chromium", "firefox", "webkit"),
        help="Browser for UI tests (overrides ui.browser)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Run the browser with a visible window",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
