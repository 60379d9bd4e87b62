"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers, sets up logging and gates browser tests behind
the --run-ui option.

================================================================================
"""

import os

import pytest

from autotest_tools.common import init_logger


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "unit: Framework tests against in-memory fakes (no browser)"
    )
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )
    config.addinivalue_line(
        "markers", "ui: UI tests driving a real browser (need --run-ui)"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Login, signup and logout"
    )
    config.addinivalue_line(
        "markers", "search: Search and results"
    )
    config.addinivalue_line(
        "markers", "pin: Saving pins to boards"
    )
    config.addinivalue_line(
        "markers", "profile: Profile editing"
    )
    config.addinivalue_line(
        "markers", "home: Home feed and scrolling"
    )

    init_logger(level=os.getenv("LOG_LEVEL", "INFO"))


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Tests under ui_testing get the 'ui' marker, tests under unit get 'unit'.
    UI tests are skipped unless --run-ui is given.
    """
    run_ui = config.getoption("--run-ui")
    skip_ui = pytest.mark.skip(reason="UI test: pass --run-ui to run against the live app")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        elif os.sep + "unit" + os.sep in path:
            item.add_marker(pytest.mark.unit)

        if not run_ui and item.get_closest_marker("ui") is not None:
            item.add_marker(skip_ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Resilient UI Automation Suite",
        f"UI tests: {'enabled' if config.getoption('--run-ui') else 'skipped (use --run-ui)'}",
        "=" * 60,
        "",
    ]
