"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests, providing fixtures for browser
management, page objects, test data and test setup/teardown.

Key Features:
- Session settings from config/config.yaml (+ command line overrides)
- Browser and page lifecycle management, fresh session per test
- Page Object fixtures for all pages
- Injected CSV / JSON test data
- Failure capture (screenshot, URL, failed responses, locator health)

================================================================================
"""

from dataclasses import replace
from typing import Generator

import pytest
from loguru import logger
from playwright.sync_api import BrowserContext, Page

from autotest_tools.common import init_logger
from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.config_loader import ConfigLoader, UISettings
from testsuites.ui_testing.framework.data_provider import (
    CsvTestDataProvider,
    JsonTestDataProvider,
)
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.framework.waits import to_ms
from testsuites.ui_testing.pages import (
    EditProfilePage,
    HomePage,
    LoginPage,
    LogoutPage,
    PinPage,
    SearchPage,
    SignupPage,
)


# ================================================================================
# Settings and Data
# ================================================================================

@pytest.fixture(scope="session")
def config_loader() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture(scope="session")
def settings(request, config_loader: ConfigLoader) -> UISettings:
    """
    Session-scoped, read-only UI settings.

    --ui-browser and --ui-headed override the configured values.
    """
    settings = UISettings.from_config(config_loader)
    browser = request.config.getoption("--ui-browser")
    if browser:
        settings = replace(settings, browser=browser)
    if request.config.getoption("--ui-headed"):
        settings = replace(settings, headless=False)

    init_logger(
        level=settings.log_level,
        log_file=settings.log_file,
        rotation=config_loader.get("logging.rotation", "10 MB"),
        retention=config_loader.get("logging.retention", "7 days"),
        force=True,
    )
    logger.info(f"UI session: {settings.browser} (headless={settings.headless}) -> {settings.base_url}")
    return settings


@pytest.fixture(scope="session")
def csv_data(settings: UISettings) -> CsvTestDataProvider:
    """Scenario rows (credentials, queries, boards, profile values)."""
    return CsvTestDataProvider(settings.testdata_files["csv"])


@pytest.fixture(scope="session")
def json_data(settings: UISettings) -> JsonTestDataProvider:
    """Expected messages and nested scenario values."""
    return JsonTestDataProvider(settings.testdata_files["json"])


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager(settings: UISettings) -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser for all tests in the session, reducing
    browser launch overhead.
    """
    with BrowserManager.from_settings(settings) as manager:
        yield manager


@pytest.fixture(scope="function")
def context(browser_manager: BrowserManager) -> Generator[BrowserContext, None, None]:
    """
    Function-scoped browser context fixture.

    Creates a new browser context for each test, providing isolation.
    """
    context = browser_manager.new_context()
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext, settings: UISettings) -> Generator[Page, None, None]:
    """
    Function-scoped page fixture, opened on the home page with a fresh session.
    """
    page = context.new_page()
    page.goto(settings.url_for("/"), timeout=to_ms(settings.page_load_timeout))
    BrowserManager.fresh_session(page)
    page.reload(timeout=to_ms(settings.page_load_timeout))
    yield page
    page.close()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def home_page(page: Page, settings: UISettings) -> HomePage:
    return HomePage(page, settings)


@pytest.fixture
def login_page(page: Page, settings: UISettings) -> LoginPage:
    return LoginPage(page, settings)


@pytest.fixture
def signup_page(page: Page, settings: UISettings) -> SignupPage:
    return SignupPage(page, settings)


@pytest.fixture
def logout_page(page: Page, settings: UISettings) -> LogoutPage:
    return LogoutPage(page, settings)


@pytest.fixture
def search_page(page: Page, settings: UISettings) -> SearchPage:
    return SearchPage(page, settings)


@pytest.fixture
def pin_page(page: Page, settings: UISettings) -> PinPage:
    return PinPage(page, settings)


@pytest.fixture
def edit_profile_page(page: Page, settings: UISettings) -> EditProfilePage:
    return EditProfilePage(page, settings)


# ================================================================================
# Authentication Fixtures
# ================================================================================

@pytest.fixture
def logged_in(login_page: LoginPage, csv_data: CsvTestDataProvider) -> LoginPage:
    """
    Logs in as validUser before the test.

    Fails the test at setup when the login is not confirmed signed-in.
    """
    email, password = csv_data.credentials("validUser")
    result = login_page.login(email, password)
    if not (result.confirmed and login_page.is_logged_in()):
        pytest.fail(f"Precondition failed: validUser login ended {result.state.value}")
    return login_page


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Capture failure details when a UI test fails.

    Screenshot, URL, recent failed responses and locator health are attached
    to the Allure report through the first page object the test used.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    funcargs = getattr(item, "funcargs", {})
    page_object = next(
        (value for value in funcargs.values() if isinstance(value, BasePage)),
        None,
    )
    try:
        if page_object is not None:
            page_object.capture_failure(item.name)
        elif "page" in funcargs:
            HomePage(funcargs["page"], funcargs.get("settings")).capture_failure(item.name)
    except Exception as e:
        # Log but don't fail if failure capture fails
        logger.warning(f"Failed to capture failure details: {e}")
