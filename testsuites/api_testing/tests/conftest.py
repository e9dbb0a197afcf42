"""
================================================================================
API Testing Pytest Configuration
================================================================================

Shared fixtures for the live PanicGuard API suite.

Fixtures:
    - config / settings: Resolved configuration (session)
    - data_factory: Payload builders (session)
    - make_client: Factory for HttpClient instances closed after the test
    - *_page: One page object per resource group, each with its own client
    - authenticated_context: Login via credential fallback (module)
    - auth_token: Token from authenticated_context, or None
    - authorize: Attach that token to a page object

The whole directory is skipped when the backend is unreachable or when
SKIP_API_TESTS / API_SKIP_TESTS is set.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import uuid
from typing import Callable, Generator, List, Optional

import allure
import pytest
from loguru import logger

from autotest_tools.connectivity import global_setup
from testsuites.api_testing.framework.config_loader import ConfigLoader
from testsuites.api_testing.framework.http_client import HttpClient
from testsuites.api_testing.framework.session_bootstrap import (
    AuthContext,
    bootstrap_session,
    teardown_session,
)
from testsuites.api_testing.framework.settings import ApiSettings
from testsuites.api_testing.framework.test_data_factory import TestDataFactory
from testsuites.api_testing.pages import (
    AuthPage,
    BasePage,
    DocumentsPage,
    EmergencyContactsPage,
    EventPage,
    InviteUsersPage,
    MiscPage,
    ReportsPage,
    UnauthorizedPage,
    UserPage,
    UserPlacesPage,
)


# =============================================================================
# Session-Scoped Fixtures (Shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """
    Provide configuration loader instance.

    Session-scoped to ensure configuration is loaded only once.
    """
    return ConfigLoader()


@pytest.fixture(scope="session")
def settings(config: ConfigLoader) -> ApiSettings:
    return ApiSettings.from_config(config)


@pytest.fixture(scope="session", autouse=True)
def api_available(settings: ApiSettings) -> None:
    """
    Skip the live suite when it cannot produce meaningful results.

    Runs the connectivity pre-flight once per session (per xdist worker).
    """
    if settings.skip_api_tests:
        pytest.skip("API tests skipped via SKIP_API_TESTS / API_SKIP_TESTS")

    result = global_setup(settings)
    if not result.accessible:
        pytest.skip(f"API not accessible at {result.url}: {result.reason}")


@pytest.fixture(scope="session")
def data_factory(settings: ApiSettings) -> TestDataFactory:
    return TestDataFactory(settings)


# =============================================================================
# Clients and Pages (Fresh for each test)
# =============================================================================

@pytest.fixture
def make_client(settings: ApiSettings) -> Generator[Callable[[], HttpClient], None, None]:
    """
    Provide a factory for HTTP clients.

    Every call returns a new client with its own token; all of them are
    closed after the test.
    """
    clients: List[HttpClient] = []

    def _make() -> HttpClient:
        client = HttpClient(settings)
        client.open()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def auth_page(make_client) -> AuthPage:
    return AuthPage(make_client())


@pytest.fixture
def event_page(make_client) -> EventPage:
    return EventPage(make_client())


@pytest.fixture
def user_page(make_client) -> UserPage:
    return UserPage(make_client())


@pytest.fixture
def emergency_contacts_page(make_client) -> EmergencyContactsPage:
    return EmergencyContactsPage(make_client())


@pytest.fixture
def user_places_page(make_client) -> UserPlacesPage:
    return UserPlacesPage(make_client())


@pytest.fixture
def documents_page(make_client) -> DocumentsPage:
    return DocumentsPage(make_client())


@pytest.fixture
def invite_users_page(make_client) -> InviteUsersPage:
    return InviteUsersPage(make_client())


@pytest.fixture
def reports_page(make_client) -> ReportsPage:
    return ReportsPage(make_client())


@pytest.fixture
def unauthorized_page(make_client) -> UnauthorizedPage:
    return UnauthorizedPage(make_client())


@pytest.fixture
def misc_page(make_client) -> MiscPage:
    return MiscPage(make_client())


@pytest.fixture
def unique_id() -> str:
    """
    Generate unique identifier for test isolation.

    Use this to create unique test data that won't conflict
    with other tests running in parallel.
    """
    return f"autotest_{uuid.uuid4().hex[:8]}"


# =============================================================================
# Authentication
# =============================================================================

@pytest.fixture(scope="module")
def authenticated_context(
    settings: ApiSettings,
    data_factory: TestDataFactory,
) -> Generator[AuthContext, None, None]:
    """
    Log in once per test module, trying each configured credential set.

    Yields an AuthContext whose token may be None; tests then check the
    unauthenticated behavior instead. Logout runs best-effort on teardown.
    """
    with HttpClient(settings) as client:
        auth_page = AuthPage(client)
        state = bootstrap_session(auth_page, data_factory.get_credential_sets())
        logger.info(f"Session bootstrap: {state.status.value} after {state.attempts} attempt(s)")

        yield AuthContext(auth_page=auth_page, state=state)

        teardown_session(auth_page, state)


@pytest.fixture
def auth_token(authenticated_context: AuthContext) -> Optional[str]:
    return authenticated_context.token


@pytest.fixture
def authorize(auth_token: Optional[str]) -> Callable[[BasePage], BasePage]:
    """
    Attach the module's session token to a page, when there is one.

    Without a token the page stays anonymous and the test exercises the
    unauthenticated path; assertions only require "no server error".
    """

    def _authorize(page: BasePage) -> BasePage:
        if auth_token:
            page.set_auth_token(auth_token)
        return page

    return _authorize


# =============================================================================
# Allure Reporting Hooks
# =============================================================================

def pytest_exception_interact(node, call, report):
    """Attach additional info on test failure."""
    if report.failed:
        allure.attach(
            str(call.excinfo.value),
            name="Error Details",
            attachment_type=allure.attachment_type.TEXT
        )
