"""
================================================================================
Root Pytest Configuration
================================================================================

Registers the markers shared by the live API suite and the unit tests and
tags collected items by location.

================================================================================
"""

import pytest


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
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line("markers", "smoke: Quick verification tests")
    config.addinivalue_line("markers", "regression: Full regression test suite")
    config.addinivalue_line("markers", "positive: Happy-path tests")
    config.addinivalue_line("markers", "negative: Invalid input / unauthorized tests")
    config.addinivalue_line("markers", "edge: Boundary and unusual input tests")

    # Domain markers
    config.addinivalue_line("markers", "api: Live API tests (need a reachable backend)")
    config.addinivalue_line("markers", "unit: Offline framework tests")

    # Feature markers
    for feature, description in (
        ("auth", "authentication"),
        ("location", "location tracking"),
        ("alert", "alerts and dispatch"),
        ("meeting", "meetings"),
        ("journey", "journeys"),
        ("checkin", "check-ins"),
        ("shared_location", "shared location links"),
        ("emergency_contacts", "emergency contacts"),
        ("user_places", "user places"),
        ("user_profile", "user profile management"),
        ("reports", "anonymous reports"),
        ("registration", "user registration"),
        ("password", "password recovery"),
        ("app_settings", "application settings"),
        ("security", "security checks (injection, XSS)"),
    ):
        config.addinivalue_line(
            "markers", f"{feature}: Tests related to {description}"
        )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Tests under api_testing get the 'api' marker, tests under unit get 'unit'.
    """
    for item in items:
        parts = item.path.parts
        if "api_testing" in parts:
            item.add_marker(pytest.mark.api)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "PanicGuard API Regression Suite",
        "=" * 60,
        "",
    ]
