"""
Repository-level pytest configuration.

Adds command line switches for pointing the live suite at another backend
without editing config files:

    pytest --api-base-url https://staging.example.com/api
    pytest --skip-api

The switches are applied to the environment in `pytest_configure`, before
any ConfigLoader is created, so they take precedence over .env and YAML.
No secrets live here; credentials come from .env or CI variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    group = parser.getgroup("panicguard", "PanicGuard API suite")
    group.addoption(
        "--api-base-url",
        action="store",
        default=None,
        help="Backend base URL (overrides API_BASE_URL)",
    )
    group.addoption(
        "--skip-api",
        action="store_true",
        default=False,
        help="Skip the live API suite (same as SKIP_API_TESTS=true)",
    )


def pytest_configure(config):
    base_url = config.getoption("--api-base-url")
    if base_url:
        os.environ["API_BASE_URL"] = base_url
    if config.getoption("--skip-api"):
        os.environ["SKIP_API_TESTS"] = "true"


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
