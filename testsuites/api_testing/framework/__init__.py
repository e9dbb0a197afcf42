"""
================================================================================
API Testing Framework
================================================================================

Building blocks for the PanicGuard API suite.

Modules:
    - settings / config_loader: YAML + environment configuration
    - http_client: HTTP client with Allure logging and redaction
    - token_manager: Session token holder and expiry checks
    - response_classifier: JSON vs. HTML error page normalization
    - session_bootstrap: Credential fallback login for fixtures
    - form_data / envelope / test_data_factory: payload helpers

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .http_client import HttpClient, HttpClientError
from .response_classifier import ErrorType, classify_response
from .session_bootstrap import SessionState, SessionStatus, bootstrap_session, teardown_session
from .settings import ApiSettings
from .test_data_factory import TestDataFactory
from .token_manager import TokenManager, TokenError

__all__ = [
    "ApiSettings",
    "ConfigLoader",
    "ConfigurationError",
    "ErrorType",
    "HttpClient",
    "HttpClientError",
    "SessionState",
    "SessionStatus",
    "TestDataFactory",
    "TokenManager",
    "TokenError",
    "bootstrap_session",
    "classify_response",
    "teardown_session",
]
