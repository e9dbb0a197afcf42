"""
================================================================================
API Settings
================================================================================

Explicit, immutable configuration object handed to every framework component
(HttpClient, TokenManager, response classifier, data factory, session
bootstrap) at construction time. Built once from ConfigLoader so no component
reads ambient process state on its own.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from .config_loader import PROJECT_ROOT, ConfigLoader


DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TOKEN_HEADER = "Auth-token"
DEFAULT_FALLBACK_CREDENTIALS: List[Dict[str, str]] = [
    {"username": "testauto@gmail.com", "password": "Test@123456", "pin": "123456"},
    {"username": "test@asd.com", "password": "Test@123456", "pin": "123456"},
]


@dataclass(frozen=True)
class ApiSettings:
    """
    Resolved suite configuration with documented defaults.

    Attributes mirror config/config.yaml; see that file for the environment
    variable that overrides each one.
    """

    # Transport
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    skip_api_tests: bool = False

    # Auth header
    token_header: str = DEFAULT_TOKEN_HEADER
    use_bearer_token: bool = False
    bearer_prefix: str = "Bearer"

    # Token lifecycle
    token_expires_at: Optional[str] = None
    refresh_threshold_minutes: int = 30
    auto_refresh: bool = False
    auto_update_token_file: bool = False
    env_file: Path = PROJECT_ROOT / ".env"

    # Response handling
    html_error_detection: bool = True
    strict_content_type_check: bool = False
    expected_content_type: str = "application/json"
    html_preview_length: int = 500

    # Credentials
    username: str = "test@example.com"
    password: str = "change_me"
    pin: str = "0000"
    fallback_credentials: List[Dict[str, str]] = field(
        default_factory=lambda: [dict(c) for c in DEFAULT_FALLBACK_CREDENTIALS]
    )

    # Device metadata sent with login
    device_platform: str = "iphone"
    app_version: str = "3.2"
    device_messaging_id: str = "test_device_token"
    latitude: str = "51.50722232"
    longitude: str = "-0.1275343123"
    altitude: str = "125"
    accuracy: str = "10"
    registration_id: str = ""
    otp_code: str = ""
    imei: str = ""

    # Test data generation
    generate_random_emails: bool = True
    generate_random_phones: bool = True
    random_string_length: int = 8
    test_email: str = "test@asd.com"
    test_mobile_number: str = "+380634534234"

    # Connectivity pre-flight
    connectivity_timeout: float = 10.0
    connectivity_report_file: Path = PROJECT_ROOT / "api-connectivity-report.json"

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "ApiSettings":
        """
        Resolve settings from a ConfigLoader (YAML + .env + environment).

        Keys also honour the flat environment names older .env files use
        (USE_BEARER_TOKEN, TEST_LATITUDE, APP_VERSION, ...). Malformed
        numbers fall back to the default with a warning.

        Args:
            config: Configuration loader. Creates the singleton if None.
        """
        if config is None:
            config = ConfigLoader()

        d = cls()

        def value(key: str, default: Any, *aliases: str) -> Any:
            return config.get_aliased(key, aliases, default)

        def number(key: str, default: Any, *aliases: str) -> Any:
            raw = value(key, default, *aliases)
            try:
                return type(default)(raw)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid {key} value {raw!r}, using {default}")
                return default

        expires_at = config.get_first(
            ["bearer_token.expires_at", "auth.token_expires_at"]
        )
        skip = bool(config.get("api.skip_tests", False)) or bool(
            config.get("skip.api_tests", False)
        )

        return cls(
            base_url=str(value("api.base_url", d.base_url)),
            timeout=number("api.timeout", d.timeout),
            skip_api_tests=skip,
            token_header=value("auth.token_header", d.token_header),
            use_bearer_token=value("auth.use_bearer_token", d.use_bearer_token, "use_bearer_token"),
            bearer_prefix=value("bearer_token.prefix", d.bearer_prefix),
            token_expires_at=str(expires_at) if expires_at else None,
            refresh_threshold_minutes=number(
                "bearer_token.refresh_threshold_minutes", d.refresh_threshold_minutes
            ),
            auto_refresh=value("bearer_token.auto_refresh", d.auto_refresh),
            auto_update_token_file=value(
                "auth.auto_update_token_file", d.auto_update_token_file, "auto_update_token_file"
            ),
            env_file=_resolve_path(config.get("auth.env_file"), d.env_file),
            html_error_detection=value(
                "response.html_error_detection", d.html_error_detection, "html_error_detection"
            ),
            strict_content_type_check=value(
                "response.strict_content_type_check",
                d.strict_content_type_check,
                "strict_content_type_check",
            ),
            expected_content_type=value(
                "response.expected_content_type", d.expected_content_type, "expected_content_type"
            ),
            html_preview_length=number("response.html_preview_length", d.html_preview_length),
            username=str(value("test.username", d.username, "login.username")),
            password=str(value("test.password", d.password, "login.password")),
            pin=str(value("test.pin", d.pin, "login.pin")),
            fallback_credentials=_credential_list(
                config.get("test.fallback_credentials"), d.fallback_credentials
            ),
            device_platform=value("device.platform", d.device_platform),
            app_version=str(value("device.app_version", d.app_version, "app_version")),
            device_messaging_id=value("device.messaging_id", d.device_messaging_id),
            latitude=str(value("device.latitude", d.latitude, "test.latitude")),
            longitude=str(value("device.longitude", d.longitude, "test.longitude")),
            altitude=str(value("device.altitude", d.altitude, "test.altitude")),
            accuracy=str(value("device.accuracy", d.accuracy, "test.accuracy")),
            registration_id=str(value("device.registration_id", d.registration_id, "registration_id")),
            otp_code=str(value("device.otp_code", d.otp_code, "otp_code")),
            imei=str(value("device.imei", d.imei, "imei")),
            generate_random_emails=value(
                "test_data.generate_random_emails", d.generate_random_emails, "generate_random_emails"
            ),
            generate_random_phones=value(
                "test_data.generate_random_phones", d.generate_random_phones, "generate_random_phones"
            ),
            random_string_length=number(
                "test_data.random_string_length", d.random_string_length, "random_string_length"
            ),
            test_email=value("test.email", d.test_email),
            test_mobile_number=str(value("test.mobile_number", d.test_mobile_number)),
            connectivity_timeout=number("connectivity.timeout", d.connectivity_timeout),
            connectivity_report_file=_resolve_path(
                config.get("connectivity.report_file"), d.connectivity_report_file
            ),
        )

    def with_overrides(self, **changes: Any) -> "ApiSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


def _resolve_path(value: Optional[str], default: Path) -> Path:
    """Resolve a configured path relative to the project root."""
    if not value:
        return default
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path


def _credential_list(
    value: Any, default: List[Dict[str, str]]
) -> List[Dict[str, str]]:
    if not isinstance(value, list):
        return [dict(c) for c in default]
    return [
        {k: str(v) for k, v in item.items() if v is not None}
        for item in value
        if isinstance(item, dict)
    ]


__all__ = [
    "ApiSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_TOKEN_HEADER",
]
