"""
================================================================================
HTTP Client with Allure Integration
================================================================================

Thin transport wrapper used by every page object:
    - Base URL handling for the configured backend
    - Auth header attachment through the client's own TokenManager
    - JSON bodies and multipart form-data bodies
    - Transport failures surfaced as HttpClientError (endpoint + cause)
    - Comprehensive Allure reporting with cURL command generation

The client does not retry. The test runner's own rerun setting is the only
retry mechanism and it reruns the whole test.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Tuple

import allure
import httpx
from allure_commons.types import AttachmentType
from loguru import logger

from .form_data import convert_to_form_data
from .response_classifier import is_html_content
from .settings import ApiSettings
from .token_manager import TokenManager


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000

MASK = "***MASKED***"
SENSITIVE_HEADERS = {"authorization", "auth-token", "x-api-key", "cookie", "set-cookie"}
SENSITIVE_FIELD_PARTS = ("password", "secret", "token", "api_key", "authorization", "session")
SENSITIVE_FIELD_NAMES = {"pin", "otp_code"}


class HttpClientError(Exception):
    """Raised when a request cannot be completed (network error, timeout)."""

    def __init__(self, method: str, endpoint: str, message: str) -> None:
        self.method = method
        self.endpoint = endpoint
        super().__init__(f"{method} request failed for {endpoint}: {message}")


class HttpClient:
    """
    HTTP client for the PanicGuard backend.

    Each instance owns one TokenManager, so a token set on one page object
    never leaks into another.

    Usage:
        >>> settings = ApiSettings.from_config()
        >>> with HttpClient(settings) as client:
        ...     client.token_manager.set_token("abc")
        ...     response = client.get("/user/profile", include_auth=True)
    """

    def __init__(
        self,
        settings: Optional[ApiSettings] = None,
        token_manager: Optional[TokenManager] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            settings: Resolved suite settings. Loaded from config if None.
            token_manager: Token holder. A fresh one is created if None.
            transport: Optional httpx transport (unit tests use MockTransport).
        """
        if settings is None:
            settings = ApiSettings.from_config()

        self.settings = settings
        self.base_url = settings.base_url
        self.timeout = settings.timeout
        self.token_manager = token_manager or TokenManager(settings)

        self._transport = transport
        self.session: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpClient":
        """Enter context manager - initialize HTTP session."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - close HTTP session."""
        self.close()

    def open(self) -> None:
        if self.session is None:
            self.session = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )

    def close(self) -> None:
        if self.session:
            self.session.close()
            self.session = None

    def get_headers(self, include_auth: bool = False) -> Dict[str, str]:
        """
        Build default request headers.

        Args:
            include_auth: Attach the auth header when a token is set
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if include_auth:
            headers = self.token_manager.apply(headers)
        return headers

    def request(
        self,
        method: str,
        endpoint: str,
        include_auth: bool = False,
        json_body: Any = None,
        form: Optional[Mapping[str, Any]] = None,
        files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Execute one HTTP request with Allure logging.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Path relative to base_url
            include_auth: Attach the auth header
            json_body: JSON request body
            form: Fields sent as multipart/form-data (values stringified)
            files: Files for multipart upload: name -> (filename, bytes, mime)
            params: Query parameters

        Returns:
            httpx.Response object

        Raises:
            HttpClientError: On network failure or timeout
        """
        self.open()

        headers = self.get_headers(include_auth)
        kwargs: Dict[str, Any] = {"headers": headers}

        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}

        if form is not None or files:
            # httpx sets the multipart boundary itself
            headers.pop("Content-Type", None)
            multipart: Dict[str, Any] = {
                key: (None, value)
                for key, value in convert_to_form_data(form).items()
            }
            multipart.update(files or {})
            if multipart:
                kwargs["files"] = multipart
        elif json_body is not None:
            kwargs["json"] = json_body

        try:
            response = self.session.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise HttpClientError(method, endpoint, str(e) or type(e).__name__) from e

        self._check_html_response(method, endpoint, response)
        self._log_to_allure(method, endpoint, kwargs, form, response)
        return response

    def get(
        self,
        endpoint: str,
        include_auth: bool = False,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Execute GET request."""
        return self.request("GET", endpoint, include_auth=include_auth, params=params)

    def post(
        self,
        endpoint: str,
        data: Any = None,
        include_auth: bool = False,
        form: bool = False,
    ) -> httpx.Response:
        """
        Execute POST request.

        Args:
            data: Body; sent as multipart form fields when `form` is True,
                  otherwise as JSON
            form: Send `data` as multipart/form-data
        """
        if form:
            return self.request("POST", endpoint, include_auth=include_auth, form=data or {})
        return self.request("POST", endpoint, include_auth=include_auth, json_body=data)

    def put(self, endpoint: str, data: Any = None, include_auth: bool = False) -> httpx.Response:
        """Execute PUT request with a JSON body."""
        return self.request("PUT", endpoint, include_auth=include_auth, json_body=data)

    def delete(self, endpoint: str, include_auth: bool = False) -> httpx.Response:
        """Execute DELETE request."""
        return self.request("DELETE", endpoint, include_auth=include_auth)

    def upload_file(
        self,
        endpoint: str,
        file_name: str = "test_file.txt",
        content: bytes = b"test file content",
        field_name: str = "file",
        include_auth: bool = False,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Upload a single file as multipart/form-data."""
        files = {field_name: (file_name.split("/")[-1] or "file", content, "application/octet-stream")}
        return self.request(
            "POST", endpoint, include_auth=include_auth, files=files, params=params
        )

    def _check_html_response(
        self, method: str, endpoint: str, response: httpx.Response
    ) -> None:
        """
        Log a warning when the server answered with an HTML page.

        The response is still returned; the classifier turns it into an
        error descriptor for the test.
        """
        if not self.settings.html_error_detection:
            return

        content_type = response.headers.get("content-type", "")
        if self.settings.strict_content_type_check:
            suspicious = self.settings.expected_content_type not in content_type
        else:
            suspicious = "text/html" in content_type and "application/json" not in content_type

        if suspicious and is_html_content(response.text):
            logger.warning(
                f"API returned HTML error page. Endpoint: {method} {endpoint}, "
                f"Status: {response.status_code}, Content-Type: {content_type}, "
                f"Expected: {self.settings.expected_content_type}"
            )

    def _log_to_allure(
        self,
        method: str,
        endpoint: str,
        kwargs: Dict[str, Any],
        form: Optional[Mapping[str, Any]],
        response: httpx.Response,
    ) -> None:
        """
        Log HTTP request/response to Allure report.

        Attaches:
            - Request URL with query parameters
            - Request headers (redacted)
            - Request body or form fields (redacted)
            - cURL command for reproduction
            - Response status and body (truncated if too long)
        """
        full_url = str(response.request.url)

        status_emoji = "✅" if response.status_code < 400 else "❌"
        step_title = f"{status_emoji} {method} {endpoint} → {response.status_code}"

        with allure.step(step_title):
            allure.attach(
                full_url,
                name="🔗 Request URL",
                attachment_type=AttachmentType.TEXT
            )

            safe_headers = self._redact_headers(kwargs.get("headers", {}))
            if safe_headers:
                allure.attach(
                    json.dumps(safe_headers, ensure_ascii=False, indent=2),
                    name="📤 Request Headers",
                    attachment_type=AttachmentType.JSON
                )

            safe_body = self._redact_body(kwargs.get("json"))
            if safe_body:
                allure.attach(
                    json.dumps(safe_body, ensure_ascii=False, indent=2),
                    name="📤 Request Body",
                    attachment_type=AttachmentType.JSON
                )

            safe_form = self._redact_body(convert_to_form_data(form)) if form else None
            if safe_form:
                allure.attach(
                    json.dumps(safe_form, ensure_ascii=False, indent=2),
                    name="📤 Form Data",
                    attachment_type=AttachmentType.JSON
                )

            curl_cmd = self._build_curl(method, full_url, safe_headers, safe_body, safe_form)
            allure.attach(
                curl_cmd,
                name="🔧 cURL Command",
                attachment_type=AttachmentType.TEXT
            )

            allure.attach(
                f"{status_emoji} {response.status_code}",
                name="📥 Response Status",
                attachment_type=AttachmentType.TEXT
            )

            try:
                response_content = json.dumps(
                    response.json(), ensure_ascii=False, indent=2
                )
                attachment_type = AttachmentType.JSON
            except ValueError:
                response_content = response.text or "<empty>"
                attachment_type = AttachmentType.TEXT

            if len(response_content) > MAX_RESPONSE_LENGTH:
                response_content = (
                    f"{response_content[:MAX_RESPONSE_LENGTH]}\n\n"
                    f"... [Truncated, full length: {len(response_content)} chars] ..."
                )

            allure.attach(
                response_content,
                name="📥 Response Body",
                attachment_type=attachment_type
            )

    def _redact_headers(self, headers: Dict[str, Any]) -> Dict[str, Any]:
        """
        Mask sensitive header values before logging.
        """
        sensitive = SENSITIVE_HEADERS | {self.settings.token_header.lower()}
        masked = {}
        for key, value in headers.items():
            if key.lower() in sensitive:
                masked[key] = MASK
            else:
                masked[key] = value
        return masked

    def _redact_body(self, payload: Any) -> Any:
        """
        Recursively mask sensitive fields in request bodies.
        """
        if isinstance(payload, dict):
            redacted = {}
            for key, value in payload.items():
                if _is_sensitive_field(str(key)):
                    redacted[key] = MASK
                else:
                    redacted[key] = self._redact_body(value)
            return redacted
        if isinstance(payload, list):
            return [self._redact_body(item) for item in payload]
        return payload

    def _build_curl(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Dict[str, Any]],
        form: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Build cURL command for request reproduction.

        Header and body values are expected to be redacted already.
        """
        parts = [f"curl -X {method}"]

        for key, value in headers.items():
            parts.append(f"-H '{key}: {value}'")

        if form:
            for key, value in form.items():
                parts.append(f"-F '{key}={value}'")
        elif body:
            body_json = json.dumps(body, ensure_ascii=False)
            parts.append(f"-d '{body_json}'")

        parts.append(f"'{url}'")

        return " \\\n  ".join(parts)


def _is_sensitive_field(key: str) -> bool:
    lowered = key.lower()
    # Bracketed form keys: data[password], recipients[0][phone]
    leaf = lowered.rstrip("]").rsplit("[", 1)[-1]
    if leaf in SENSITIVE_FIELD_NAMES:
        return True
    return any(part in lowered for part in SENSITIVE_FIELD_PARTS)


__all__ = [
    "HttpClient",
    "HttpClientError",
]
