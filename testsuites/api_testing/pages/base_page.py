"""
================================================================================
Base API Page Object
================================================================================

Foundation class for the endpoint wrappers ("API pages").

Provides:
    - A static endpoint registry per subclass (name -> URL template)
    - Path-parameter substitution for resource IDs
    - Token helpers delegating to the page's own HttpClient
    - Response normalization through the response classifier
    - A connectivity diagnostic for triaging HTML error pages

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

import allure
import httpx
from loguru import logger

from testsuites.api_testing.framework.http_client import HttpClient, HttpClientError
from testsuites.api_testing.framework.response_classifier import (
    classify_response,
    is_html_content,
)


class BasePage:
    """
    Base class for all API page objects.

    Usage:
        class ZonesPage(BasePage):
            ENDPOINTS = {"zones": "/zones", "zone_by_id": "/zones/{id}"}

            def get_zone(self, zone_id: str) -> httpx.Response:
                return self.client.get(self.endpoint("zone_by_id", id=zone_id), include_auth=True)
    """

    # Override in subclasses
    ENDPOINTS: Dict[str, str] = {}

    def __init__(self, client: HttpClient):
        """
        Initialize page object.

        Args:
            client: HTTP client owning this page's token
        """
        self.client = client
        self.settings = client.settings
        self.base_url = client.base_url

    def endpoint(self, name: str, **params: Any) -> str:
        """
        Resolve a registered endpoint, substituting path parameters.

        Raises:
            KeyError: If the endpoint name is not registered
        """
        template = self.ENDPOINTS[name]
        if not params:
            return template
        encoded = {key: quote(str(value), safe="") for key, value in params.items()}
        return template.format(**encoded)

    def set_auth_token(self, token: str) -> None:
        self.client.token_manager.set_token(token)

    def get_auth_token(self) -> str:
        return self.client.token_manager.get_token()

    def safe_json_parse(self, response: httpx.Response) -> Any:
        """
        Parse a response body without raising.

        Returns the JSON body unchanged, or an error descriptor with
        `success: False` when the server sent HTML or malformed JSON.
        """
        return classify_response(response, self.settings.html_preview_length)

    @allure.step("Diagnose API connectivity")
    def diagnose_api_issues(self) -> Dict[str, Any]:
        """
        Probe the base URL and report common misconfigurations.

        Returns:
            Diagnostic dictionary (reachable, status, content_type, is_html,
            error_type, error)
        """
        logger.info(f"Diagnosing API at {self.base_url}")
        try:
            response = self.client.get("/")
        except HttpClientError as e:
            logger.error(f"API unreachable: {e}")
            return {"reachable": False, "error": str(e)}

        content_type = response.headers.get("content-type", "")
        body = self.safe_json_parse(response)
        report = {
            "reachable": True,
            "status": response.status_code,
            "content_type": content_type,
            "is_html": is_html_content(response.text),
            "error_type": body.get("error_type") if isinstance(body, dict) else None,
            "error": body.get("error") if isinstance(body, dict) else None,
        }

        if report["is_html"]:
            logger.warning(
                "API base URL serves HTML - check API_BASE_URL, reverse proxy "
                "routing and whether the backend is running"
            )
        else:
            logger.info(f"API responded with status {response.status_code} ({content_type})")
        return report
