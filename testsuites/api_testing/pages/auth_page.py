"""Authentication endpoints (login / logout)."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class AuthPage(BasePage):
    """Login and logout."""

    ENDPOINTS = {
        "login": "/auth",
        "logout": "/user/logout",
    }

    @allure.step("Login")
    def login(self, credentials: Dict[str, Any]) -> httpx.Response:
        """Submit credentials as form data. Does not touch the page's token."""
        return self.client.post(
            self.endpoint("login"),
            convert_to_form_data(credentials),
            include_auth=False,
            form=True,
        )

    @allure.step("Logout")
    def logout(self) -> httpx.Response:
        return self.client.get(self.endpoint("logout"), include_auth=True)
