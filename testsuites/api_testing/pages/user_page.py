"""
================================================================================
User API Page Object
================================================================================

Endpoint wrappers for the authenticated user's account under /user:
profile, app cache and settings, devices, subscription, account deletion,
password / mobile / device token changes.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import allure
import httpx

from testsuites.api_testing.framework.form_data import (
    convert_to_form_data,
    nested_form_fields,
)

from .base_page import BasePage


class UserPage(BasePage):
    """
    Page object for user account endpoints.

    Usage:
        >>> user_page = UserPage(client)
        >>> user_page.set_auth_token(token)
        >>> profile = user_page.safe_json_parse(user_page.get_profile())
    """

    ENDPOINTS = {
        "profile": "/user/profile",
        "handset_stolen": "/user/handset_stolen",
        "app_cache": "/user/app_cache",
        "app_settings": "/user/app_settings",
        "orders_history": "/user/ordersHistory",
        "personal_data_download": "/user/personalDataDownload",
        "supported_devices": "/user/supported_devices",
        "cancel_subscription": "/user/cancelSubscription",
        "devices": "/user/device",
        "device_by_id": "/user/device/{id}",
        "add_device": "/user/addDevice",
        "request_account_info": "/user/requestAccountInfo",
        "cancel_trial_timer": "/user/cancel_trial_timer",
        "add_review": "/user/addReview",
        "delete_account": "/user/deleteAccount",
        "delete_account_cancel": "/user/deleteAccountCancel",
        "password": "/user/password",
        "mobile": "/user/mobile",
        "device_token": "/user/device_token",
    }

    def _get(self, name: str, **params: Any) -> httpx.Response:
        return self.client.get(self.endpoint(name, **params), include_auth=True)

    def _post_form(self, name: str, data: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.client.post(
            self.endpoint(name), convert_to_form_data(data), include_auth=True, form=True
        )

    # ================================================================================
    # Profile
    # ================================================================================

    @allure.step("Get user profile")
    def get_profile(self) -> httpx.Response:
        return self._get("profile")

    @allure.step("Update user profile")
    def update_profile(self, profile_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(self.endpoint("profile"), profile_data, include_auth=True)

    @allure.step("Report handset stolen")
    def handset_stolen(self) -> httpx.Response:
        return self._get("handset_stolen")

    # ================================================================================
    # App Cache / Settings
    # ================================================================================

    @allure.step("Get app cache")
    def get_app_cache(self) -> httpx.Response:
        return self._get("app_cache")

    @allure.step("Update app cache")
    def update_app_cache(self, cache_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(self.endpoint("app_cache"), cache_data, include_auth=True)

    @allure.step("Get user app settings")
    def get_app_settings(self) -> httpx.Response:
        return self._get("app_settings")

    # ================================================================================
    # Orders / Subscription / Data
    # ================================================================================

    @allure.step("Get orders history")
    def get_orders_history(self) -> httpx.Response:
        return self._get("orders_history")

    @allure.step("Request personal data download")
    def personal_data_download(self) -> httpx.Response:
        return self._get("personal_data_download")

    @allure.step("Get supported devices")
    def get_supported_devices(self) -> httpx.Response:
        return self._get("supported_devices")

    @allure.step("Cancel subscription")
    def cancel_subscription(self) -> httpx.Response:
        return self._get("cancel_subscription")

    @allure.step("Request account info")
    def request_account_info(self) -> httpx.Response:
        return self._get("request_account_info")

    @allure.step("Cancel trial timer")
    def cancel_trial_timer(self) -> httpx.Response:
        return self.client.post(self.endpoint("cancel_trial_timer"), {}, include_auth=True)

    # ================================================================================
    # Devices
    # ================================================================================

    @allure.step("Get user devices")
    def get_devices(self) -> httpx.Response:
        return self._get("devices")

    @allure.step("Delete user device {device_id}")
    def delete_device(self, device_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("device_by_id", id=device_id), include_auth=True)

    @allure.step("Add device")
    def add_device(self, device_data: Dict[str, Any]) -> httpx.Response:
        """
        Register a tracker device.

        `configuration` is a nested mapping (ident, phone) sent as
        ``configuration[ident]`` / ``configuration[phone]``.
        """
        fields = convert_to_form_data(
            {
                "name": device_data.get("name"),
                "device_type_id": device_data.get("device_type_id"),
            }
        )
        fields.update(nested_form_fields("configuration", device_data.get("configuration")))
        return self.client.post(self.endpoint("add_device"), fields, include_auth=True, form=True)

    @allure.step("Add review")
    def add_review(self, review_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("add_review", review_data)

    # ================================================================================
    # Account
    # ================================================================================

    @allure.step("Delete account")
    def delete_account(self) -> httpx.Response:
        return self._post_form("delete_account", {})

    @allure.step("Cancel account deletion")
    def delete_account_cancel(self) -> httpx.Response:
        return self._post_form("delete_account_cancel", {})

    @allure.step("Change password")
    def change_password(self, password: str) -> httpx.Response:
        return self._post_form("password", {"password": password})

    @allure.step("Update mobile number")
    def update_mobile(self, mobile_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(self.endpoint("mobile"), mobile_data, include_auth=True)

    @allure.step("Update device token")
    def update_device_token(self, token_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(self.endpoint("device_token"), token_data, include_auth=True)
