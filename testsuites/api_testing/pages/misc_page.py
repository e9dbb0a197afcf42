"""Endpoints that do not belong to a larger resource group."""

from __future__ import annotations

from typing import Any, Dict, Optional

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class MiscPage(BasePage):
    """
    Safe places, session state, sub-users, in-app messages, file uploads
    and zones.
    """

    ENDPOINTS = {
        "safe_places": "/safe_places",
        "session_state": "/sessionState/{area}",
        "subuser_auth": "/subuser/auth",
        "subuser_signout": "/subuser/signout",
        "messages": "/mobileAppMessages",
        "message_types": "/mobileAppMessages/types",
        "message_status": "/mobileAppMessages/{id}/status",
        "message_archived": "/mobileAppMessages/{id}/archived",
        "file_upload": "/file_upload/{entity}/{field}/{entity_id}",
        "delete_avatar": "/file_upload/user/avatar",
        "zones": "/zones",
    }

    @allure.step("Get safe places")
    def get_safe_places(self) -> httpx.Response:
        return self.client.get(self.endpoint("safe_places"), include_auth=True)

    @allure.step("Get session state for {area}")
    def get_session_state(self, area: str) -> httpx.Response:
        return self.client.get(self.endpoint("session_state", area=area), include_auth=True)

    # ---------------------------------------------------------------- subusers --

    @allure.step("Sub-user login")
    def subuser_login(self, username: str, password: str) -> httpx.Response:
        return self.client.post(
            self.endpoint("subuser_auth"),
            convert_to_form_data({"username": username, "password": password}),
            form=True,
        )

    @allure.step("Sub-user sign out {user_id}")
    def subuser_logout(self, user_id: str) -> httpx.Response:
        return self.client.post(
            self.endpoint("subuser_signout"),
            convert_to_form_data({"user_id": user_id}),
            include_auth=True,
            form=True,
        )

    # ---------------------------------------------------------------- messages --

    @allure.step("Get mobile app messages")
    def get_mobile_app_messages(
        self,
        limit: Optional[int] = None,
        page: Optional[int] = None,
        types: Optional[str] = None,
    ) -> httpx.Response:
        params = {"limit": limit, "page": page, "types": types}
        return self.client.get(self.endpoint("messages"), include_auth=True, params=params)

    @allure.step("Get mobile app message types")
    def get_mobile_app_message_types(self) -> httpx.Response:
        return self.client.get(self.endpoint("message_types"), include_auth=True)

    @allure.step("Set message {message_id} status")
    def update_message_status(self, message_id: str, status: Any) -> httpx.Response:
        return self.client.put(
            self.endpoint("message_status", id=message_id), {"status": status}, include_auth=True
        )

    @allure.step("Set message {message_id} archived")
    def update_message_archived(self, message_id: str, archived: Any) -> httpx.Response:
        return self.client.put(
            self.endpoint("message_archived", id=message_id),
            {"archived": archived},
            include_auth=True,
        )

    # ------------------------------------------------------------------ files --

    @allure.step("Upload file to {entity}/{field}")
    def upload_file(
        self,
        entity: str,
        field: str,
        entity_id: str = "0",
        file_name: str = "test_file.txt",
        content: bytes = b"test file content",
        event_hash: Optional[str] = None,
    ) -> httpx.Response:
        endpoint = self.endpoint("file_upload", entity=entity, field=field, entity_id=entity_id)
        params: Dict[str, Any] = {"eventHash": event_hash} if event_hash else {}
        return self.client.upload_file(
            endpoint, file_name, content, include_auth=True, params=params
        )

    @allure.step("Delete user avatar")
    def delete_avatar(self) -> httpx.Response:
        return self.client.delete(self.endpoint("delete_avatar"), include_auth=True)

    @allure.step("Get zones")
    def get_zones(self) -> httpx.Response:
        return self.client.get(self.endpoint("zones"), include_auth=True)
