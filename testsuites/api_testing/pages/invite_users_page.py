"""Invited (family / team) users."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class InviteUsersPage(BasePage):

    ENDPOINTS = {
        "list": "/inviteUsers/list",
        "invite_users": "/inviteUsers",
        "invite_user_by_id": "/inviteUsers/{id}",
    }

    @allure.step("List invited users")
    def get_invite_users(self) -> httpx.Response:
        # The backend exposes the listing as a POST
        return self.client.post(self.endpoint("list"), {}, include_auth=True, form=True)

    @allure.step("Invite user")
    def create_invite_user(self, user_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("invite_users"),
            convert_to_form_data(user_data),
            include_auth=True,
            form=True,
        )

    @allure.step("Update invited user {user_id}")
    def update_invite_user(self, user_id: str, user_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(
            self.endpoint("invite_user_by_id", id=user_id), user_data, include_auth=True
        )

    @allure.step("Delete invited user {user_id}")
    def delete_invite_user(self, user_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("invite_user_by_id", id=user_id), include_auth=True)
