"""User places (saved locations with a geofence radius)."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class UserPlacesPage(BasePage):

    ENDPOINTS = {
        "user_places": "/user_place",
        "user_place_by_id": "/user_place/{id}",
    }

    @allure.step("Get user places")
    def get_user_places(self) -> httpx.Response:
        return self.client.get(self.endpoint("user_places"), include_auth=True)

    @allure.step("Create user place")
    def create_user_place(self, place_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("user_places"),
            convert_to_form_data(place_data),
            include_auth=True,
            form=True,
        )

    @allure.step("Update user place {place_id}")
    def update_user_place(self, place_id: str, place_data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(
            self.endpoint("user_place_by_id", id=place_id), place_data, include_auth=True
        )

    @allure.step("Delete user place {place_id}")
    def delete_user_place(self, place_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("user_place_by_id", id=place_id), include_auth=True)
