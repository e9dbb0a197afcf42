"""Emergency contact groups and contacts."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class EmergencyContactsPage(BasePage):
    """CRUD for emergency contact groups and the contacts inside them."""

    ENDPOINTS = {
        "groups": "/user_emergency_contact_group",
        "group_by_id": "/user_emergency_contact_group/{id}",
        "contacts": "/user_emergency_contact",
        "contact_by_id": "/user_emergency_contact/{id}",
    }

    # Emergency Contact Groups

    @allure.step("Get emergency contact groups")
    def get_emergency_contact_groups(self) -> httpx.Response:
        return self.client.get(self.endpoint("groups"), include_auth=True)

    @allure.step("Create emergency contact group")
    def create_emergency_contact_group(self, group_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("groups"),
            convert_to_form_data(group_data),
            include_auth=True,
            form=True,
        )

    @allure.step("Update emergency contact group {group_id}")
    def update_emergency_contact_group(
        self, group_id: str, group_data: Dict[str, Any]
    ) -> httpx.Response:
        return self.client.put(
            self.endpoint("group_by_id", id=group_id), group_data, include_auth=True
        )

    @allure.step("Delete emergency contact group {group_id}")
    def delete_emergency_contact_group(self, group_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("group_by_id", id=group_id), include_auth=True)

    # Emergency Contacts

    @allure.step("Get emergency contacts")
    def get_emergency_contacts(self) -> httpx.Response:
        return self.client.get(self.endpoint("contacts"), include_auth=True)

    @allure.step("Create emergency contact")
    def create_emergency_contact(self, contact_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("contacts"),
            convert_to_form_data(contact_data),
            include_auth=True,
            form=True,
        )

    @allure.step("Update emergency contact {contact_id}")
    def update_emergency_contact(
        self, contact_id: str, contact_data: Dict[str, Any]
    ) -> httpx.Response:
        return self.client.put(
            self.endpoint("contact_by_id", id=contact_id), contact_data, include_auth=True
        )

    @allure.step("Delete emergency contact {contact_id}")
    def delete_emergency_contact(self, contact_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("contact_by_id", id=contact_id), include_auth=True)
