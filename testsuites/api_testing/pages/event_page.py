"""
================================================================================
Event API Page Object
================================================================================

Endpoint wrappers for everything under /event:
    - Location updates, alert type changes and device state reports
    - Chat channels
    - Meetings, journeys and check-ins
    - Shared location links and their recipients
    - Dispatch guard, test/dispatch/close alert and backup requests

All write endpoints take multipart form data and require authentication.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import allure
import httpx

from testsuites.api_testing.framework.form_data import (
    convert_to_form_data,
    indexed_form_fields,
)

from .base_page import BasePage


RECIPIENT_FIELDS = ["name", "email", "phone", "device_platform", "device_messaging_id"]


class EventPage(BasePage):
    """
    Page object for event endpoints.

    Usage:
        >>> event_page = EventPage(client)
        >>> event_page.set_auth_token(token)
        >>> response = event_page.post_location(factory.get_location_data())
    """

    ENDPOINTS = {
        "location": "/event/location",
        "alert_type": "/event/type",
        "device_state": "/event/deviceState",
        "chat_channel": "/event/chatChannel",
        "chat_channel_user": "/event/chatChannel/user",
        "meeting_create": "/event/meeting/create",
        "meeting_update": "/event/meeting/update",
        "meeting_cancel": "/event/meeting/cancel",
        "journey_start": "/event/journey/start",
        "journey_end": "/event/journey/end",
        "journey_cancel": "/event/journey/cancel",
        "checkin_create": "/event/checkin/create",
        "checkin_checkout": "/event/checkin/checkout",
        "shared_location": "/event/sharedLocation",
        "shared_location_by_id": "/event/sharedLocation/{id}",
        "my_shared_location": "/event/mySharedLocation",
        "recipient_delete": "/event/sharedLocationRecipient/{id}/delete",
        "recipient_update": "/event/sharedLocationRecipient/{id}/update",
        "dispatch": "/event/dispatch/{action}",
        "test_alert": "/event/testAlert",
        "dispatch_alert": "/event/dispatchAlert/{alert_id}",
        "close_alert": "/event/closeAlert",
        "request_backup": "/event/requestBackup",
    }

    def _post_form(self, name: str, data: Optional[Dict[str, Any]] = None, **params: Any) -> httpx.Response:
        return self.client.post(
            self.endpoint(name, **params),
            convert_to_form_data(data),
            include_auth=True,
            form=True,
        )

    def _get(self, name: str, **params: Any) -> httpx.Response:
        return self.client.get(self.endpoint(name, **params), include_auth=True)

    # ================================================================================
    # Location / Alert / Device State
    # ================================================================================

    @allure.step("Post location update")
    def post_location(self, location_data: Dict[str, Any]) -> httpx.Response:
        """
        Report the device location.

        Fields are sent as-is; an empty mapping sends an empty form so the
        server's validation error comes back untouched.
        """
        return self._post_form("location", location_data)

    @allure.step("Change alert type")
    def change_alert_type(self, alert_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("alert_type", alert_data)

    @allure.step("Post device state")
    def post_device_state(self, device_state: Dict[str, Any]) -> httpx.Response:
        return self._post_form("device_state", device_state)

    # ================================================================================
    # Chat Channel
    # ================================================================================

    @allure.step("Create chat channel")
    def create_chat_channel(self) -> httpx.Response:
        return self._post_form("chat_channel", {})

    @allure.step("Get chat channel")
    def get_chat_channel(self) -> httpx.Response:
        return self._get("chat_channel")

    @allure.step("Get user chat channel")
    def get_user_chat_channel(self) -> httpx.Response:
        return self._get("chat_channel_user")

    # ================================================================================
    # Meetings / Journeys / Check-ins
    # ================================================================================

    @allure.step("Create meeting")
    def create_meeting(self, meeting_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("meeting_create", meeting_data)

    @allure.step("Update meeting")
    def update_meeting(self, meeting_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("meeting_update", meeting_data)

    @allure.step("Cancel meeting")
    def cancel_meeting(self) -> httpx.Response:
        return self._get("meeting_cancel")

    @allure.step("Start journey")
    def start_journey(self, journey_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("journey_start", journey_data)

    @allure.step("End journey")
    def end_journey(self) -> httpx.Response:
        return self._get("journey_end")

    @allure.step("Cancel journey")
    def cancel_journey(self) -> httpx.Response:
        return self._get("journey_cancel")

    @allure.step("Create check-in")
    def create_checkin(self, checkin_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("checkin_create", checkin_data)

    @allure.step("Check out")
    def checkout(self) -> httpx.Response:
        return self._get("checkin_checkout")

    # ================================================================================
    # Shared Location
    # ================================================================================

    @allure.step("Create shared location")
    def create_shared_location(
        self, duration: Any, recipients: Optional[List[Dict[str, Any]]] = None
    ) -> httpx.Response:
        """
        Share the current location with a list of recipients.

        Args:
            duration: Link lifetime in seconds
            recipients: Dicts with name/email/phone and optional
                        device_platform/device_messaging_id
        """
        fields = convert_to_form_data({"duration": duration})
        fields.update(indexed_form_fields("recipients", recipients, RECIPIENT_FIELDS))
        return self.client.post(
            self.endpoint("shared_location"), fields, include_auth=True, form=True
        )

    @allure.step("Get shared location {location_id}")
    def get_shared_location(self, location_id: str) -> httpx.Response:
        return self._get("shared_location_by_id", id=location_id)

    @allure.step("Get my shared location")
    def get_my_shared_location(self) -> httpx.Response:
        return self._get("my_shared_location")

    @allure.step("Delete shared location {location_id}")
    def delete_shared_location(self, location_id: str) -> httpx.Response:
        return self.client.delete(
            self.endpoint("shared_location_by_id", id=location_id), include_auth=True
        )

    @allure.step("Append to shared location {location_id}")
    def append_shared_location(self, location_id: str, data: Dict[str, Any]) -> httpx.Response:
        return self.client.put(
            self.endpoint("shared_location_by_id", id=location_id), data, include_auth=True
        )

    @allure.step("Delete shared location recipient {recipient_id}")
    def delete_shared_location_recipient(self, recipient_id: str) -> httpx.Response:
        return self._post_form("recipient_delete", {}, id=recipient_id)

    @allure.step("Update shared location recipient {recipient_id}")
    def update_shared_location_recipient(self, recipient_id: str, duration: Any) -> httpx.Response:
        return self._post_form("recipient_update", {"duration": duration}, id=recipient_id)

    # ================================================================================
    # Dispatch / Alerts
    # ================================================================================

    @allure.step("Dispatch guard action: {action}")
    def dispatch_guard(self, action: str, data: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self._post_form("dispatch", data or {}, action=action)

    @allure.step("Send test alert")
    def send_test_alert(self) -> httpx.Response:
        return self._get("test_alert")

    @allure.step("Dispatch alert {alert_id}")
    def dispatch_alert(self, alert_id: str) -> httpx.Response:
        return self._get("dispatch_alert", alert_id=alert_id)

    @allure.step("Close alert")
    def close_alert(self) -> httpx.Response:
        return self._get("close_alert")

    @allure.step("Request backup")
    def request_backup(self) -> httpx.Response:
        return self._get("request_backup")
