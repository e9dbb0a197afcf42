"""
================================================================================
Unauthorized API Page Object
================================================================================

Pre-login endpoints under /unauthorized: public app settings, password
recovery, registration (with payment and invited users), SMS verification
and coupon codes. None of these send the auth header.

Registration payloads are nested: the user's fields go under ``data[...]``,
the date of birth under ``data[dob][0..2]`` and emergency contacts under
``data[emergency_contacts][i][...]``.

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
    nested_form_fields,
)

from .base_page import BasePage


EMERGENCY_CONTACT_FIELDS = ["name", "email", "mobile_number", "mobile_country_code"]
INVITE_USER_FIELDS = ["firstname", "lastname", "email", "mobile_country_id", "mobile_number"]


def registration_form(user_data: Dict[str, Any]) -> Dict[str, str]:
    """
    Flatten a registration payload into ``data[...]`` form fields.

    The date of birth is only sent when it carries year, month and day.
    """
    scalars = {
        key: value
        for key, value in user_data.items()
        if key not in ("dob", "emergency_contacts")
    }
    fields = nested_form_fields("data", scalars)

    dob = user_data.get("dob")
    if isinstance(dob, (list, tuple)) and len(dob) >= 3:
        for index in range(3):
            fields[f"data[dob][{index}]"] = str(dob[index])

    fields.update(
        indexed_form_fields(
            "data[emergency_contacts]",
            user_data.get("emergency_contacts"),
            EMERGENCY_CONTACT_FIELDS,
        )
    )
    return fields


class UnauthorizedPage(BasePage):
    """Page object for endpoints that work without a session."""

    ENDPOINTS = {
        "app_settings": "/unauthorized/app_settings",
        "reset_password": "/unauthorized/reset_password",
        "credentials_forgotten": "/unauthorized/credentials_forgotten",
        "email_taken": "/unauthorized/email_taken",
        "user_register": "/unauthorized/user_register",
        "register_payment_stripe": "/unauthorized/user/{user_id}/userRegisterPaymentStripe",
        "register_add_invite_users": "/unauthorized/user/{user_id}/userRegisterAddInviteUsers",
        "send_verification_sms": "/unauthorized/mobileNumber/sendVerificationSms",
        "verify_by_code": "/unauthorized/mobileNumber/verifyByCode",
        "coupon_code": "/unauthorized/getCouponCode",
        "profile_update": "/unauthorized/user/{user_id}/profile_update",
    }

    def _post_form(self, name: str, fields: Dict[str, Any], **params: Any) -> httpx.Response:
        return self.client.post(
            self.endpoint(name, **params), convert_to_form_data(fields), form=True
        )

    @allure.step("Get public app settings")
    def get_app_settings(self) -> httpx.Response:
        return self.client.get(self.endpoint("app_settings"))

    # ================================================================================
    # Password Recovery
    # ================================================================================

    @allure.step("Reset password for {email}")
    def reset_password(self, email: Optional[str]) -> httpx.Response:
        return self._post_form("reset_password", {"email": email})

    @allure.step("Credentials forgotten ({credential_type})")
    def credentials_forgotten(self, credential_type: str, identifier: Optional[str]) -> httpx.Response:
        return self._post_form(
            "credentials_forgotten", {"type": credential_type, "identifier": identifier}
        )

    @allure.step("Check email taken: {email}")
    def email_taken(self, email: Optional[str]) -> httpx.Response:
        return self._post_form("email_taken", {"email": email})

    # ================================================================================
    # Registration
    # ================================================================================

    @allure.step("Register user")
    def user_register(self, user_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("user_register", registration_form(user_data))

    @allure.step("Register payment (Stripe) for user {user_id}")
    def user_register_payment_stripe(self, user_id: str, payment_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("register_payment_stripe", payment_data, user_id=user_id)

    @allure.step("Add invited users for user {user_id}")
    def user_register_add_invite_users(
        self, user_id: str, users: List[Dict[str, Any]]
    ) -> httpx.Response:
        fields = indexed_form_fields("users", users, INVITE_USER_FIELDS)
        return self._post_form("register_add_invite_users", fields, user_id=user_id)

    @allure.step("Update profile for user {user_id}")
    def profile_update(self, user_id: str, profile_data: Dict[str, Any]) -> httpx.Response:
        return self._post_form("profile_update", profile_data, user_id=user_id)

    # ================================================================================
    # Mobile Verification / Coupons
    # ================================================================================

    @allure.step("Send verification SMS")
    def send_verification_sms(self, mobile_number: str, app_sms_hash: Optional[str] = None) -> httpx.Response:
        return self._post_form(
            "send_verification_sms",
            {"mobile_number": mobile_number, "appSmsHash": app_sms_hash},
        )

    @allure.step("Verify mobile number by code")
    def verify_by_code(self, verification_id: str, verification_code: str) -> httpx.Response:
        return self._post_form(
            "verify_by_code",
            {"verification_id": verification_id, "verification_code": verification_code},
        )

    @allure.step("Get coupon code {code}")
    def get_coupon_code(self, code: str) -> httpx.Response:
        return self._post_form("coupon_code", {"code": code})
