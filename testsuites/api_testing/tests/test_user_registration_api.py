"""
================================================================================
User Registration API Test Suite
================================================================================

POST /unauthorized/user_register and the email availability check.

Every test registers a fresh random email, so runs do not collide; the
staging backend is reset nightly.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import date

import allure
import pytest

from testsuites.api_testing.framework.envelope import assert_no_server_error, is_success
from testsuites.api_testing.framework.test_data_factory import TestDataFactory
from testsuites.api_testing.pages import UnauthorizedPage


pytestmark = pytest.mark.registration


@allure.epic("PanicGuard API")
@allure.feature("User Registration")
class TestRegistrationPositive:

    @pytest.mark.P1
    @pytest.mark.smoke
    @pytest.mark.positive
    @allure.story("Register User")
    @allure.title("Register a new user with valid data")
    def test_register_user(self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory):
        response = unauthorized_page.user_register(data_factory.get_user_registration_data())

        assert_no_server_error(response)
        assert unauthorized_page.safe_json_parse(response) is not None

    @pytest.mark.P2
    @pytest.mark.positive
    @allure.story("Register User")
    @allure.title("Register a user with emergency contacts")
    def test_register_with_emergency_contacts(
        self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory
    ):
        user = data_factory.get_user_registration_data(
            emergency_contacts=[
                {
                    "name": "Emergency Contact 1",
                    "email": data_factory.random_email(),
                    "mobile_number": "+380934567890",
                    "mobile_country_code": "+380",
                }
            ]
        )
        assert_no_server_error(unauthorized_page.user_register(user))


@allure.epic("PanicGuard API")
@allure.feature("User Registration")
class TestRegistrationNegative:

    @pytest.mark.P1
    @pytest.mark.negative
    @allure.story("Register User")
    @pytest.mark.parametrize(
        "override",
        [
            pytest.param({"email": "test@asd.com"}, id="existing-email"),
            pytest.param({"email": "invalid-email"}, id="invalid-email"),
            pytest.param({"password2": "Different123!"}, id="mismatched-passwords"),
            pytest.param({"agree_to_terms": "0"}, id="terms-not-accepted"),
            pytest.param({"password": "123", "password2": "123"}, id="weak-password"),
        ],
    )
    def test_register_rejected(
        self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory, override
    ):
        allure.dynamic.title(f"Registration is refused: {', '.join(override)}")
        response = unauthorized_page.user_register(data_factory.get_user_registration_data(**override))
        assert not is_success(unauthorized_page.safe_json_parse(response))

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Register User")
    @allure.title("Register with no fields fails without a server error")
    def test_register_missing_fields(self, unauthorized_page: UnauthorizedPage):
        response = unauthorized_page.user_register({})

        assert_no_server_error(response)
        # the validator sometimes answers 200 with an HTML error page
        body = unauthorized_page.safe_json_parse(response)
        assert not is_success(body)


@allure.epic("PanicGuard API")
@allure.feature("User Registration")
class TestRegistrationEdgeCases:

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Register User")
    @pytest.mark.parametrize(
        "override",
        [
            pytest.param({"firstname": "A" * 255, "lastname": "B" * 255}, id="very-long-name"),
            pytest.param({"firstname": "José-María", "lastname": "O'Brien-Smith"}, id="special-characters"),
            pytest.param({"dob": [date.today().year - 10, 1, 1]}, id="under-13"),
        ],
    )
    def test_register_unusual_values(
        self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory, override
    ):
        response = unauthorized_page.user_register(data_factory.get_user_registration_data(**override))
        assert_no_server_error(response)

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Register User")
    @allure.title("Register with a date of birth in the future fails")
    def test_register_future_dob(self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory):
        user = data_factory.get_user_registration_data(dob=[date.today().year + 1, 1, 1])
        response = unauthorized_page.user_register(user)
        assert not is_success(unauthorized_page.safe_json_parse(response))

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Email Availability")
    @pytest.mark.parametrize(
        "email_kind",
        [
            pytest.param("existing", id="existing-email"),
            pytest.param("new", id="new-email"),
        ],
    )
    def test_email_taken(self, unauthorized_page: UnauthorizedPage, data_factory: TestDataFactory, email_kind):
        email = "test@asd.com" if email_kind == "existing" else data_factory.random_email()
        allure.dynamic.title(f"Check email availability ({email_kind})")

        response = unauthorized_page.email_taken(email)
        body = unauthorized_page.safe_json_parse(response)

        assert_no_server_error(response)
        assert "taken" in body
