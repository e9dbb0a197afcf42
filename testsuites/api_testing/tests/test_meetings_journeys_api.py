"""
================================================================================
Meetings, Journeys and Check-ins API Test Suite
================================================================================

Timed safety sessions under /event: meetings (create / update / cancel),
journeys (start / end / cancel) and check-ins (create / checkout).

Journey modes: 1 = walking, 2 = bicycle, 3 = vehicle, 4 = train.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import allure
import pytest

from testsuites.api_testing.framework.envelope import assert_no_server_error
from testsuites.api_testing.framework.test_data_factory import TestDataFactory
from testsuites.api_testing.pages import EventPage


@allure.epic("PanicGuard API")
@allure.feature("Meetings")
@pytest.mark.meeting
class TestMeetings:

    @pytest.mark.P1
    @pytest.mark.positive
    @allure.story("Meeting Lifecycle")
    @allure.title("Create, update and cancel a meeting")
    def test_meeting_lifecycle(self, event_page: EventPage, authorize, data_factory: TestDataFactory):
        authorize(event_page)

        with allure.step("Create meeting"):
            assert_no_server_error(event_page.create_meeting(data_factory.get_meeting_data()))
        with allure.step("Update meeting timer"):
            assert_no_server_error(event_page.update_meeting(data_factory.get_meeting_data(timer="3600")))
        with allure.step("Cancel meeting"):
            assert_no_server_error(event_page.cancel_meeting())

    @pytest.mark.P1
    @pytest.mark.negative
    @allure.story("Create Meeting")
    @allure.title("Create meeting without auth is rejected")
    def test_create_meeting_without_auth(self, event_page: EventPage, data_factory: TestDataFactory):
        response = event_page.create_meeting(data_factory.get_meeting_data())
        assert not response.is_success

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Create Meeting")
    @allure.title("Create meeting with an invalid timer is handled")
    def test_create_meeting_invalid_timer(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory
    ):
        authorize(event_page)
        assert_no_server_error(event_page.create_meeting(data_factory.get_meeting_data(timer="-1")))

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Update Meeting")
    @allure.title("Update meeting without an active meeting is handled")
    def test_update_non_existent_meeting(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory
    ):
        authorize(event_page)
        event_page.cancel_meeting()
        assert_no_server_error(event_page.update_meeting(data_factory.get_meeting_data()))

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Create Meeting")
    @pytest.mark.parametrize(
        "override",
        [
            pytest.param({"timer": "86400"}, id="very-long-timer"),
            pytest.param({"notes": "Meeting @ café <b>#1</b> & 'friends' 🚨"}, id="special-notes"),
        ],
    )
    def test_create_meeting_unusual_values(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory, override
    ):
        authorize(event_page)
        assert_no_server_error(event_page.create_meeting(data_factory.get_meeting_data(**override)))
        event_page.cancel_meeting()


@allure.epic("PanicGuard API")
@allure.feature("Journeys")
@pytest.mark.journey
class TestJourneys:

    @pytest.mark.P1
    @pytest.mark.positive
    @allure.story("Start Journey")
    @pytest.mark.parametrize(
        "mode",
        [
            pytest.param("1", id="walking"),
            pytest.param("2", id="bicycle"),
            pytest.param("3", id="vehicle"),
            pytest.param("4", id="train"),
        ],
    )
    def test_start_journey_by_mode(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory, mode
    ):
        allure.dynamic.title(f"Start journey with mode {mode}")
        authorize(event_page)

        assert_no_server_error(event_page.start_journey(data_factory.get_journey_data(mode=mode)))
        event_page.cancel_journey()

    @pytest.mark.P1
    @pytest.mark.positive
    @allure.story("Journey Lifecycle")
    @allure.title("Start and end a journey")
    def test_end_journey(self, event_page: EventPage, authorize, data_factory: TestDataFactory):
        authorize(event_page)
        event_page.start_journey(data_factory.get_journey_data())
        assert_no_server_error(event_page.end_journey())

    @pytest.mark.P1
    @pytest.mark.positive
    @allure.story("Journey Lifecycle")
    @allure.title("Start and cancel a journey")
    def test_cancel_journey(self, event_page: EventPage, authorize, data_factory: TestDataFactory):
        authorize(event_page)
        event_page.start_journey(data_factory.get_journey_data())
        assert_no_server_error(event_page.cancel_journey())

    @pytest.mark.P1
    @pytest.mark.negative
    @allure.story("Start Journey")
    @allure.title("Start journey without auth is rejected")
    def test_start_journey_without_auth(self, event_page: EventPage, data_factory: TestDataFactory):
        response = event_page.start_journey(data_factory.get_journey_data())
        assert not response.is_success

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Start Journey")
    @allure.title("Start journey with invalid coordinates is handled")
    def test_start_journey_invalid_coordinates(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory
    ):
        authorize(event_page)
        journey = data_factory.get_journey_data(start_latitude="invalid", end_longitude="invalid")
        assert_no_server_error(event_page.start_journey(journey))

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Journey Lifecycle")
    @allure.title("End journey without an active journey is handled")
    def test_end_journey_without_active_journey(self, event_page: EventPage, authorize):
        authorize(event_page)
        event_page.cancel_journey()
        assert_no_server_error(event_page.end_journey())

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Start Journey")
    @allure.title("Start journey with identical start and end")
    def test_start_journey_same_start_and_end(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory
    ):
        authorize(event_page)
        journey = data_factory.get_journey_data(
            end_latitude="50.2323232",
            end_longitude="28.32323232",
            destination_distance_eta_meters="0",
            destination_time_eta_seconds="0",
        )
        assert_no_server_error(event_page.start_journey(journey))
        event_page.cancel_journey()

    @pytest.mark.P3
    @pytest.mark.edge
    @allure.story("Start Journey")
    @allure.title("Start journey over a very long distance")
    def test_start_journey_long_distance(
        self, event_page: EventPage, authorize, data_factory: TestDataFactory
    ):
        authorize(event_page)
        journey = data_factory.get_journey_data(
            end_latitude="-33.8688",
            end_longitude="151.2093",
            destination_distance_eta_meters="15000000",
            destination_time_eta_seconds="86400",
        )
        assert_no_server_error(event_page.start_journey(journey))
        event_page.cancel_journey()


@allure.epic("PanicGuard API")
@allure.feature("Check-ins")
@pytest.mark.checkin
class TestCheckins:

    @pytest.mark.P2
    @pytest.mark.positive
    @allure.story("Check-in")
    @allure.title("Check in at a location and check out")
    def test_checkin_and_checkout(self, event_page: EventPage, authorize, data_factory: TestDataFactory):
        authorize(event_page)

        with allure.step("Create check-in"):
            assert_no_server_error(event_page.create_checkin(data_factory.get_checkin_data()))
        with allure.step("Check out"):
            assert_no_server_error(event_page.checkout())

    @pytest.mark.P2
    @pytest.mark.negative
    @allure.story("Check-in")
    @allure.title("Check-in without auth is rejected")
    def test_checkin_without_auth(self, event_page: EventPage, data_factory: TestDataFactory):
        response = event_page.create_checkin(data_factory.get_checkin_data())
        assert not response.is_success
