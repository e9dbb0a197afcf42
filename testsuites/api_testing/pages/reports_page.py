"""Anonymous incident reports (no auth required)."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class ReportsPage(BasePage):

    ENDPOINTS = {
        "settings": "/reports/settings",
        "submit": "/reports/submit",
        "upload_media": "/reports/{report_id}/media/upload",
    }

    @allure.step("Get report settings")
    def get_settings(self) -> httpx.Response:
        return self.client.get(self.endpoint("settings"))

    @allure.step("Submit report")
    def submit_report(self, report_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("submit"), convert_to_form_data(report_data), form=True
        )

    @allure.step("Upload media for report {report_id}")
    def upload_media(
        self,
        report_id: str,
        file_name: str = "test_file.txt",
        content: bytes = b"test file content",
    ) -> httpx.Response:
        return self.client.upload_file(
            self.endpoint("upload_media", report_id=report_id), file_name, content
        )
