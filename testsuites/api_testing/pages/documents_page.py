"""User documents."""

from __future__ import annotations

from typing import Any, Dict

import allure
import httpx

from testsuites.api_testing.framework.form_data import convert_to_form_data

from .base_page import BasePage


class DocumentsPage(BasePage):

    ENDPOINTS = {
        "documents": "/user_document",
        "document_by_id": "/user_document/{id}",
    }

    @allure.step("Get user documents")
    def get_user_documents(self) -> httpx.Response:
        return self.client.get(self.endpoint("documents"), include_auth=True)

    @allure.step("Create user document")
    def create_user_document(self, document_data: Dict[str, Any]) -> httpx.Response:
        return self.client.post(
            self.endpoint("documents"),
            convert_to_form_data(document_data),
            include_auth=True,
            form=True,
        )

    @allure.step("Delete user document {document_id}")
    def delete_user_document(self, document_id: str) -> httpx.Response:
        return self.client.delete(self.endpoint("document_by_id", id=document_id), include_auth=True)
