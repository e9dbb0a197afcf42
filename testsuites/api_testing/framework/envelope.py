"""
Helpers for the backend's response envelope.

Every endpoint answers ``{success, data?, error?, errors?}``. On failure
``success`` is false and ``error`` or ``errors`` is present; on success the
payload sits under ``data``.
"""

from __future__ import annotations

from typing import Any

import allure


def is_success(body: Any) -> bool:
    """True when `body` is an envelope with a truthy `success` flag."""
    return isinstance(body, dict) and bool(body.get("success"))


def error_text(body: Any) -> str:
    """
    Flatten the envelope's `error`/`errors` into one searchable string.

    `error` may be a string or a mapping; `errors` is usually a field -> list
    mapping. Returns "" for anything that is not an envelope.
    """
    if not isinstance(body, dict):
        return ""

    parts = []
    for key in ("error", "errors", "message"):
        value = body.get(key)
        if not value:
            continue
        if isinstance(value, dict):
            for item in value.values():
                if isinstance(item, (list, tuple)):
                    parts.extend(str(v) for v in item)
                else:
                    parts.append(str(item))
        elif isinstance(value, (list, tuple)):
            parts.extend(str(v) for v in value)
        else:
            parts.append(str(value))
    return " ".join(parts)


def get_data(body: Any, key: str, default: Any = None) -> Any:
    """Read `body["data"][key]` without tripping over missing levels."""
    if not isinstance(body, dict):
        return default
    data = body.get("data")
    if isinstance(data, dict):
        return data.get(key, default)
    return default


@allure.step("Verify success envelope")
def assert_success_envelope(body: Any) -> None:
    assert isinstance(body, dict), f"Expected JSON object, got {type(body).__name__}"
    assert body.get("success") is True, f"Expected success=true, got: {body}"
    assert "data" in body, f"Success envelope must carry 'data': {body}"


@allure.step("Verify failure envelope")
def assert_failure_envelope(body: Any) -> None:
    assert isinstance(body, dict), f"Expected JSON object, got {type(body).__name__}"
    assert body.get("success") is False, f"Expected success=false, got: {body}"
    assert "error" in body or "errors" in body, (
        f"Failure envelope must carry 'error' or 'errors': {body}"
    )


@allure.step("Verify request was rejected")
def assert_rejected(response: Any, body: Any) -> None:
    """
    Assert the server refused a request: a 4xx/5xx status or a failure envelope.

    Used for unauthenticated and invalid-input calls, where the backend may
    answer either way.
    """
    status = getattr(response, "status_code", 0)
    assert status >= 400 or not is_success(body), (
        f"Expected rejection, got status {status} with body: {body}"
    )


@allure.step("Verify no server error")
def assert_no_server_error(response: Any) -> None:
    """The request was handled: any status below 500."""
    assert response.status_code < 500, (
        f"Server error {response.status_code} for {response.request.method} "
        f"{response.request.url}"
    )


__all__ = [
    "assert_failure_envelope",
    "assert_no_server_error",
    "assert_rejected",
    "assert_success_envelope",
    "error_text",
    "get_data",
    "is_success",
]
