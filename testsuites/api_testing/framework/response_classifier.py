"""
================================================================================
Response Classifier
================================================================================

Normalizes raw HTTP responses into something every assertion can branch on:

    - A JSON body is returned exactly as the server sent it
    - An HTML page (reverse proxy error, login redirect, framework error page)
      is turned into an error descriptor with `success: False`

Two detection paths are kept on purpose: the content-type check catches
honest HTML responses before any decoding, and the decode-failure fallback
catches servers that mislabel HTML as JSON.

The classifier never raises for a malformed body.

================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

import httpx
from loguru import logger


DEFAULT_PREVIEW_LENGTH = 500

HTML_MARKERS = ("<!doctype", "<html")


class ErrorType(str, Enum):
    """Classification of a non-JSON response."""
    NOT_FOUND = "not_found"
    AUTH_REDIRECT = "auth_redirect"
    FORBIDDEN = "forbidden"
    SERVER_ERROR = "server_error"
    WEB_SERVER_ERROR_PAGE = "web_server_error_page"
    UNKNOWN = "unknown"
    JSON_PARSE_ERROR = "json_parse_error"


def is_html_content(text: Optional[str]) -> bool:
    """True when the body looks like an HTML document."""
    if not text:
        return False
    lowered = text.lower()
    return any(marker in lowered for marker in HTML_MARKERS)


def classify_html(status_code: int, text: str) -> ErrorType:
    """
    Classify an HTML body by status code and well-known markers.

    Checked in order: not found, login redirect, forbidden, server error,
    generic web server page (nginx/Apache).
    """
    body = text or ""
    lowered = body.lower()

    if status_code == 404 or "404" in body:
        return ErrorType.NOT_FOUND
    if "login" in lowered or "sign in" in lowered:
        return ErrorType.AUTH_REDIRECT
    if status_code == 403 or "403" in body:
        return ErrorType.FORBIDDEN
    if status_code == 500 or "500" in body:
        return ErrorType.SERVER_ERROR
    if "nginx" in lowered or "apache" in lowered:
        return ErrorType.WEB_SERVER_ERROR_PAGE
    return ErrorType.UNKNOWN


def _response_url(response: httpx.Response) -> str:
    try:
        return str(response.request.url)
    except RuntimeError:
        # Response built without a request
        return ""


def _html_descriptor(
    response: httpx.Response,
    text: str,
    content_type: str,
    error: str,
    preview_length: int,
) -> Dict[str, Any]:
    error_type = classify_html(response.status_code, text)
    url = _response_url(response)
    preview = text[:preview_length]
    logger.warning(
        f"HTML response instead of JSON ({error_type.value}) "
        f"status={response.status_code} url={url}\n{preview}"
    )
    return {
        "success": False,
        "error": f"{error} (status {response.status_code}, {error_type.value})",
        "error_type": error_type.value,
        "html_content": text,
        "content_type": content_type,
        "url": url,
        "status": response.status_code,
    }


def classify_response(
    response: httpx.Response,
    preview_length: int = DEFAULT_PREVIEW_LENGTH,
) -> Any:
    """
    Return the JSON body of `response`, or an error descriptor.

    Args:
        response: Completed httpx response (body already buffered)
        preview_length: Characters of HTML included in the diagnostic log

    Returns:
        The decoded JSON value unchanged, or a dict with keys
        success, error, error_type, html_content/raw_content,
        content_type, url, status.
    """
    content_type = response.headers.get("content-type", "")

    if "text/html" in content_type and "application/json" not in content_type:
        return _html_descriptor(
            response,
            response.text,
            content_type,
            "API returned HTML error page",
            preview_length,
        )

    try:
        return response.json()
    except ValueError as e:
        text = response.text

        if is_html_content(text):
            return _html_descriptor(
                response,
                text,
                content_type,
                "Failed to parse JSON response: received HTML content",
                preview_length,
            )

        logger.warning(
            f"Failed to parse JSON response status={response.status_code}: {e}"
        )
        return {
            "success": False,
            "error": "Failed to parse JSON response",
            "error_type": ErrorType.JSON_PARSE_ERROR.value,
            "raw_content": text,
            "content_type": content_type,
            "url": _response_url(response),
            "status": response.status_code,
        }


__all__ = [
    "ErrorType",
    "classify_html",
    "classify_response",
    "is_html_content",
]
