"""
================================================================================
Authenticated Session Bootstrap
================================================================================

Obtains one usable session token per test module from an ordered list of
credential sets:

    Trying(0) -> Trying(1) -> ... -> Authenticated | AlreadyLoggedIn | Exhausted

    - success + data.token       -> AUTHENTICATED, stop
    - error mentions "already logged in"
                                 -> ALREADY_LOGGED_IN with a placeholder token, stop
    - any other failure or a raised exception
                                 -> next credential set
    - list exhausted             -> EXHAUSTED, no token

Login attempts never store a token on the page; the caller decides what to
do with the resulting SessionState. Teardown logs out only for a real token
and never raises.

The "already logged in" placeholder exists because shared test accounts
collide across parallel runs. It is not part of the backend contract: tests
holding it can check connectivity but not flows that need a fresh login.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from loguru import logger

from .envelope import error_text, get_data, is_success

if TYPE_CHECKING:
    from testsuites.api_testing.pages.auth_page import AuthPage


ALREADY_LOGGED_IN_TOKEN = "mock_token_for_session_user"
ALREADY_LOGGED_IN_MARKER = "already logged in"


class SessionStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    ALREADY_LOGGED_IN = "already_logged_in"
    EXHAUSTED = "exhausted"


@dataclass
class SessionState:
    """Outcome of a bootstrap run."""
    status: SessionStatus
    token: Optional[str] = None
    username: Optional[str] = None
    attempts: int = 0

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @property
    def is_real_token(self) -> bool:
        """True for a token issued by a fresh login (not the placeholder)."""
        return self.status is SessionStatus.AUTHENTICATED and self.has_token


@dataclass
class AuthContext:
    """What the `authenticated_context` fixture hands to tests."""
    auth_page: "AuthPage"
    state: SessionState

    @property
    def token(self) -> Optional[str]:
        return self.state.token


def _attempt_login(auth_page: "AuthPage", credentials: Dict[str, Any]) -> Optional[SessionState]:
    response = auth_page.login(credentials)
    body = auth_page.safe_json_parse(response)
    username = credentials.get("username")

    token = get_data(body, "token")
    if is_success(body) and token:
        logger.info(f"Authenticated as {username}")
        return SessionState(SessionStatus.AUTHENTICATED, token=token, username=username)

    message = error_text(body)
    if ALREADY_LOGGED_IN_MARKER in message.lower():
        logger.warning(f"{username} is already logged in elsewhere, using placeholder token")
        return SessionState(
            SessionStatus.ALREADY_LOGGED_IN,
            token=ALREADY_LOGGED_IN_TOKEN,
            username=username,
        )

    logger.warning(f"Login failed for {username}: {message or body}")
    return None


def bootstrap_session(
    auth_page: "AuthPage",
    credential_sets: Iterable[Dict[str, Any]],
) -> SessionState:
    """
    Try each credential set in order and stop at the first usable one.

    Args:
        auth_page: Page used for the login requests
        credential_sets: Ordered login payloads (default set first)

    Returns:
        SessionState; status EXHAUSTED with token None when nothing worked
    """
    attempts = 0
    for credentials in credential_sets:
        attempts += 1
        try:
            state = _attempt_login(auth_page, credentials)
        except Exception as e:
            logger.warning(
                f"Login attempt {attempts} ({credentials.get('username')}) raised: {e}"
            )
            continue

        if state is not None:
            state.attempts = attempts
            return state

    logger.warning(
        f"No credential set could authenticate after {attempts} attempt(s); "
        "authenticated tests will skip or check unauthenticated behavior"
    )
    return SessionState(SessionStatus.EXHAUSTED, attempts=attempts)


def teardown_session(auth_page: "AuthPage", state: SessionState) -> None:
    """Best-effort logout for a real token. Errors are logged, never raised."""
    if not state.is_real_token:
        return

    try:
        auth_page.set_auth_token(state.token)
        auth_page.logout()
        logger.info(f"Logged out {state.username}")
    except Exception as e:
        logger.warning(f"Logout during teardown failed: {e}")


__all__ = [
    "ALREADY_LOGGED_IN_TOKEN",
    "AuthContext",
    "SessionState",
    "SessionStatus",
    "bootstrap_session",
    "teardown_session",
]
