"""
================================================================================
Token Manager
================================================================================

Holds the session token of one HTTP client and answers lifecycle questions:
    - Which auth header to send (custom `Auth-token` or `Authorization: Bearer`)
    - Whether the configured expiry is close (refresh due) or already passed
    - Optional persistence of the latest token to the local .env file, guarded
      by a file lock so parallel xdist workers do not interleave writes

Checks are pull-based; there is no background refresh timer.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional

from dotenv import set_key
from filelock import FileLock
from loguru import logger

from .settings import ApiSettings


TOKEN_ENV_KEY = "AUTH_TOKEN_CURRENT"
TOKEN_UPDATED_ENV_KEY = "BEARER_TOKEN_UPDATED_DATE"


class TokenError(Exception):
    """Raised when token operations fail."""
    pass


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing "Z". Naive values are taken as UTC.
    Returns None for empty or unparseable input.
    """
    if not value:
        return None

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"Ignoring unparseable token expiry timestamp: {value!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class TokenManager:
    """
    Per-client token holder.

    One instance belongs to one HttpClient (and therefore to one page object),
    so tokens never leak between tests or xdist workers.

    Authentication Headers Applied:
        - {token_header}: {token}                 (default, header "Auth-token")
        - Authorization: {bearer_prefix} {token}  (when use_bearer_token is on)

    Usage:
        >>> manager = TokenManager(settings)
        >>> manager.set_token("abc")
        >>> manager.apply({})
        {'Auth-token': 'abc'}
    """

    def __init__(self, settings: Optional[ApiSettings] = None) -> None:
        """
        Initialize token manager.

        Args:
            settings: Resolved suite settings. Uses defaults if None.
        """
        self.settings = settings or ApiSettings()
        self._token: str = ""
        self._issued_at: Optional[datetime] = None
        self._expires_at: Optional[datetime] = parse_timestamp(
            self.settings.token_expires_at
        )

    @property
    def token(self) -> str:
        """Current token, or an empty string when none is set."""
        return self._token

    @property
    def issued_at(self) -> Optional[datetime]:
        """When the current token was set."""
        return self._issued_at

    @property
    def expires_at(self) -> Optional[datetime]:
        """Configured expiry, if any."""
        return self._expires_at

    def get_token(self) -> str:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        """
        Replace the current token and record its issuance time.

        When `auto_update_token_file` is enabled, the token is also written to
        the .env file. Persistence failures are logged, never raised.

        Args:
            token: New token. None or "" clears the token.

        Raises:
            TokenError: If token is not a string.
        """
        if token is not None and not isinstance(token, str):
            raise TokenError(f"Token must be a string, got {type(token).__name__}")

        self._token = token or ""
        if not self._token:
            self._issued_at = None
            return

        self._issued_at = datetime.now(timezone.utc)
        if self.settings.auto_update_token_file:
            self._persist_token()

    def set_expiry(self, expires_at: Optional[str]) -> None:
        """Override the configured expiry timestamp (ISO-8601)."""
        self._expires_at = parse_timestamp(expires_at)

    def clear(self) -> None:
        """Forget the current token."""
        self._token = ""
        self._issued_at = None

    def is_expiring(self, now: Optional[datetime] = None) -> bool:
        """
        True when the expiry falls within the refresh threshold.

        `expiry - now <= threshold` counts as expiring. Without a configured
        expiry the token never expires, so this is False.
        """
        if self._expires_at is None:
            return False
        current = _utc(now)
        threshold = timedelta(minutes=self.settings.refresh_threshold_minutes)
        return self._expires_at - current <= threshold

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True when the configured expiry is at or before `now`."""
        if self._expires_at is None:
            return False
        return self._expires_at <= _utc(now)

    def header_name(self) -> str:
        """Name of the header carrying the token."""
        if self.settings.use_bearer_token:
            return "Authorization"
        return self.settings.token_header

    def apply(self, headers: Dict[str, str]) -> Dict[str, str]:
        """
        Return a copy of `headers` with the auth header added.

        Headers are returned unchanged when no token is set.
        """
        result = dict(headers)
        if not self._token:
            return result

        if self.settings.use_bearer_token:
            result["Authorization"] = f"{self.settings.bearer_prefix} {self._token}"
        else:
            result[self.settings.token_header] = self._token
        return result

    def _persist_token(self) -> None:
        """Write the token to the .env file (overwrite key or append)."""
        env_file = Path(self.settings.env_file)
        lock_file = env_file.with_name(f"{env_file.name}.lock")
        updated = self._issued_at.isoformat() if self._issued_at else ""

        try:
            with FileLock(str(lock_file), timeout=10):
                env_file.touch(exist_ok=True)
                set_key(str(env_file), TOKEN_ENV_KEY, self._token, quote_mode="never")
                set_key(str(env_file), TOKEN_UPDATED_ENV_KEY, updated, quote_mode="never")
            logger.debug(f"Persisted auth token to {env_file}")
        except (OSError, TimeoutError) as e:
            logger.warning(f"Could not update {env_file} with new token: {e}")


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


__all__ = [
    "TokenManager",
    "TokenError",
    "parse_timestamp",
    "TOKEN_ENV_KEY",
    "TOKEN_UPDATED_ENV_KEY",
]
