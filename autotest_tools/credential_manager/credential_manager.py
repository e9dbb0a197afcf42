"""
================================================================================
Credential Manager
================================================================================

Keeps the suite's test credentials and session token in the local .env file.

Commands:
    update <username> <password> <pin>   Store test credentials
    token <token> [expires_at]           Store a session token (+ expiry)
    check                                Show masked credentials and token status
    validate                             Exit 1 when a credential is missing
    refresh                              Exit 1 when auto-refresh is on and the
                                         token has expired

Every write also records CREDENTIALS_UPDATED_DATE / CREDENTIALS_UPDATED_BY.
Values in the process environment take precedence over the file, the same
way ConfigLoader resolves them.

================================================================================
"""

import argparse
import getpass
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values, set_key
from loguru import logger

from autotest_tools.common import init_logger
from testsuites.api_testing.framework.config_loader import ConfigLoader
from testsuites.api_testing.framework.settings import ApiSettings
from testsuites.api_testing.framework.token_manager import TokenManager


REQUIRED_CREDENTIALS = ["TEST_USERNAME", "TEST_PASSWORD", "TEST_PIN"]
TRACKING_HEADER = "# Credential Management"

TRACKED_KEYS = REQUIRED_CREDENTIALS + [
    "AUTH_TOKEN_CURRENT",
    "AUTH_TOKEN_EXPIRES_AT",
    "BEARER_TOKEN_EXPIRES_AT",
    "BEARER_TOKEN_UPDATED_DATE",
    "BEARER_TOKEN_REFRESH_THRESHOLD_MINUTES",
    "BEARER_TOKEN_AUTO_REFRESH",
]

USAGE = """Usage:
  credential-manager update <username> <password> <pin>
  credential-manager token <token> [expires_at]
  credential-manager check
  credential-manager validate
  credential-manager refresh

Examples:
  credential-manager update user@example.com mypass123 1234
  credential-manager token abc123token 2025-10-15T10:00:00Z
  credential-manager check"""


# ================================================================================
# Env File Access
# ================================================================================

def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "system"


def update_env_file(env_file: Path, updates: Mapping[str, str]) -> str:
    """
    Write `updates` into `env_file` and stamp the change.

    Existing keys are overwritten in place, new keys are appended. The file
    is created when missing.

    Returns:
        The update timestamp written to CREDENTIALS_UPDATED_DATE
    """
    env_file = Path(env_file)
    env_file.parent.mkdir(parents=True, exist_ok=True)
    env_file.touch(exist_ok=True)

    for key, value in updates.items():
        set_key(str(env_file), key, str(value), quote_mode="never")

    if TRACKING_HEADER not in env_file.read_text(encoding="utf-8"):
        with open(env_file, "a", encoding="utf-8") as f:
            f.write(f"\n{TRACKING_HEADER}\n")

    timestamp = _timestamp()
    set_key(str(env_file), "CREDENTIALS_UPDATED_DATE", timestamp, quote_mode="never")
    set_key(str(env_file), "CREDENTIALS_UPDATED_BY", _current_user(), quote_mode="never")

    logger.info(f"✅ Updated {len(updates)} environment variables")
    logger.info(f"📅 Last updated: {timestamp}")
    return timestamp


def read_values(env_file: Path) -> Dict[str, str]:
    """Tracked values from `env_file`, overridden by the process environment."""
    values = {
        key: value
        for key, value in dotenv_values(env_file).items()
        if value is not None
    }
    for key in TRACKED_KEYS:
        if key in os.environ:
            values[key] = os.environ[key]
    return values


# ================================================================================
# Commands
# ================================================================================

def update_credentials(env_file: Path, username: str, password: str, pin: str) -> None:
    logger.info("🔐 Updating test credentials...")
    update_env_file(
        env_file,
        {"TEST_USERNAME": username, "TEST_PASSWORD": password, "TEST_PIN": pin},
    )
    logger.info("✅ Test credentials updated successfully")


def update_bearer_token(env_file: Path, token: str, expires_at: Optional[str] = None) -> None:
    logger.info("🔑 Updating bearer token...")
    updates = {
        "AUTH_TOKEN_CURRENT": token,
        "BEARER_TOKEN_UPDATED_DATE": _timestamp(),
    }
    if expires_at:
        updates["AUTH_TOKEN_EXPIRES_AT"] = expires_at
        updates["BEARER_TOKEN_EXPIRES_AT"] = expires_at

    update_env_file(env_file, updates)
    logger.info("✅ Bearer token updated successfully")


def _token_manager(values: Mapping[str, str]) -> TokenManager:
    expires_at = values.get("BEARER_TOKEN_EXPIRES_AT") or values.get("AUTH_TOKEN_EXPIRES_AT")
    try:
        threshold = int(values.get("BEARER_TOKEN_REFRESH_THRESHOLD_MINUTES", "30"))
    except ValueError:
        threshold = 30
    return TokenManager(
        ApiSettings(token_expires_at=expires_at, refresh_threshold_minutes=threshold)
    )


def check_token_expiration(values: Mapping[str, str], now: Optional[datetime] = None) -> bool:
    """
    Report the token's expiry status.

    Returns:
        False when no expiry is configured or the token has expired
    """
    manager = _token_manager(values)
    if manager.expires_at is None:
        logger.warning("⚠️  No token expiration date set")
        return False

    expires = manager.expires_at.isoformat()
    if manager.is_expired(now):
        logger.error("❌ Bearer token has expired")
        return False
    if manager.is_expiring(now):
        logger.warning(f"⚠️  Bearer token expires soon: {expires}")
    else:
        logger.info(f"✅ Bearer token is valid until: {expires}")
    return True


def refresh_token_if_needed(values: Mapping[str, str], now: Optional[datetime] = None) -> bool:
    """False only when auto-refresh is enabled and the token is not usable."""
    auto_refresh = values.get("BEARER_TOKEN_AUTO_REFRESH", "false").lower() == "true"
    if auto_refresh and not check_token_expiration(values, now):
        logger.warning("🔄 Auto-refresh is enabled but token is expired")
        logger.info("💡 Please update the bearer token manually or disable auto-refresh")
        return False
    return True


def mask_secret(value: Optional[str], visible: int) -> str:
    """`***` plus the last `visible` characters, or "Not set"."""
    if not value:
        return "Not set"
    return f"***{value[-visible:]}"


def show_current_credentials(values: Mapping[str, str]) -> None:
    token = values.get("AUTH_TOKEN_CURRENT")

    logger.info("🔐 Current Credentials:")
    logger.info(f"Username: {values.get('TEST_USERNAME') or 'Not set'}")
    logger.info(f"Password: {mask_secret(values.get('TEST_PASSWORD'), 4)}")
    logger.info(f"PIN: {mask_secret(values.get('TEST_PIN'), 2)}")

    logger.info("🔑 Bearer Token Status:")
    logger.info(f"Current Token: {f'Set (length: {len(token)})' if token else 'Not set'}")
    logger.info(f"Expires At: {values.get('BEARER_TOKEN_EXPIRES_AT') or 'Not set'}")
    logger.info(f"Last Updated: {values.get('BEARER_TOKEN_UPDATED_DATE') or 'Never'}")
    logger.info(f"Auto Refresh: {values.get('BEARER_TOKEN_AUTO_REFRESH') or 'false'}")


def missing_credentials(values: Mapping[str, str]) -> List[str]:
    return [key for key in REQUIRED_CREDENTIALS if not values.get(key)]


def validate_credentials(values: Mapping[str, str]) -> bool:
    missing = missing_credentials(values)
    if missing:
        logger.error(f"❌ Missing required credentials: {', '.join(missing)}")
        return False
    logger.info("✅ All required credentials are set")
    return True


# ================================================================================
# CLI
# ================================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="credential-manager",
        description="Manage PanicGuard test credentials and tokens in .env",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE,
    )
    parser.add_argument("--env-file", type=Path, help="Env file to manage (default: auth.env_file)")
    subparsers = parser.add_subparsers(dest="command")

    update = subparsers.add_parser("update", help="Store test credentials")
    update.add_argument("username", nargs="?")
    update.add_argument("password", nargs="?")
    update.add_argument("pin", nargs="?")

    token = subparsers.add_parser("token", help="Store a session token")
    token.add_argument("token", nargs="?")
    token.add_argument("expires_at", nargs="?")

    subparsers.add_parser("check", help="Show credentials and token status")
    subparsers.add_parser("validate", help="Fail when credentials are missing")
    subparsers.add_parser("refresh", help="Fail when auto-refresh cannot proceed")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    init_logger()

    env_file = args.env_file or ApiSettings.from_config(ConfigLoader()).env_file

    if args.command == "update":
        if not (args.username and args.password and args.pin):
            logger.error("Usage: credential-manager update <username> <password> <pin>")
            return 1
        update_credentials(env_file, args.username, args.password, args.pin)
        return 0

    if args.command == "token":
        if not args.token:
            logger.error("Usage: credential-manager token <token> [expires_at]")
            return 1
        update_bearer_token(env_file, args.token, args.expires_at)
        return 0

    values = read_values(env_file)

    if args.command == "check":
        show_current_credentials(values)
        validate_credentials(values)
        check_token_expiration(values)
        return 0

    if args.command == "validate":
        if validate_credentials(values):
            logger.info("✅ Credential validation passed")
            return 0
        logger.error("❌ Credential validation failed")
        return 1

    if args.command == "refresh":
        if refresh_token_if_needed(values):
            logger.info("✅ Token refresh check completed")
            return 0
        logger.error("❌ Token refresh failed")
        return 1

    logger.info("🔐 Credential Manager")
    logger.info(USAGE)
    show_current_credentials(values)
    return 0


if __name__ == "__main__":
    sys.exit(main())
