"""
Maintains test credentials and the session token in the local .env file.
"""

from .credential_manager import (
    check_token_expiration,
    mask_secret,
    missing_credentials,
    read_values,
    refresh_token_if_needed,
    update_bearer_token,
    update_credentials,
    update_env_file,
    validate_credentials,
)

__all__ = [
    "check_token_expiration",
    "mask_secret",
    "missing_credentials",
    "read_values",
    "refresh_token_if_needed",
    "update_bearer_token",
    "update_credentials",
    "update_env_file",
    "validate_credentials",
]
