from datetime import datetime, timedelta, timezone

import pytest
from dotenv import dotenv_values

from testsuites.api_testing.framework.settings import ApiSettings
from testsuites.api_testing.framework.token_manager import (
    TOKEN_ENV_KEY,
    TOKEN_UPDATED_ENV_KEY,
    TokenError,
    TokenManager,
    parse_timestamp,
)


NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def _manager(**overrides):
    return TokenManager(ApiSettings(**overrides))


def test_without_expiry_token_never_expires():
    manager = _manager()
    manager.set_token("abc")

    assert manager.expires_at is None
    assert manager.is_expired(NOW) is False
    assert manager.is_expiring(NOW) is False


def test_expiring_threshold_boundary_is_inclusive():
    expiry = NOW + timedelta(minutes=30)
    manager = _manager(token_expires_at=expiry.isoformat(), refresh_threshold_minutes=30)

    assert manager.is_expiring(NOW) is True
    assert manager.is_expiring(NOW - timedelta(seconds=1)) is False
    assert manager.is_expired(NOW) is False


def test_expired_at_or_after_expiry():
    manager = _manager(token_expires_at="2030-01-01T12:00:00Z")

    assert manager.is_expired(NOW) is True
    assert manager.is_expired(NOW - timedelta(seconds=1)) is False


def test_naive_now_is_taken_as_utc():
    manager = _manager(token_expires_at="2030-01-01T12:00:00Z")
    assert manager.is_expired(datetime(2030, 1, 1, 12, 0)) is True


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2030-01-01T12:00:00Z", NOW),
        ("2030-01-01T14:00:00+02:00", NOW),
        ("2030-01-01T12:00:00", NOW),
        ("not-a-date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


def test_unparseable_expiry_counts_as_not_configured():
    manager = _manager(token_expires_at="tomorrow-ish")
    assert manager.expires_at is None
    assert manager.is_expiring(NOW) is False


def test_apply_uses_custom_header_by_default():
    manager = _manager()
    assert manager.apply({"Accept": "application/json"}) == {"Accept": "application/json"}

    manager.set_token("abc")
    assert manager.apply({}) == {"Auth-token": "abc"}
    assert manager.header_name() == "Auth-token"


def test_apply_uses_bearer_when_enabled():
    manager = _manager(use_bearer_token=True, bearer_prefix="Bearer")
    manager.set_token("abc")

    assert manager.apply({}) == {"Authorization": "Bearer abc"}
    assert manager.header_name() == "Authorization"


def test_set_token_records_issuance_and_clear_forgets():
    manager = _manager()
    manager.set_token("abc")
    assert manager.token == "abc"
    assert manager.issued_at is not None

    manager.clear()
    assert manager.get_token() == ""
    assert manager.issued_at is None

    manager.set_token("abc")
    manager.set_token(None)
    assert manager.token == ""


def test_non_string_token_is_rejected():
    with pytest.raises(TokenError):
        _manager().set_token(12345)


def test_set_expiry_overrides_configuration():
    manager = _manager()
    manager.set_expiry("2030-01-01T12:20:00Z")
    assert manager.is_expiring(NOW) is True


def test_token_is_persisted_when_enabled(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("API_BASE_URL=http://localhost/api\nAUTH_TOKEN_CURRENT=old\n", encoding="utf-8")
    manager = _manager(auto_update_token_file=True, env_file=env_file)

    manager.set_token("fresh-token")

    values = dotenv_values(env_file)
    assert values[TOKEN_ENV_KEY] == "fresh-token"
    assert values[TOKEN_UPDATED_ENV_KEY]
    assert values["API_BASE_URL"] == "http://localhost/api"
    assert env_file.read_text(encoding="utf-8").count(TOKEN_ENV_KEY) == 1


def test_token_is_not_persisted_by_default(tmp_path):
    env_file = tmp_path / ".env"
    _manager(env_file=env_file).set_token("abc")
    assert not env_file.exists()


def test_persistence_failure_is_only_a_warning(tmp_path):
    env_file = tmp_path / "env-is-a-directory"
    env_file.mkdir()
    manager = _manager(auto_update_token_file=True, env_file=env_file)

    manager.set_token("abc")

    assert manager.token == "abc"
