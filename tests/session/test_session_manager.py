from __future__ import annotations

import pytest

from src.medhir_portal.medhir_portal.core.enums import ExpiryReason, Role
from src.medhir_portal.medhir_portal.core.exceptions import ValidationError
from src.medhir_portal.medhir_portal.session.cipher import ValueCipher
from src.medhir_portal.medhir_portal.session.manager import SessionManager, SessionSettings

ONE_HOUR_MS = 3_600_000


def test_begin_stores_token_attributes_and_activity(manager, make_token, storage, clock):
    token = make_token(roles=["EMPLOYEE"])

    record = manager.begin(token, attributes={"employeeId": "EMP-1", "departmentName": "Sales"})

    assert record.token == token
    assert record.employee_id == "EMP-1"
    assert record.department_name == "Sales"
    assert record.last_activity == clock.ms
    assert manager.has_session() is True
    assert manager.roles() == frozenset({Role.EMPLOYEE})


def test_begin_does_not_merge_previous_session(manager, make_token):
    manager.begin(make_token(), attributes={"employeeId": "EMP-1", "isSuperadmin": "true"})

    record = manager.begin(make_token(sub="EMP-2"), attributes={"employeeId": "EMP-2"})

    assert record.employee_id == "EMP-2"
    assert record.is_superadmin is None


def test_begin_rejects_empty_token_and_unknown_attributes(manager, make_token):
    with pytest.raises(ValidationError):
        manager.begin("")
    with pytest.raises(ValidationError):
        manager.begin(make_token(), attributes={"favouriteColour": "blue"})
    assert manager.has_session() is False


def test_is_expired_reports_reason_without_side_effects(manager, make_token, clock, storage):
    assert manager.is_expired() is ExpiryReason.INACTIVITY

    manager.begin(make_token())
    assert manager.is_expired() is None

    clock.advance_ms(ONE_HOUR_MS + 1)
    assert manager.is_expired() is ExpiryReason.INACTIVITY
    assert storage.get_item("token") is not None


def test_expire_if_needed_clears_store(manager, make_token, clock, storage):
    manager.begin(make_token())
    clock.advance_ms(ONE_HOUR_MS + 1)

    assert manager.expire_if_needed() is ExpiryReason.INACTIVITY
    assert len(storage) == 0


def test_touch_refreshes_live_session_only(manager, make_token, clock, storage):
    manager.begin(make_token())
    clock.advance_ms(ONE_HOUR_MS - 1)

    assert manager.touch() is True
    assert manager.clock.last_activity() == clock.ms

    clock.advance_ms(ONE_HOUR_MS + 1)
    assert manager.touch() is False
    assert len(storage) == 0


def test_claims_is_none_for_garbage_token(manager, storage):
    storage.set_item("token", "garbage")

    assert manager.claims() is None
    assert manager.roles() == frozenset()


def test_end_is_idempotent(manager, make_token, storage):
    manager.begin(make_token())

    assert manager.end() is True
    assert manager.end() is True
    assert len(storage) == 0


def test_settings_validation_and_from_settings():
    class Settings:
        INACTIVITY_THRESHOLD_MS = 120_000
        EXPIRY_CHECK_INTERVAL_SECONDS = 15

    settings = SessionSettings.from_settings(Settings)

    assert settings.inactivity_threshold_ms == 120_000
    assert settings.check_interval_seconds == 15
    assert SessionSettings().inactivity_threshold_ms == ONE_HOUR_MS
    with pytest.raises(ValidationError):
        SessionSettings(inactivity_threshold_ms=0)


def test_begin_stamps_session_start(manager, make_token, clock):
    manager.begin(make_token())
    clock.advance_ms(60_000)

    assert manager.preferences.session_start_time() == clock.ms - 60_000


def test_encrypted_session_still_expires_and_reads_back(storage, clock, make_token):
    manager = SessionManager(
        storage,
        settings=SessionSettings(inactivity_threshold_ms=ONE_HOUR_MS),
        cipher=ValueCipher(ValueCipher.generate_key()),
        now_ms=clock.now_ms,
        now_seconds=clock.now_seconds,
    )
    token = make_token(roles=["EMPLOYEE"])
    manager.begin(token, attributes={"employeeId": "EMP-1"})

    assert ValueCipher.looks_encrypted(storage.get_item("token"))
    assert manager.token() == token
    assert manager.record().employee_id == "EMP-1"
    assert manager.is_expired() is None

    clock.advance_ms(ONE_HOUR_MS + 1)
    assert manager.is_expired() is ExpiryReason.INACTIVITY
