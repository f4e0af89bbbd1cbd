from __future__ import annotations

import pytest

from src.medhir_portal.medhir_portal.core.exceptions import StorageFailure, ValidationError
from src.medhir_portal.medhir_portal.session.cipher import ValueCipher
from src.medhir_portal.medhir_portal.session.store import SessionStore
from src.medhir_portal.medhir_portal.storage.memory_storage import InMemoryStorage


class BrokenStorage(InMemoryStorage):
    def set_item(self, key, value):
        raise StorageFailure("quota exceeded")

    def get_item(self, key):
        raise StorageFailure("storage disabled")

    def remove_item(self, key):
        raise StorageFailure("storage disabled")

    def clear(self):
        raise StorageFailure("storage disabled")


class RecordingReporter:
    def __init__(self):
        self.calls = []

    def __call__(self, message, error):
        self.calls.append((message, error))


def test_set_serializes_to_json():
    storage = InMemoryStorage()
    store = SessionStore(storage)

    assert store.set("userPreferences", {"theme": "dark"}) is True
    assert storage.get_item("userPreferences") == '{"theme": "dark"}'
    assert store.get("userPreferences") == {"theme": "dark"}


def test_get_returns_raw_string_for_legacy_values():
    store = SessionStore(InMemoryStorage({"employeeCompanyId": "CMP-42"}))

    assert store.get("employeeCompanyId") == "CMP-42"


def test_get_returns_default_for_absent_key():
    store = SessionStore(InMemoryStorage())

    assert store.get("theme", "light") == "light"
    assert store.get("theme") is None


def test_unserializable_value_is_reported_and_not_written():
    storage = InMemoryStorage({"recentItems": "[]"})
    reporter = RecordingReporter()
    store = SessionStore(storage, reporter)

    assert store.set("recentItems", {object()}) is False

    assert storage.get_item("recentItems") == "[]"
    assert len(reporter.calls) == 1
    assert "recentItems" in reporter.calls[0][0]


def test_substrate_failures_are_reported_never_raised():
    reporter = RecordingReporter()
    store = SessionStore(BrokenStorage(), reporter)

    assert store.set("token", "abc") is False
    assert store.get("token", "fallback") == "fallback"
    assert store.remove("token") is False
    assert store.clear_all() is False
    assert len(reporter.calls) == 4
    assert all(isinstance(err, StorageFailure) for _, err in reporter.calls)


def test_failing_reporter_does_not_escape():
    def reporter(message, error):
        raise RuntimeError("toast service down")

    store = SessionStore(BrokenStorage(), reporter)

    assert store.set("token", "abc") is False


def test_clear_all_is_idempotent():
    storage = InMemoryStorage({"token": '"abc"', "lastActivity": "1"})
    store = SessionStore(storage)

    assert store.clear_all() is True
    assert store.clear_all() is True
    assert len(storage) == 0


def test_remove_absent_key_succeeds():
    store = SessionStore(InMemoryStorage())

    assert store.remove("departmentName") is True
    assert store.remove_many(["employeeId", "employeeName"]) is True


def test_snapshot_tolerates_missing_and_legacy_fields():
    storage = InMemoryStorage(
        {
            "currentRole": "EMPLOYEE",
            "employeeId": "1024",
            "lastActivity": "1700000000000",
            "isSuperadmin": "false",
        }
    )
    record = SessionStore(storage).snapshot()

    assert record.token is None
    assert record.has_token is False
    assert record.current_role == "EMPLOYEE"
    assert record.employee_id == "1024"
    assert record.last_activity == 1_700_000_000_000
    assert record.is_superadmin == "false"
    assert "token" not in record.to_public_dict()


def test_deeply_nested_value_falls_back_to_raw_string():
    raw = "[" * 100_000
    store = SessionStore(InMemoryStorage({"recentItems": raw}))

    assert store.get("recentItems", "fallback") == raw


def test_encrypted_values_round_trip():
    storage = InMemoryStorage()
    store = SessionStore(storage, cipher=ValueCipher(ValueCipher.generate_key()))

    assert store.set("userPreferences", {"theme": "dark"}, {"encrypt": True}) is True

    stored = storage.get_item("userPreferences")
    assert ValueCipher.looks_encrypted(stored)
    assert "dark" not in stored
    assert store.get("userPreferences") == {"theme": "dark"}


def test_cipher_encrypts_by_default_and_can_be_skipped():
    storage = InMemoryStorage()
    store = SessionStore(storage, cipher=ValueCipher(ValueCipher.generate_key()))

    store.set("theme", "dark")
    store.set("lastVisitedPage", "/leads", {"encrypt": False})

    assert ValueCipher.looks_encrypted(storage.get_item("theme"))
    assert storage.get_item("lastVisitedPage") == '"/leads"'
    assert store.get("theme") == "dark"
    assert store.get("lastVisitedPage") == "/leads"


def test_plaintext_values_stay_readable_with_cipher():
    storage = InMemoryStorage({"recentItems": '[{"id": 1}]', "employeeCompanyId": "CMP-42"})
    store = SessionStore(storage, cipher=ValueCipher(ValueCipher.generate_key()))

    assert store.get("recentItems") == [{"id": 1}]
    assert store.get("employeeCompanyId") == "CMP-42"


def test_encrypt_without_key_is_reported_and_not_written():
    storage = InMemoryStorage()
    reporter = RecordingReporter()
    store = SessionStore(storage, reporter)

    assert store.set("theme", "dark", {"encrypt": True}) is False

    assert storage.get_item("theme") is None
    assert len(reporter.calls) == 1
    assert isinstance(reporter.calls[0][1], StorageFailure)


def test_value_encrypted_with_another_key_is_reported():
    storage = InMemoryStorage()
    SessionStore(storage, cipher=ValueCipher(ValueCipher.generate_key())).set("theme", "dark")
    reporter = RecordingReporter()
    store = SessionStore(storage, reporter, cipher=ValueCipher(ValueCipher.generate_key()))

    assert store.get("theme", "light") == "light"
    assert len(reporter.calls) == 1


def test_invalid_encryption_key_is_rejected():
    with pytest.raises(ValidationError):
        ValueCipher("not-a-fernet-key")

    assert ValueCipher.from_key(None) is None
    assert ValueCipher.from_key("") is None
