"""Tests for the demo login."""

import pytest

from boutique_bill.audit import AuditLogger
from boutique_bill.auth import AuthService
from boutique_bill.config import AuthSettings
from boutique_bill.models.audit import AuditEventType
from boutique_bill.services.storage import InMemoryStorage, JsonFileStorage


@pytest.fixture
def auth_settings():
    return AuthSettings(demo_email="user@example.com", demo_password="password")


class TestAuthService:
    """Tests for AuthService."""

    def test_not_logged_in_by_default(self, auth_settings):
        auth = AuthService(InMemoryStorage(), auth_settings)
        assert auth.current_user() is None
        assert auth.is_authenticated() is False

    def test_wrong_credentials(self, auth_settings):
        audit = AuditLogger()
        auth = AuthService(InMemoryStorage(), auth_settings, audit)
        assert auth.login("user@example.com", "wrong") is False
        assert auth.is_authenticated() is False
        assert audit.events[-1].event_type == AuditEventType.LOGIN_FAILED

    def test_login_and_logout(self, auth_settings):
        audit = AuditLogger()
        storage = InMemoryStorage()
        auth = AuthService(storage, auth_settings, audit)

        assert auth.login("  user@example.com ", "password") is True
        assert auth.current_user().email == "user@example.com"
        assert storage.get_item(auth_settings.storage_key) is not None

        auth.logout()
        assert auth.is_authenticated() is False
        assert storage.get_item(auth_settings.storage_key) is None
        assert [e.event_type for e in audit.events] == [
            AuditEventType.USER_LOGGED_IN,
            AuditEventType.USER_LOGGED_OUT,
        ]

    def test_login_survives_restart(self, auth_settings, tmp_path):
        path = tmp_path / "local_storage.json"
        AuthService(JsonFileStorage(path), auth_settings).login("user@example.com", "password")
        assert AuthService(JsonFileStorage(path), auth_settings).is_authenticated()

    def test_garbage_value_means_logged_out(self, auth_settings):
        storage = InMemoryStorage({auth_settings.storage_key: "not json"})
        auth = AuthService(storage, auth_settings)
        assert auth.current_user() is None

    def test_corrupt_file_means_logged_out(self, auth_settings, tmp_path):
        path = tmp_path / "local_storage.json"
        path.write_text("{broken", encoding="utf-8")
        auth = AuthService(JsonFileStorage(path), auth_settings)
        assert auth.is_authenticated() is False
        # Logging out must not raise either
        auth.logout()
