"""
Demo Login

There are no real accounts. One fixed email/password pair (from
AuthSettings) unlocks the app, and the logged-in user is remembered under
a single key in local storage until logout.

DESIGN DECISION: A stored user that can't be read is treated as logged
out. It is logged, never raised: a corrupt flag must not lock the shop out.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from boutique_bill.audit import AuditLogger
from boutique_bill.config import AuthSettings, get_settings
from boutique_bill.models.invoice import AuthenticatedUser
from boutique_bill.services.storage import LocalStorageInterface, StorageError


logger = structlog.get_logger(__name__)


class AuthService:
    """Checks the demo credentials and keeps the logged-in flag."""

    def __init__(
        self,
        storage: LocalStorageInterface,
        settings: Optional[AuthSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().auth
        self._audit_logger = audit_logger

    def current_user(self) -> Optional[AuthenticatedUser]:
        """Restore the logged-in user, or None."""
        try:
            raw = self._storage.get_item(self._settings.storage_key)
        except StorageError as e:
            logger.error("stored_user_unreadable", error=str(e))
            return None

        if raw is None:
            return None

        try:
            return AuthenticatedUser.model_validate_json(raw)
        except ValidationError as e:
            logger.error("stored_user_invalid", error=str(e))
            return None

    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    def login(self, email: str, password: str) -> bool:
        """Returns True and remembers the user if the credentials match."""
        email = (email or "").strip()
        if email != self._settings.demo_email or password != self._settings.demo_password:
            if self._audit_logger:
                self._audit_logger.log_login_failed(email)
            return False

        user = AuthenticatedUser(email=email)
        self._storage.set_item(self._settings.storage_key, user.model_dump_json())
        if self._audit_logger:
            self._audit_logger.log_user_logged_in(email)
        return True

    def logout(self) -> None:
        user = self.current_user()
        try:
            self._storage.remove_item(self._settings.storage_key)
        except StorageError as e:
            logger.error("logout_storage_failed", error=str(e))
        if self._audit_logger:
            self._audit_logger.log_user_logged_out(user.email if user else None)
