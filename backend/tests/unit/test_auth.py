"""Unit tests for the current-user context and the typed errors."""

import pytest

from xerus_bridge.auth import AuthContext
from xerus_bridge.errors import BackendAPIError, MigrationError, NotAuthenticatedError


@pytest.mark.unit
class TestAuthContext:
    def test_signed_out_by_default(self):
        auth = AuthContext()
        assert auth.is_authenticated is False
        with pytest.raises(NotAuthenticatedError):
            auth.get_current_user_id()

    def test_sign_in_and_out(self):
        auth = AuthContext()
        auth.sign_in("u-1", email="a@b.c")
        assert auth.get_current_user_id() == "u-1"
        assert auth.get_current_user() == {"uid": "u-1", "email": "a@b.c"}

        auth.sign_out()
        with pytest.raises(NotAuthenticatedError):
            auth.get_current_user()

    def test_empty_user_id_rejected(self):
        with pytest.raises(ValueError):
            AuthContext().sign_in("")

    def test_profile_is_a_copy(self):
        auth = AuthContext()
        auth.sign_in("u-1")
        auth.get_current_user()["uid"] = "someone-else"
        assert auth.get_current_user_id() == "u-1"


@pytest.mark.unit
class TestErrors:
    def test_migration_error_describe(self):
        error = MigrationError("Migration failed: 004", code="42601", hint="check syntax")
        assert error.describe() == [
            "[ERROR] Migration failed: 004",
            "  code: 42601",
            "  hint: check syntax",
        ]

    def test_backend_api_error_message(self):
        error = BackendAPIError(0, "ConnectError")
        assert str(error) == "Backend API error: 0 ConnectError"
        assert BackendAPIError(502).args[0] == "Backend API error: 502"
