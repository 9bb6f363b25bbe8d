"""
Authentication and session tests.

Verifies:
- Login issues a bearer token usable on protected routes
- Logout, idle timeout and deactivation invalidate the token
- Password strength rules
"""

from datetime import timedelta

import pytest

from backoffice.models import SessionToken, User
from backoffice.services import session_service
from backoffice.services.auth_service import (
    PasswordValidationError,
    validate_password_strength,
    verify_password,
    create_user,
)
from backoffice.time_utils import utcnow

from conftest import PASSWORD, auth_headers


class TestLogin:

    def test_login_returns_token_and_roles(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": "ADMIN@shop.test ", "password": PASSWORD})

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["user"]["email"] == "admin@shop.test"
        assert data["roles"] == ["Admin"]
        assert len(data["token"]) == 64

        me = client.get("/api/auth/me", headers=auth_headers(data["token"]))
        assert me.status_code == 200
        assert me.get_json()["user"]["id"] == admin_user.id

    def test_wrong_password(self, client, admin_user):
        resp = client.post("/api/auth/login", json={"email": admin_user.email, "password": "Wrong123!"})

        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid credentials"}

    def test_inactive_user_cannot_login(self, client, admin_user, db_session):
        admin_user.is_active = False
        db_session.commit()

        resp = client.post("/api/auth/login", json={"email": admin_user.email, "password": PASSWORD})

        assert resp.status_code == 401

    @pytest.mark.parametrize("payload", [{}, {"email": "a@b.c"}, {"password": PASSWORD}])
    def test_missing_fields(self, client, db_session, payload):
        resp = client.post("/api/auth/login", json=payload)
        assert resp.status_code == 400


class TestSession:

    def test_me_reports_superadmin_ceiling(self, client, superadmin_headers):
        data = client.get("/api/auth/me", headers=superadmin_headers).get_json()

        assert data["roles"] == ["SuperAdmin"]
        assert len(data["permissions"]) == 8

    def test_logout_revokes_token(self, client, admin_headers):
        assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200

        resp = client.get("/api/auth/me", headers=admin_headers)
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid or expired token"}

    def test_logout_without_token(self, client, db_session):
        assert client.post("/api/auth/logout").status_code == 401

    def test_idle_timeout(self, client, admin_user, db_session):
        _, token = session_service.create_session(user_id=admin_user.id)
        session = db_session.query(SessionToken).filter_by(user_id=admin_user.id).one()
        session.last_used_at = utcnow() - timedelta(hours=3)
        db_session.commit()

        assert client.get("/api/auth/me", headers=auth_headers(token)).status_code == 401

        db_session.expire_all()
        session = db_session.query(SessionToken).filter_by(user_id=admin_user.id).one()
        assert session.is_revoked is True
        assert session.revoked_reason == "Idle timeout"

    def test_deactivated_user_token_rejected(self, client, admin_user, admin_headers, db_session):
        admin_user.is_active = False
        db_session.commit()

        assert client.get("/api/auth/me", headers=admin_headers).status_code == 401

    def test_cleanup_expired_sessions(self, admin_user, db_session):
        session, _ = session_service.create_session(user_id=admin_user.id)
        session.created_at = utcnow() - timedelta(days=40)
        session.expires_at = utcnow() - timedelta(days=39)
        db_session.commit()

        assert session_service.cleanup_expired_sessions(retention_days=30) == 1
        assert db_session.query(SessionToken).count() == 0


class TestPasswords:

    @pytest.mark.parametrize(
        "password",
        ["Short1!", "alllower123!", "ALLUPPER123!", "NoDigits!!", "NoSpecial123"],
    )
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(PasswordValidationError):
            validate_password_strength(password)

    def test_strong_password_accepted(self):
        validate_password_strength(PASSWORD)

    def test_create_user_normalizes_email_and_rejects_duplicates(self, db_session):
        user = create_user(email="  New.User@Example.COM ", full_name="New User", password=PASSWORD)

        assert user.email == "new.user@example.com"
        assert verify_password(PASSWORD, user.password_hash)
        assert not verify_password("Other123!", user.password_hash)

        with pytest.raises(ValueError):
            create_user(email="new.user@example.com", full_name="Dup", password=PASSWORD)
        assert db_session.query(User).count() == 1

    def test_malformed_hash_does_not_raise(self):
        assert verify_password(PASSWORD, "not-a-bcrypt-hash") is False
