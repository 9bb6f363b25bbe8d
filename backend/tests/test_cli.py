"""
CLI command tests (flask system / users / perms / maintenance).
"""

import pytest

from backoffice.models import User, Role, Permission, RolePermission
from backoffice.permissions import SEEDED_RESOURCES, ALL_ACTIONS

from conftest import PASSWORD


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


class TestSystemCommands:

    def test_init_is_idempotent(self, runner, db_session):
        first = runner.invoke(args=["system", "init"])
        second = runner.invoke(args=["system", "init"])

        assert first.exit_code == 0, first.output
        assert "PASS Created bootstrap user: admin@example.com" in first.output
        assert "PASS Using existing bootstrap user: admin@example.com" in second.output

        assert db_session.query(Role).count() == 3
        assert db_session.query(Permission).count() == len(SEEDED_RESOURCES) * len(ALL_ACTIONS)
        assert db_session.query(RolePermission).count() == len(SEEDED_RESOURCES) * len(ALL_ACTIONS)
        assert db_session.query(User).filter_by(email="admin@example.com").count() == 1

    def test_init_roles(self, runner, db_session):
        result = runner.invoke(args=["system", "init-roles"])

        assert result.exit_code == 0
        assert "Admin, Customer, SuperAdmin" in result.output

    def test_init_permissions_without_roles_links_nothing(self, runner, db_session):
        result = runner.invoke(args=["system", "init-permissions"])

        assert "PASS Created 40 new permissions" in result.output
        assert "PASS Created 0 new SuperAdmin role-permission links" in result.output


class TestUserCommands:

    def test_create_and_list(self, runner, seed):
        created = runner.invoke(args=[
            "users", "create",
            "--email", "ops@shop.test",
            "--full-name", "Ops Person",
            "--password", PASSWORD,
            "--role", "Admin",
        ])
        listed = runner.invoke(args=["users", "list"])

        assert "PASS Created user: ops@shop.test with role 'Admin'" in created.output
        assert "ops@shop.test" in listed.output
        assert "Admin" in listed.output

    def test_create_rejects_weak_password(self, runner, seed, db_session):
        result = runner.invoke(args=[
            "users", "create",
            "--email", "weak@shop.test",
            "--full-name", "Weak",
            "--password", "weak",
            "--role", "Customer",
        ])

        assert "FAIL Password validation failed" in result.output
        assert db_session.query(User).count() == 0

    def test_list_empty(self, runner, db_session):
        assert "No users found." in runner.invoke(args=["users", "list"]).output


class TestPermissionCommands:

    def test_grant_check_revoke(self, runner, admin_user):
        denied = runner.invoke(args=["perms", "check", admin_user.email, "Products", "Read"])
        granted = runner.invoke(args=["perms", "grant", "Admin", "Products.Read"])
        allowed = runner.invoke(args=["perms", "check", admin_user.email, "Products", "Read"])
        revoked = runner.invoke(args=["perms", "revoke", "Admin", "Products.Read"])

        assert "DOES NOT HAVE" in denied.output
        assert "PASS Granted 'Products.Read' to role 'Admin'" in granted.output
        assert "HAS permission 'Products.Read'" in allowed.output
        assert "PASS Revoked 'Products.Read' from role 'Admin'" in revoked.output

    def test_grant_unknown_permission(self, runner, seed):
        result = runner.invoke(args=["perms", "grant", "Admin", "Spaceships.Fly"])

        assert "WARN  'Spaceships.Fly' is not part of the seeded catalog" in result.output
        assert "FAIL Error: Permission 'Spaceships.Fly' not found" in result.output

    def test_list_by_resource(self, runner, seed):
        result = runner.invoke(args=["perms", "list", "--resource", "Products"])

        assert "RESOURCE Products" in result.output
        assert "Total: 4 permissions" in result.output

    def test_list_by_role(self, runner, seed):
        result = runner.invoke(args=["perms", "list", "--role", "SuperAdmin"])

        assert "Total: 40 permissions" in result.output

    def test_check_unknown_user(self, runner, seed):
        result = runner.invoke(args=["perms", "check", "ghost@shop.test", "Products", "Read"])
        assert "FAIL User 'ghost@shop.test' not found" in result.output


class TestMaintenanceCommands:

    def test_cleanup_sessions(self, runner, db_session):
        result = runner.invoke(args=["maintenance", "cleanup-sessions", "--retention-days", "7"])

        assert result.exit_code == 0
        assert "Deleted 0 sessions older than 7 days." in result.output
