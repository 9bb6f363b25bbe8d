# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/backoffice/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init
#   Idempotent bootstrap: tables, roles, permission catalog, SuperAdmin links, bootstrap SuperAdmin user.
# - python -m flask system init-roles
#   Create built-in roles only (SuperAdmin, Admin, Customer).
# - python -m flask system init-permissions
#   Seed the permission catalog and link it to SuperAdmin.
#
# Users:
# - python -m flask users create --email a@b.c --full-name "A B" --password "Password123!" --role Admin
# - python -m flask users list
#
# Permissions:
# - python -m flask perms list [--resource Products] [--role Admin]
# - python -m flask perms grant Admin Products.Read
# - python -m flask perms revoke Admin Products.Read
# - python -m flask perms check admin@example.com Products Read
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import User, Role, RolePermission, Permission
from .permissions import DEFAULT_ROLES, SUPER_ADMIN, get_permissions_by_resource, validate_permission_name
from .services.auth_service import create_user, create_default_roles, assign_role, PasswordValidationError
from .services import permission_service
from .services import session_service


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the back office: schema, roles, permissions, bootstrap SuperAdmin.

    SECURITY: Change the bootstrap password immediately in production!
    """
    click.echo("START Initializing back office...")

    db.create_all()

    created_roles = create_default_roles()
    click.echo(f"PASS Roles ready ({created_roles} created): {', '.join(DEFAULT_ROLES)}")

    perm_count = permission_service.initialize_permissions()
    link_count = permission_service.assign_superadmin_permissions()
    click.echo(f"PASS Created {perm_count} permissions, {link_count} SuperAdmin links")

    email = current_app.config["BOOTSTRAP_ADMIN_EMAIL"]
    user = db.session.query(User).filter_by(email=email).first()
    if not user:
        try:
            user = create_user(
                email=email,
                full_name="System Administrator",
                password=current_app.config["BOOTSTRAP_ADMIN_PASSWORD"],
            )
        except PasswordValidationError as e:
            click.echo(f"FAIL Bootstrap password rejected: {str(e)}")
            return
        click.echo(f"PASS Created bootstrap user: {email}")
    else:
        click.echo(f"PASS Using existing bootstrap user: {email}")

    assign_role(user.id, SUPER_ADMIN)
    click.echo(f"PASS {email} holds role {SUPER_ADMIN}")


@system_group.command('init-roles')
@with_appcontext
def init_roles():
    """Create built-in roles (SuperAdmin, Admin, Customer)."""
    created = create_default_roles()
    roles = db.session.query(Role).order_by(Role.name).all()
    click.echo(f"PASS Created {created} roles. Roles: {', '.join(r.name for r in roles)}")


@system_group.command('init-permissions')
@with_appcontext
def init_permissions():
    """
    Seed the permission catalog.

    Adds any missing Resource.Action permissions and links all of them to
    SuperAdmin. Safe to run multiple times (idempotent).
    """
    perm_count = permission_service.initialize_permissions()
    click.echo(f"PASS Created {perm_count} new permissions")

    total_perms = db.session.query(Permission).count()
    click.echo(f"   Total permissions in system: {total_perms}")

    link_count = permission_service.assign_superadmin_permissions()
    click.echo(f"PASS Created {link_count} new SuperAdmin role-permission links")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address (login)')
@click.option('--full-name', prompt=True, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(DEFAULT_ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(email, full_name, password, role):
    """
    Create a new user.

    Password must meet strength requirements:
    8+ chars, uppercase, lowercase, digit, special char.
    """
    try:
        user = create_user(email=email, full_name=full_name, password=password)
        assign_role(user.id, role)
        click.echo(f"PASS Created user: {user.email} with role '{role}'")
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
    except ValueError as e:
        click.echo(f"FAIL Failed to create user: {str(e)}")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Email':<35} {'Name':<25} {'Active':<8} {'Roles'}")
    click.echo("="*90)

    for user in users:
        role_names = permission_service.get_user_role_names(user.id)
        roles_str = ", ".join(role_names) if role_names else "none"
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.email:<35} {user.full_name:<25} {active_str:<8} {roles_str}")

    click.echo("="*90 + "\n")


@click.group('perms')
def perms_group():
    """Permission inspection and repair commands."""


@perms_group.command('list')
@click.option('--role', help='Filter by role name')
@click.option('--resource', help='Filter by resource')
@with_appcontext
def list_permissions_cli(role, resource):
    """List permissions, optionally filtered by role or resource."""
    query = db.session.query(Permission)

    if role:
        role_obj = db.session.query(Role).filter_by(name=role).first()
        if not role_obj:
            click.echo(f"FAIL Role '{role}' not found")
            return
        query = query.join(RolePermission, RolePermission.permission_id == Permission.id).filter(
            RolePermission.role_id == role_obj.id
        )

    if resource:
        if not get_permissions_by_resource(resource):
            click.echo(f"WARN  '{resource}' is not a seeded resource")
        query = query.filter(Permission.resource == resource)

    perms = query.order_by(Permission.resource, Permission.action).all()

    current_resource = None
    for perm in perms:
        if perm.resource != current_resource:
            click.echo(f"RESOURCE {perm.resource}")
            current_resource = perm.resource
        click.echo(f"  {perm.name:<28} {perm.description or ''}")

    click.echo(f"\n Total: {len(perms)} permissions\n")


@perms_group.command('grant')
@click.argument('role_name')
@click.argument('permission_name')
@with_appcontext
def grant_permission_cli(role_name, permission_name):
    """Grant a permission (e.g. Products.Read) to a role."""
    if not validate_permission_name(permission_name):
        click.echo(f"WARN  '{permission_name}' is not part of the seeded catalog")
    try:
        permission_service.grant_permission_to_role(role_name, permission_name)
        click.echo(f"PASS Granted '{permission_name}' to role '{role_name}'")
    except ValueError as e:
        click.echo(f"FAIL Error: {str(e)}")


@perms_group.command('revoke')
@click.argument('role_name')
@click.argument('permission_name')
@with_appcontext
def revoke_permission_cli(role_name, permission_name):
    """Revoke a permission from a role."""
    try:
        revoked = permission_service.revoke_permission_from_role(role_name, permission_name)
        if revoked:
            click.echo(f"PASS Revoked '{permission_name}' from role '{role_name}'")
        else:
            click.echo(f"WARN  Permission '{permission_name}' was not granted to '{role_name}'")
    except ValueError as e:
        click.echo(f"FAIL Error: {str(e)}")


@perms_group.command('check')
@click.argument('email')
@click.argument('resource')
@click.argument('action')
@with_appcontext
def check_permission_cli(email, resource, action):
    """Check if a user may perform ACTION on RESOURCE."""
    user = db.session.query(User).filter_by(email=email.strip().lower()).first()

    if not user:
        click.echo(f"FAIL User '{email}' not found")
        return

    if permission_service.user_has_permission(user.id, resource, action):
        click.echo(f"PASS User '{email}' HAS permission '{resource}.{action}'")
    else:
        click.echo(f"FAIL User '{email}' DOES NOT HAVE permission '{resource}.{action}'")

    roles = permission_service.get_user_role_names(user.id)
    click.echo(f"\nUser roles: {', '.join(roles) or 'none'}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """Delete expired or revoked sessions older than the retention window."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} sessions older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(perms_group)
    app.cli.add_command(maintenance_group)
