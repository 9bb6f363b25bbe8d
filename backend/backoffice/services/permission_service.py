# Overview: Service-layer operations for permission; encapsulates business logic and database work.

"""
Permission Catalog and Effective-Permission Resolution

WHY: Permissions are static reference rows; roles link users to them.
The catalog endpoints list them, and get_effective_permissions() answers
"what may the caller do" for UI gating.

DESIGN PRINCIPLES:
- SuperAdmin short-circuits to a fixed capability ceiling (not the DB)
- Everyone else gets the union of their roles' permissions
- Seeding helpers are idempotent (safe to run on every deploy)
"""

from ..extensions import db
from ..models import UserRole, Role, RolePermission, Permission
from ..permissions import (
    PERMISSION_DEFINITIONS,
    SUPERADMIN_RESOURCES,
    ALL_ACTIONS,
    SUPER_ADMIN,
)
from ..validation import NotFoundError


def _ordered_permissions_query():
    return db.session.query(Permission).order_by(Permission.resource.asc(), Permission.action.asc())


def list_permissions() -> list[dict]:
    """All permission rows ordered by (resource, action)."""
    return [p.to_dict() for p in _ordered_permissions_query().all()]


def list_permissions_by_resource() -> dict[str, list[dict]]:
    """
    Same set as list_permissions(), grouped by resource.

    Group order and order within each group follow (resource, action).
    """
    grouped: dict[str, list[dict]] = {}
    for permission in _ordered_permissions_query().all():
        grouped.setdefault(permission.resource, []).append(permission.to_dict())
    return grouped


def get_permission(permission_id: int) -> dict:
    permission = db.session.query(Permission).filter_by(id=permission_id).first()
    if not permission:
        raise NotFoundError("Permission not found")
    return permission.to_dict()


def get_user_role_names(user_id: int) -> list[str]:
    """Get list of role names for a user."""
    rows = (
        db.session.query(Role.name)
        .join(UserRole, UserRole.role_id == Role.id)
        .filter(UserRole.user_id == user_id)
        .order_by(Role.name.asc())
        .all()
    )
    return [name for (name,) in rows]


def superadmin_permissions() -> dict[str, list[str]]:
    """The fixed SuperAdmin ceiling: every listed resource with every action."""
    return {resource: list(ALL_ACTIONS) for resource in SUPERADMIN_RESOURCES}


def get_effective_permissions(user_id: int) -> dict[str, list[str]]:
    """
    Resolve {resource: [action, ...]} for a user.

    SuperAdmin holders get superadmin_permissions() even when no
    RolePermission rows exist. Otherwise the union of all permissions
    reachable through the user's roles, deduplicated on (resource, action).
    """
    if SUPER_ADMIN in get_user_role_names(user_id):
        return superadmin_permissions()

    pairs = (
        db.session.query(Permission.resource, Permission.action)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .join(UserRole, UserRole.role_id == RolePermission.role_id)
        .filter(UserRole.user_id == user_id)
        .distinct()
        .order_by(Permission.resource.asc(), Permission.action.asc())
        .all()
    )

    grouped: dict[str, list[str]] = {}
    for resource, action in pairs:
        actions = grouped.setdefault(resource, [])
        if action not in actions:
            actions.append(action)
    return grouped


def user_has_permission(user_id: int, resource: str, action: str) -> bool:
    return action in get_effective_permissions(user_id).get(resource, [])


def initialize_permissions() -> int:
    """
    Create Permission rows for every entry in PERMISSION_DEFINITIONS.

    Idempotent: only missing (resource, action) pairs are added.
    """
    existing = {
        (resource, action)
        for resource, action in db.session.query(Permission.resource, Permission.action).all()
    }

    created_count = 0
    for name, description, resource, action in PERMISSION_DEFINITIONS:
        if (resource, action) in existing:
            continue
        db.session.add(Permission(
            name=name,
            description=description,
            resource=resource,
            action=action,
        ))
        created_count += 1

    db.session.commit()
    return created_count


def assign_superadmin_permissions() -> int:
    """
    Link every permission to the SuperAdmin role.

    Returns the number of links created (0 if the role doesn't exist).
    """
    role = db.session.query(Role).filter_by(name=SUPER_ADMIN).first()
    if not role:
        return 0

    linked = {
        permission_id
        for (permission_id,) in db.session.query(RolePermission.permission_id).filter_by(role_id=role.id).all()
    }

    created_count = 0
    for permission in db.session.query(Permission).all():
        if permission.id in linked:
            continue
        db.session.add(RolePermission(role_id=role.id, permission_id=permission.id))
        created_count += 1

    db.session.commit()
    return created_count


def _get_role_and_permission(role_name: str, permission_name: str) -> tuple[Role, Permission]:
    role = db.session.query(Role).filter_by(name=role_name).first()
    if not role:
        raise ValueError(f"Role '{role_name}' not found")

    permission = db.session.query(Permission).filter_by(name=permission_name).first()
    if not permission:
        raise ValueError(f"Permission '{permission_name}' not found")

    return role, permission


def grant_permission_to_role(role_name: str, permission_name: str) -> RolePermission:
    """Grant a permission to a role."""
    role, permission = _get_role_and_permission(role_name, permission_name)

    existing = db.session.query(RolePermission).filter_by(
        role_id=role.id,
        permission_id=permission.id
    ).first()

    if existing:
        return existing  # Already granted

    role_permission = RolePermission(role_id=role.id, permission_id=permission.id)
    db.session.add(role_permission)
    db.session.commit()

    return role_permission


def revoke_permission_from_role(role_name: str, permission_name: str) -> bool:
    """Revoke a permission from a role. Returns False if it wasn't granted."""
    role, permission = _get_role_and_permission(role_name, permission_name)

    role_permission = db.session.query(RolePermission).filter_by(
        role_id=role.id,
        permission_id=permission.id
    ).first()

    if role_permission:
        db.session.delete(role_permission)
        db.session.commit()
        return True

    return False
