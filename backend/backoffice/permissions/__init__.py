# Overview: Permission catalog package.
# Re-exports the resource/action matrix, role names, and lookup helpers.

from .categories import PermissionAction, ALL_ACTIONS, SEEDED_RESOURCES, SUPERADMIN_RESOURCES
from .definitions import PERMISSION_DEFINITIONS, permission_name
from .roles import SUPER_ADMIN, ADMIN, CUSTOMER, DEFAULT_ROLES
from .helpers import (
    get_all_permission_names,
    get_permissions_by_resource,
    validate_permission_name,
)

__all__ = [
    "PermissionAction",
    "ALL_ACTIONS",
    "SEEDED_RESOURCES",
    "SUPERADMIN_RESOURCES",
    "PERMISSION_DEFINITIONS",
    "permission_name",
    "SUPER_ADMIN",
    "ADMIN",
    "CUSTOMER",
    "DEFAULT_ROLES",
    "get_all_permission_names",
    "get_permissions_by_resource",
    "validate_permission_name",
]
