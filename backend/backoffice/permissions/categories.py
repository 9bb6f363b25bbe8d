# Overview: Resource and action constants for the permission catalog.


class PermissionAction:
    """Actions that can be granted on a resource."""
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    READ = "Read"


ALL_ACTIONS = (
    PermissionAction.CREATE,
    PermissionAction.UPDATE,
    PermissionAction.DELETE,
    PermissionAction.READ,
)


# Resources seeded into the permissions table.
SEEDED_RESOURCES = (
    "Products",
    "Categories",
    "Users",
    "Roles",
    "Inventory",
    "Orders",
    "Sales",
    "Warehouses",
    "Reports",
    "PromoCodes",
)

# Fixed capability ceiling reported for SuperAdmin by
# permission_service.get_effective_permissions(). Static on purpose:
# it is not derived from the permissions table.
SUPERADMIN_RESOURCES = (
    "Products",
    "Categories",
    "Users",
    "Roles",
    "Inventory",
    "Orders",
    "Warehouses",
    "Reports",
)
