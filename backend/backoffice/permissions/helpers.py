# Overview: Utility functions for permission lookups and validation.

from .definitions import PERMISSION_DEFINITIONS

def get_all_permission_names():
    """Get list of all seeded permission names."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]

def get_permissions_by_resource(resource):
    """Get all seeded permissions for a resource."""
    return [perm for perm in PERMISSION_DEFINITIONS if perm[2] == resource]


def validate_permission_name(name):
    """Check if a permission name is part of the seeded catalog."""
    return name in get_all_permission_names()
