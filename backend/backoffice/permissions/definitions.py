# Overview: Permission definitions derived from the resource/action matrix.
# Each permission is defined as: (name, description, resource, action)

from .categories import SEEDED_RESOURCES, ALL_ACTIONS


def permission_name(resource: str, action: str) -> str:
    return f"{resource}.{action}"


def _build_definitions():
    definitions = []
    for resource in SEEDED_RESOURCES:
        for action in ALL_ACTIONS:
            definitions.append((
                permission_name(resource, action),
                f"Permission to {action.lower()} {resource.lower()}",
                resource,
                action,
            ))
    return definitions


PERMISSION_DEFINITIONS = _build_definitions()
