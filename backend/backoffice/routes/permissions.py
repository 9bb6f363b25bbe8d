# Overview: Flask API routes for the permission catalog; parses input and returns JSON responses.

# backend/backoffice/routes/permissions.py
"""
Permission catalog routes.

SECURITY:
- Catalog reads require Admin or SuperAdmin
- /my-permissions only requires a valid session
"""
from flask import Blueprint, jsonify, current_app

from ..services import permission_service
from ..validation import NotFoundError
from ..decorators import require_auth, require_role, current_user_id
from ..permissions import ADMIN, SUPER_ADMIN
from ..responses import error_response, internal_error

permissions_bp = Blueprint("permissions", __name__, url_prefix="/api/permissions")


@permissions_bp.get("")
@require_auth
@require_role(ADMIN, SUPER_ADMIN)
def list_permissions():
    """All permissions ordered by resource, then action."""
    try:
        return jsonify(permission_service.list_permissions()), 200
    except Exception as e:
        current_app.logger.exception("Failed to list permissions")
        return internal_error("An error occurred while retrieving permissions", e)


@permissions_bp.get("/by-resource")
@require_auth
@require_role(ADMIN, SUPER_ADMIN)
def list_permissions_by_resource():
    """Permissions grouped as {resource: [permission, ...]}."""
    try:
        return jsonify(permission_service.list_permissions_by_resource()), 200
    except Exception as e:
        current_app.logger.exception("Failed to list permissions by resource")
        return internal_error("An error occurred while retrieving permissions by resource", e)


@permissions_bp.get("/my-permissions")
@require_auth
def my_permissions():
    """
    Effective permissions of the caller as {resource: [action, ...]}.

    SuperAdmin callers get the full resource/action ceiling.
    """
    user_id = current_user_id()
    if user_id is None:
        current_app.logger.warning("my-permissions called without a caller identity")
        return error_response("User not found", 401)

    try:
        return jsonify(permission_service.get_effective_permissions(user_id)), 200
    except Exception as e:
        current_app.logger.exception("Failed to resolve permissions for user %s", user_id)
        return internal_error("An error occurred while retrieving permissions", e)


@permissions_bp.get("/<int:permission_id>")
@require_auth
@require_role(ADMIN, SUPER_ADMIN)
def get_permission(permission_id: int):
    try:
        return jsonify(permission_service.get_permission(permission_id)), 200
    except NotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.exception("Failed to load permission %s", permission_id)
        return internal_error("An error occurred while retrieving the permission", e)
