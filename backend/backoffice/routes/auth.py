# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/backoffice/routes/auth.py
"""
Authentication API routes

- POST /login issues an opaque bearer session token
- POST /logout revokes it
- GET /me returns the caller, their roles, and effective permissions
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..services import permission_service
from ..decorators import require_auth, bearer_token
from ..responses import error_response, internal_error


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Request body:
    - email: str
    - password: str

    Token must be sent as "Authorization: Bearer <token>" on protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not email or not password:
            return error_response("email and password required", 400)

        user = auth_service.authenticate(email, password)
        if not user:
            return error_response("Invalid credentials", 401)

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )

        return jsonify({
            "user": user.to_dict(),
            "roles": permission_service.get_user_role_names(user.id),
            "token": token,
            "session": session.to_dict(),
            "message": "Login successful"
        }), 200

    except Exception as e:
        current_app.logger.exception("Failed to login user")
        return internal_error("Internal server error", e)


@auth_bp.post("/logout")
def logout_route():
    """Revoke the bearer token sent in the Authorization header."""
    try:
        token = bearer_token()
        if not token:
            return error_response("Authorization header required", 401)

        if not session_service.revoke_session(token, reason="User logout"):
            return error_response("Invalid or expired token", 401)

        return jsonify({"message": "Logout successful"}), 200

    except Exception as e:
        current_app.logger.exception("Failed to logout user")
        return internal_error("Internal server error", e)


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user with roles and effective permissions (for UI gating)."""
    try:
        principal = g.principal
        return jsonify({
            "user": g.current_user.to_dict(),
            "roles": sorted(principal.roles),
            "permissions": permission_service.get_effective_permissions(principal.user_id),
        }), 200

    except Exception as e:
        current_app.logger.exception("Failed to load current user")
        return internal_error("Internal server error", e)
