# Overview: Request authentication and role decorators for API routes.

from dataclasses import dataclass, field
from functools import wraps

from flask import request, jsonify, g

from .services import session_service, permission_service


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller for the current request.

    Routes read identity from here instead of from the token or the
    session row, so the auth mechanism can change without touching them.
    """
    user_id: int
    email: str
    roles: frozenset = field(default_factory=frozenset)

    def has_any_role(self, *names: str) -> bool:
        return any(name in self.roles for name in names)


def current_principal() -> Principal | None:
    return getattr(g, "principal", None)


def current_user_id() -> int | None:
    """Caller's user id, or None when the request is anonymous."""
    principal = current_principal()
    return principal.user_id if principal else None


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def require_auth(f):
    """
    Require a valid bearer session token.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.principal: Principal(user_id, email, roles)
    - g.session_context: The full SessionContext object

    Returns 401 if:
    - No Authorization header
    - Invalid, expired or revoked token
    - User account deactivated
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        context = session_service.validate_session(token)
        if not context:
            return jsonify({"error": "Invalid or expired token"}), 401

        roles = permission_service.get_user_role_names(context.user.id)

        g.current_user = context.user
        g.principal = Principal(
            user_id=context.user.id,
            email=context.user.email,
            roles=frozenset(roles),
        )
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_role(*role_names: str):
    """
    Require the caller to hold at least one of the named roles.

    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            principal = current_principal()
            if principal is None:
                return jsonify({"error": "Authentication required"}), 401

            if not principal.has_any_role(*role_names):
                return jsonify({
                    "error": "Permission denied",
                    "required_roles": list(role_names),
                    "message": f"Requires any of roles: {', '.join(role_names)}"
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
