# backend/backoffice/routes/system.py
"""
System health and version endpoints.

Health checks cover the database and the auth reference data (built-in
roles and the permission catalog).
"""

import sys
import time
from flask import Blueprint, current_app

from ..extensions import db
from ..models import User, Role, Permission, SessionToken, Customer
from ..permissions import DEFAULT_ROLES
from backoffice.time_utils import utcnow, to_utc_z

API_VERSION = "1.0.0"

system_bp = Blueprint("system", __name__)


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 2)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "users": db.session.query(User).count(),
            "customers": db.session.query(Customer).count(),
            "active_sessions": db.session.query(SessionToken).filter_by(is_revoked=False).count(),
        }
        return {
            "status": "healthy",
            "latency_ms": _elapsed_ms(start_time),
            "details": details,
        }
    except Exception:
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": _elapsed_ms(start_time),
            "error": "Database error"
        }


def check_auth_reference_data() -> dict:
    """
    Verify the built-in roles and permission catalog are seeded.

    Missing seed data is "degraded": the API works, but nobody can be
    granted access until `flask system init` runs.
    """
    start_time = time.time()
    try:
        existing = {name for (name,) in db.session.query(Role.name).all()}
        missing_roles = sorted(set(DEFAULT_ROLES) - existing)
        permission_count = db.session.query(Permission).count()

        result = {
            "status": "healthy",
            "latency_ms": _elapsed_ms(start_time),
            "details": {
                "permissions_initialized": permission_count > 0,
                "permission_count": permission_count,
            }
        }
        if missing_roles or permission_count == 0:
            result["status"] = "degraded"
            if missing_roles:
                result["warning"] = f"Missing roles: {', '.join(missing_roles)}"
            else:
                result["warning"] = "Permission catalog is empty"
        return result
    except Exception:
        current_app.logger.exception("Auth reference data check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": _elapsed_ms(start_time),
            "error": "Auth reference data error"
        }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: healthy or degraded
    - 503: one or more checks unhealthy
    """
    start_time = time.time()

    checks = {
        "database": check_database_health(),
        "auth_reference_data": check_auth_reference_data(),
    }
    statuses = [check["status"] for check in checks.values()]

    if "unhealthy" in statuses:
        overall_status, http_status = "unhealthy", 503
    elif "degraded" in statuses:
        overall_status, http_status = "degraded", 200
    else:
        overall_status, http_status = "healthy", 200

    return {
        "status": overall_status,
        "timestamp": to_utc_z(utcnow()),
        "total_latency_ms": _elapsed_ms(start_time),
        "checks": checks,
    }, http_status


@system_bp.get("/api/version")
def version():
    """Non-sensitive deployment info."""
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": API_VERSION,
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }
