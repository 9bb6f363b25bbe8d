# Overview: Flask API routes for customer operations; parses input and returns JSON responses.

# backend/backoffice/routes/customers.py
"""
Customer lookup and registration routes.

SECURITY: All routes require authentication and the Admin role.
Mutations are attributed to the caller in the audit log.
"""
from flask import Blueprint, request, jsonify, current_app, url_for

from ..responses import error_response, internal_error
from ..models import Customer
from ..services import customer_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth, require_role, current_user_id
from ..permissions import ADMIN

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"full_name", "phone_number", "email", "address"},
    required_on_create={"full_name", "phone_number"},
)

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customer")


@customers_bp.get("/lookup/<phone_number>")
@require_auth
@require_role(ADMIN)
def lookup_customer(phone_number: str):
    """
    Find a customer by phone number.

    Falls back to historical sales orders when no customer record exists;
    such results have "id": null and "source": "sales_order".
    """
    try:
        return jsonify(customer_service.lookup_by_phone(phone_number)), 200
    except NotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.exception("Failed to look up customer")
        return internal_error("Error looking up customer", e)


@customers_bp.post("/register")
@require_auth
@require_role(ADMIN)
def register_customer():
    """
    Register a new customer.

    Request body:
    - full_name: str (required)
    - phone_number: str (required, unique)
    - email: str (optional)
    - address: str (optional)
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    except ValidationError as e:
        return error_response(str(e), 400)

    try:
        created = customer_service.register_customer(patch=patch, actor_user_id=current_user_id())
    except ConflictError as e:
        return error_response(str(e), 409)
    except Exception as e:
        current_app.logger.exception("Failed to register customer")
        return internal_error("Error registering customer", e)

    response = jsonify(created)
    response.status_code = 201
    response.headers["Location"] = url_for("customers.get_customer", customer_id=created["id"])
    return response


@customers_bp.get("/<int:customer_id>")
@require_auth
@require_role(ADMIN)
def get_customer(customer_id: int):
    """Get an active customer by ID."""
    try:
        return jsonify(customer_service.get_customer(customer_id)), 200
    except NotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.exception("Failed to load customer")
        return internal_error("Error retrieving customer", e)


@customers_bp.get("")
@require_auth
@require_role(ADMIN)
def list_customers():
    """List active customers ordered by full name."""
    try:
        return jsonify(customer_service.list_customers()), 200
    except Exception as e:
        current_app.logger.exception("Failed to list customers")
        return internal_error("Error retrieving customers", e)


@customers_bp.put("/<int:customer_id>")
@require_auth
@require_role(ADMIN)
def update_customer(customer_id: int):
    """
    Replace a customer's details.

    Same body as /register. Omitted optional fields are cleared.
    Returns 204 on success.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    except ValidationError as e:
        return error_response(str(e), 400)

    try:
        customer_service.update_customer(
            customer_id=customer_id,
            patch=patch,
            actor_user_id=current_user_id(),
        )
    except NotFoundError as e:
        return error_response(str(e), 404)
    except ConflictError as e:
        return error_response(str(e), 409)
    except Exception as e:
        current_app.logger.exception("Failed to update customer")
        return internal_error("Error updating customer", e)

    return "", 204


@customers_bp.get("/<int:customer_id>/history")
@require_auth
@require_role(ADMIN)
def customer_history(customer_id: int):
    """Audit trail (Created / Updated entries) for a customer."""
    try:
        entries = customer_service.get_customer_history(customer_id)
    except NotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.exception("Failed to load customer history")
        return internal_error("Error retrieving customer history", e)

    return jsonify({"entries": entries, "count": len(entries)}), 200
