# Overview: Flask API routes for wishlist operations; parses input and returns JSON responses.

# backend/backoffice/routes/wishlist.py
"""
Wishlist routes for the signed-in user.

SECURITY: All routes require a valid session. Items are always scoped to
the caller; another user's item id behaves as not found.
"""
from functools import wraps

from flask import Blueprint, request, jsonify, current_app

from ..models import WishlistItem
from ..services import wishlist_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    parse_optional_int,
    ValidationError,
    ConflictError,
    NotFoundError,
)
from ..decorators import require_auth, current_user_id
from ..responses import error_response, internal_error

WISHLIST_POLICY = ModelValidationPolicy(
    writable_fields={"product_id", "product_variant_id"},
    required_on_create={"product_id"},
)

wishlist_bp = Blueprint("wishlist", __name__, url_prefix="/api/wishlist")


def _with_user_id(f):
    """Pass the caller's id as user_id; 401 when the request has no identity."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user_id = current_user_id()
        if user_id is None:
            return error_response("User not found", 401)
        return f(user_id, *args, **kwargs)
    return decorated_function


@wishlist_bp.get("")
@require_auth
@_with_user_id
def get_wishlist(user_id: int):
    """Caller's wishlist, newest first, with effective price and image."""
    try:
        return jsonify(wishlist_service.list_for_user(user_id)), 200
    except Exception as e:
        current_app.logger.exception("Failed to load wishlist")
        return internal_error("An error occurred while retrieving wishlist", e)


@wishlist_bp.post("")
@require_auth
@_with_user_id
def add_to_wishlist(user_id: int):
    """
    Add an item to the caller's wishlist.

    Request body:
    - product_id: int (required)
    - product_variant_id: int (optional)
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=WishlistItem, payload=payload, policy=WISHLIST_POLICY, partial=False)
    except ValidationError as e:
        return error_response(str(e), 400)

    try:
        item = wishlist_service.add_item(
            user_id=user_id,
            product_id=patch["product_id"],
            product_variant_id=patch.get("product_variant_id"),
        )
    except NotFoundError as e:
        return error_response(str(e), 404)
    except ConflictError as e:
        return error_response(str(e), 409)
    except Exception as e:
        current_app.logger.exception("Failed to add item to wishlist")
        return internal_error("An error occurred while adding item to wishlist", e)

    return jsonify(item), 200


@wishlist_bp.delete("/<int:item_id>")
@require_auth
@_with_user_id
def remove_from_wishlist(user_id: int, item_id: int):
    try:
        wishlist_service.remove_item(user_id=user_id, item_id=item_id)
    except NotFoundError as e:
        return error_response(str(e), 404)
    except Exception as e:
        current_app.logger.exception("Failed to remove item from wishlist")
        return internal_error("An error occurred while removing item from wishlist", e)

    return jsonify({"message": "Item removed from wishlist"}), 200


@wishlist_bp.get("/check")
@require_auth
@_with_user_id
def check_wishlist_item(user_id: int):
    """
    Is (productId, productVariantId) in the caller's wishlist?

    Query params:
    - productId: int (required)
    - productVariantId: int (optional; omitted means "no variant")
    """
    try:
        product_id = parse_optional_int(request.args.get("productId"), "productId")
        product_variant_id = parse_optional_int(request.args.get("productVariantId"), "productVariantId")
    except ValidationError as e:
        return error_response(str(e), 400)

    if product_id is None:
        return error_response("productId is required", 400)

    try:
        exists = wishlist_service.check_item(
            user_id=user_id,
            product_id=product_id,
            product_variant_id=product_variant_id,
        )
    except Exception as e:
        current_app.logger.exception("Failed to check wishlist item")
        return internal_error("An error occurred while checking wishlist item", e)

    return jsonify({"is_in_wishlist": exists}), 200
