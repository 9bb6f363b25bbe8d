# Overview: Service-layer operations for wishlists; encapsulates business logic and database work.

"""
Per-user wishlist of (product, optional variant) references.

PRICING: the displayed price/image prefer the variant's overrides when
present (price: not null; image: not empty), else the product's values.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import WishlistItem, Product, ProductVariant
from ..validation import ConflictError, NotFoundError
from backoffice.time_utils import utcnow, to_utc_z, cents_to_units


UNKNOWN_PRODUCT_NAME = "Unknown Product"


def effective_price_cents(product: Product | None, variant: ProductVariant | None) -> int | None:
    if variant is not None and variant.price_override_cents is not None:
        return variant.price_override_cents
    return product.price_cents if product is not None else None


def effective_image_url(product: Product | None, variant: ProductVariant | None) -> str | None:
    if variant is not None and variant.image_url:
        return variant.image_url
    return product.image_url if product is not None else None


def serialize_item(item: WishlistItem) -> dict:
    # product can be missing when the row outlived it (no FK enforcement on SQLite)
    product = item.product
    variant = item.product_variant
    price_cents = effective_price_cents(product, variant)
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": (product.name if product is not None else None) or UNKNOWN_PRODUCT_NAME,
        "product_sku": product.sku if product is not None else None,
        "product_price_cents": price_cents,
        "product_price": cents_to_units(price_cents),
        "product_image_url": effective_image_url(product, variant),
        "product_variant_id": item.product_variant_id,
        "variant_attributes": variant.attributes if variant is not None else None,
        "created_at": to_utc_z(item.created_at),
    }


def _tuple_filter(query, user_id: int, product_id: int, product_variant_id: int | None):
    query = query.filter(
        WishlistItem.user_id == user_id,
        WishlistItem.product_id == product_id,
    )
    if product_variant_id is None:
        return query.filter(WishlistItem.product_variant_id.is_(None))
    return query.filter(WishlistItem.product_variant_id == product_variant_id)


def list_for_user(user_id: int) -> list[dict]:
    items = (
        db.session.query(WishlistItem)
        .options(joinedload(WishlistItem.product), joinedload(WishlistItem.product_variant))
        .filter(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .all()
    )
    return [serialize_item(item) for item in items]


def add_item(*, user_id: int, product_id: int, product_variant_id: int | None = None) -> dict:
    """
    Add (product, variant) to the user's wishlist.

    Raises NotFoundError for an unknown product, or a variant id that does
    not belong to the product. Raises ConflictError if the exact tuple is
    already saved.
    """
    product = db.session.query(Product).filter_by(id=product_id).first()
    if not product:
        raise NotFoundError("Product not found")

    if product_variant_id is not None:
        variant = db.session.query(ProductVariant).filter_by(
            id=product_variant_id,
            product_id=product_id,
        ).first()
        if not variant:
            raise NotFoundError("Product variant not found")

    existing = _tuple_filter(db.session.query(WishlistItem.id), user_id, product_id, product_variant_id).first()
    if existing:
        raise ConflictError("Item already exists in wishlist")

    item = WishlistItem(
        user_id=user_id,
        product_id=product_id,
        product_variant_id=product_variant_id,
        created_at=utcnow(),
    )
    db.session.add(item)

    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent insert of the same tuple won the race.
        db.session.rollback()
        current_app.logger.warning(
            "Wishlist unique constraint hit for user %s product %s variant %s",
            user_id, product_id, product_variant_id,
        )
        raise ConflictError("Item already exists in wishlist")

    # Reload with related product/variant for the response
    db.session.refresh(item)
    return serialize_item(item)


def remove_item(*, user_id: int, item_id: int) -> None:
    item = db.session.query(WishlistItem).filter_by(id=item_id, user_id=user_id).first()
    if not item:
        raise NotFoundError("Wishlist item not found")

    db.session.delete(item)
    db.session.commit()


def check_item(*, user_id: int, product_id: int, product_variant_id: int | None = None) -> bool:
    query = _tuple_filter(db.session.query(WishlistItem.id), user_id, product_id, product_variant_id)
    return query.first() is not None
