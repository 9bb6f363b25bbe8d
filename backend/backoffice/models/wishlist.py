from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z


class WishlistItem(db.Model):
    """
    A saved (user, product, optional variant) reference.

    UNIQUENESS: one row per exact (user, product, variant) tuple.
    A plain unique constraint does not cover product_variant_id IS NULL
    (NULLs never compare equal), so the no-variant case gets its own
    partial unique index.
    """
    __tablename__ = "wishlists"
    __table_args__ = (
        db.UniqueConstraint("user_id", "product_id", "product_variant_id", name="uq_wishlists_user_product_variant"),
        db.Index(
            "uq_wishlists_user_product_no_variant",
            "user_id",
            "product_id",
            unique=True,
            sqlite_where=db.text("product_variant_id IS NULL"),
            postgresql_where=db.text("product_variant_id IS NULL"),
        ),
        db.Index("ix_wishlists_user_created", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    product_variant_id = db.Column(db.Integer, db.ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship("User", backref=db.backref("wishlist_items", lazy=True))
    product = db.relationship("Product")
    product_variant = db.relationship("ProductVariant")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "product_variant_id": self.product_variant_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at) if self.updated_at else None,
        }
