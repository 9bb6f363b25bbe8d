from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z, cents_to_units


WALK_IN_CUSTOMER_NAME = "Walk-in Customer"


class SalesOrder(db.Model):
    """
    Historical sales order header.

    Customer fields are a denormalized snapshot taken when the order was
    written. Counter sales without a known buyer carry the
    "Walk-in Customer" placeholder name.

    READ-ONLY here: this API only reads orders (customer lookup fallback).
    """
    __tablename__ = "sales_orders"
    __table_args__ = (
        db.Index("ix_sales_orders_phone_created", "customer_phone", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(64), nullable=False, unique=True)

    customer_name = db.Column(db.String(100), nullable=True)
    customer_phone = db.Column(db.String(20), nullable=True)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_address = db.Column(db.String(500), nullable=True)

    order_date = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    total_cents = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(16), nullable=False, default="Pending")  # Pending, Confirmed, Shipped, Delivered, Cancelled
    payment_status = db.Column(db.String(16), nullable=False, default="Pending")  # Pending, Paid, PartiallyPaid, Refunded

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "customer_email": self.customer_email,
            "customer_address": self.customer_address,
            "order_date": to_utc_z(self.order_date),
            "total_cents": self.total_cents,
            "total": cents_to_units(self.total_cents),
            "status": self.status,
            "payment_status": self.payment_status,
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at) if self.updated_at else None,
        }
