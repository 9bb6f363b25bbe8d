# Overview: Service-layer operations for customers; encapsulates business logic and database work.

"""
Customer Lookup and Registration

Customers are keyed by phone number. Lookup falls back to historical
sales orders when no Customer row exists, synthesizing a read-only
Customer-shaped record from the best matching order.

AUDIT: register and update append Created / Updated entries to the audit
log in the same transaction as the change.
"""

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Customer, SalesOrder, WALK_IN_CUSTOMER_NAME
from ..validation import ConflictError, NotFoundError
from . import audit_service
from backoffice.time_utils import utcnow, to_utc_z


AUDIT_ENTITY = "Customer"
UNKNOWN_CUSTOMER_NAME = "Unknown Customer"

EDITABLE_FIELDS = ("full_name", "phone_number", "email", "address")


def _customer_from_order(order: SalesOrder) -> dict:
    """Customer-shaped view of a sales order's customer snapshot. Not persisted."""
    return {
        "id": None,
        "full_name": order.customer_name or UNKNOWN_CUSTOMER_NAME,
        "phone_number": order.customer_phone,
        "email": order.customer_email,
        "address": order.customer_address,
        "is_active": True,
        "created_at": to_utc_z(order.created_at),
        "updated_at": None,
        "source": "sales_order",
    }


def _has_real_name():
    """1 when the order carries an actual customer name, 0 for walk-in/blank."""
    name = func.trim(func.coalesce(SalesOrder.customer_name, ""))
    return case(
        (name == "", 0),
        (name == WALK_IN_CUSTOMER_NAME, 0),
        else_=1,
    )


def lookup_by_phone(phone_number: str) -> dict:
    """
    Resolve a customer by phone number.

    1. First active Customer row with that phone.
    2. Else the best SalesOrder with that phone: named customers before
       walk-in placeholders, then most recent first.

    Raises NotFoundError when neither source matches.
    """
    customer = db.session.query(Customer).filter(
        Customer.phone_number == phone_number,
        Customer.is_active.is_(True),
    ).first()
    if customer:
        return customer.to_dict()

    order = (
        db.session.query(SalesOrder)
        .filter(SalesOrder.customer_phone == phone_number)
        .order_by(_has_real_name().desc(), SalesOrder.created_at.desc(), SalesOrder.id.desc())
        .first()
    )
    if order:
        current_app.logger.info(
            "Customer lookup for %s resolved from sales order %s", phone_number, order.order_number
        )
        return _customer_from_order(order)

    raise NotFoundError("Customer not found")


def _phone_taken(phone_number: str, exclude_id: int | None = None) -> bool:
    query = db.session.query(Customer.id).filter(Customer.phone_number == phone_number)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    return query.first() is not None


def register_customer(*, patch: dict, actor_user_id: int | None) -> dict:
    """
    Create an active customer.

    Raises ConflictError if any customer (active or not) already has the
    phone number.
    """
    phone_number = patch["phone_number"]
    if _phone_taken(phone_number):
        current_app.logger.info("Customer registration rejected: phone %s already exists", phone_number)
        raise ConflictError("Customer with this phone number already exists")

    customer = Customer(
        full_name=patch["full_name"],
        phone_number=phone_number,
        email=patch.get("email"),
        address=patch.get("address"),
        is_active=True,
        created_at=utcnow(),
    )
    db.session.add(customer)

    try:
        db.session.flush()
        after = customer.to_dict()
        audit_service.log_change(
            entity=AUDIT_ENTITY,
            entity_id=customer.id,
            action="Created",
            before=None,
            after=after,
            actor_user_id=actor_user_id,
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Customer with this phone number already exists")

    return after


def get_customer(customer_id: int) -> dict:
    customer = db.session.query(Customer).filter(
        Customer.id == customer_id,
        Customer.is_active.is_(True),
    ).first()
    if not customer:
        raise NotFoundError("Customer not found")
    return customer.to_dict()


def list_customers() -> list[dict]:
    customers = (
        db.session.query(Customer)
        .filter(Customer.is_active.is_(True))
        .order_by(Customer.full_name.asc())
        .all()
    )
    return [c.to_dict() for c in customers]


def update_customer(*, customer_id: int, patch: dict, actor_user_id: int | None) -> dict:
    """
    Replace a customer's editable fields.

    Fields missing from patch are cleared (full-replace semantics).
    Raises NotFoundError for an unknown id (nothing is audited) and
    ConflictError if the new phone belongs to another customer.
    """
    customer = db.session.query(Customer).filter_by(id=customer_id).first()
    if not customer:
        raise NotFoundError("Customer not found")

    if patch["phone_number"] != customer.phone_number and _phone_taken(patch["phone_number"], exclude_id=customer.id):
        raise ConflictError("Customer with this phone number already exists")

    before = customer.to_dict()

    for field in EDITABLE_FIELDS:
        setattr(customer, field, patch.get(field))
    customer.updated_at = utcnow()

    try:
        db.session.flush()
        after = customer.to_dict()
        audit_service.log_change(
            entity=AUDIT_ENTITY,
            entity_id=customer.id,
            action="Updated",
            before=before,
            after=after,
            actor_user_id=actor_user_id,
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Customer with this phone number already exists")

    return after


def get_customer_history(customer_id: int) -> list[dict]:
    """Audit trail for a customer (active or not), oldest first."""
    exists = db.session.query(Customer.id).filter_by(id=customer_id).first()
    if not exists:
        raise NotFoundError("Customer not found")
    return [entry.to_dict() for entry in audit_service.list_entries(AUDIT_ENTITY, customer_id)]
