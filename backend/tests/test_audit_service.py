"""
Audit sink tests.

Entries ride in the caller's transaction: a rollback discards them.
"""

import json

from backoffice.models import AuditLog
from backoffice.services import audit_service, customer_service


def test_anonymous_actor_is_stored_as_null(db_session):
    created = customer_service.register_customer(
        patch={"full_name": "Walk Up", "phone_number": "0755555555"},
        actor_user_id=None,
    )

    entry = db_session.query(AuditLog).one()
    assert entry.actor_user_id is None
    assert entry.entity_id == str(created["id"])


def test_entry_is_discarded_with_rolled_back_mutation(db_session):
    audit_service.log_change(
        entity="Customer",
        entity_id=1,
        action="Updated",
        before={"full_name": "A"},
        after={"full_name": "B"},
        actor_user_id=None,
    )
    db_session.rollback()

    assert db_session.query(AuditLog).count() == 0


def test_snapshots_are_stable_json(db_session):
    entry = audit_service.log_change(
        entity="Customer",
        entity_id=7,
        action="Created",
        before=None,
        after={"phone_number": "0700000000", "full_name": "Z"},
        actor_user_id=None,
    )
    db_session.commit()

    assert entry.before_json is None
    assert entry.after_json == '{"full_name": "Z", "phone_number": "0700000000"}'
    assert json.loads(entry.after_json)["full_name"] == "Z"
    assert [e.id for e in audit_service.list_entries("Customer", 7)] == [entry.id]
