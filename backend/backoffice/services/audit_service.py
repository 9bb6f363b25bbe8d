# Overview: Append-only audit sink for entity changes.

import json
from typing import Any

from ..extensions import db
from ..models import AuditLog
from backoffice.time_utils import utcnow


def serialize_snapshot(snapshot: dict[str, Any] | None) -> str | None:
    if snapshot is None:
        return None
    return json.dumps(snapshot, sort_keys=True, default=str)


def log_change(
    *,
    entity: str,
    entity_id: Any,
    action: str,
    before: dict[str, Any] | None,
    after: dict[str, Any] | None,
    actor_user_id: int | None,
) -> AuditLog:
    """
    Append an audit entry to the current session.

    The row is NOT committed here: it rides in the same transaction as the
    mutation it describes, so a failed audit write fails the mutation too.
    """
    entry = AuditLog(
        entity=entity,
        entity_id=str(entity_id),
        action=action,
        before_json=serialize_snapshot(before),
        after_json=serialize_snapshot(after),
        actor_user_id=actor_user_id,
        at=utcnow(),
    )
    db.session.add(entry)
    return entry


def list_entries(entity: str, entity_id: Any) -> list[AuditLog]:
    """Audit trail for one entity, oldest first."""
    return (
        db.session.query(AuditLog)
        .filter_by(entity=entity, entity_id=str(entity_id))
        .order_by(AuditLog.at.asc(), AuditLog.id.asc())
        .all()
    )
