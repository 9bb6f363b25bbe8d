from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z


class AuditLog(db.Model):
    """
    Append-only change log for business entities.

    before_json / after_json hold serialized snapshots of the entity.
    actor_user_id is NULL when the change was made anonymously.

    IMMUTABLE: Never update or delete.
    """
    __tablename__ = "audit_logs"
    __table_args__ = (
        db.Index("ix_audit_logs_entity", "entity", "entity_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    entity = db.Column(db.String(64), nullable=False)  # e.g., "Customer"
    entity_id = db.Column(db.String(64), nullable=False)
    action = db.Column(db.String(32), nullable=False)  # Created, Updated, Deactivated

    before_json = db.Column(db.Text, nullable=True)
    after_json = db.Column(db.Text, nullable=True)

    actor_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    actor = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "action": self.action,
            "before_json": self.before_json,
            "after_json": self.after_json,
            "actor_user_id": self.actor_user_id,
            "at": to_utc_z(self.at),
        }
