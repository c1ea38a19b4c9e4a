from sqlalchemy import select

from app.sitescope.db.models import AuditEvent


class AuditRepository:
    def __init__(self, db):
        self.db = db

    def create(self, event: AuditEvent) -> AuditEvent:
        self.db.add(event)
        self.db.commit()
        return event

    def list_by_action(self, action: str, *, user_id: str | None = None):
        stmt = select(AuditEvent).where(AuditEvent.action == action)
        if user_id:
            stmt = stmt.where(AuditEvent.user_id == user_id)
        return self.db.execute(stmt.order_by(AuditEvent.created_at.asc())).scalars().all()
