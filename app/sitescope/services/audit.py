import logging
from dataclasses import dataclass
from datetime import datetime

from app.sitescope.core.actor import ActorContext
from app.sitescope.db.models import AuditEvent
from app.sitescope.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditEventPayload:
    user_id: str | None
    organization_id: str | None
    trace_id: str | None
    actor_role: str | None
    action: str
    resource_type: str | None
    resource_id: str | None
    result: str
    metadata: dict | None = None


class AuditService:
    """Best-effort audit logging.

    Strategy: failures are logged and swallowed to avoid breaking request flows.
    Records are internal; nothing written here is returned to the actor.
    """

    def __init__(self, db):
        self.db = db
        self.repo = AuditRepository(db)

    def record_event(self, payload: AuditEventPayload) -> None:
        try:
            event = AuditEvent(
                organization_id=payload.organization_id,
                user_id=payload.user_id,
                trace_id=payload.trace_id,
                actor_role=payload.actor_role,
                action=payload.action,
                resource_type=payload.resource_type,
                resource_id=payload.resource_id,
                result=payload.result,
                event_metadata=dict(payload.metadata or {}),
                created_at=datetime.utcnow(),
            )
            self.repo.create(event)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={
                    "action": payload.action,
                    "trace_id": payload.trace_id,
                    "resource_id": payload.resource_id,
                },
            )

    def record_denial(
        self,
        actor: ActorContext,
        *,
        resource_type: str,
        resource_ids: list[str],
        trace_id: str | None,
        reason: str,
    ) -> None:
        self.record_event(
            AuditEventPayload(
                user_id=actor.user_id,
                organization_id=actor.restricted_org_id or actor.organization_id,
                trace_id=trace_id,
                actor_role=actor.role,
                action=f"{resource_type}.access_denied",
                resource_type=resource_type,
                resource_id=resource_ids[0] if len(resource_ids) == 1 else None,
                result="denied",
                metadata={"resource_ids": resource_ids, "reason": reason},
            )
        )
