from datetime import datetime
from typing import Iterable

from sqlalchemy import func, select, update

from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.models import MaterialRequest
from app.sitescope.repos.filters import apply_page, apply_site_restriction


class MaterialRequestRepository:
    def __init__(self, db):
        self.db = db

    def list_by_ids(self, request_ids: Iterable[str]):
        ids = list(request_ids)
        if not ids:
            return []
        stmt = select(MaterialRequest).where(MaterialRequest.id.in_(ids))
        return self.db.execute(stmt).scalars().all()

    def list(
        self,
        restriction: SiteRestriction,
        *,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ):
        stmt = apply_site_restriction(select(MaterialRequest), MaterialRequest.site_id, restriction)
        count_stmt = apply_site_restriction(
            select(func.count()).select_from(MaterialRequest),
            MaterialRequest.site_id,
            restriction,
        )
        if status:
            stmt = stmt.where(MaterialRequest.status == status)
            count_stmt = count_stmt.where(MaterialRequest.status == status)
        stmt = apply_page(stmt.order_by(MaterialRequest.created_at.desc()), limit=limit, offset=offset)
        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total

    def set_decision(
        self,
        request_ids: Iterable[str],
        restriction: SiteRestriction,
        *,
        status: str,
        approved_by: str | None,
        notes: str | None,
    ) -> int:
        """Conditional update: only rows still inside ``restriction`` change.

        ``notes`` of None leaves the stored notes as they are.
        """
        values = {
            "status": status,
            "approved_by": approved_by,
            "approved_at": datetime.utcnow() if approved_by else None,
        }
        if notes is not None:
            values["notes"] = notes
        stmt = update(MaterialRequest).where(MaterialRequest.id.in_(list(request_ids)))
        stmt = apply_site_restriction(stmt, MaterialRequest.site_id, restriction)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount
