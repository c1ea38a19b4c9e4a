from typing import Iterable

from sqlalchemy import select

from app.sitescope.db.models import Site


class SiteRepository:
    def __init__(self, db):
        self.db = db

    def get_organization_id(self, site_id: str) -> str | None:
        stmt = select(Site.organization_id).where(Site.id == site_id)
        organization_id = self.db.execute(stmt).scalar_one_or_none()
        return str(organization_id) if organization_id is not None else None

    def list_ids_by_organization(self, organization_id: str) -> list[str]:
        stmt = select(Site.id).where(Site.organization_id == organization_id)
        return [str(site_id) for site_id in self.db.execute(stmt).scalars().all()]

    def list_by_ids(self, site_ids: Iterable[str], *, status: str | None = None):
        ids = list(site_ids)
        if not ids:
            return []
        stmt = select(Site).where(Site.id.in_(ids))
        if status:
            stmt = stmt.where(Site.status == status)
        return self.db.execute(stmt.order_by(Site.name.asc())).scalars().all()
