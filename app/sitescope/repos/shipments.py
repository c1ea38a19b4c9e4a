from datetime import datetime

from sqlalchemy import func, select, update

from app.sitescope.core.scope import SiteRestriction
from app.sitescope.db.models import MaterialShipment
from app.sitescope.repos.filters import apply_page, apply_site_restriction


class ShipmentRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, shipment_id: str):
        return self.db.get(MaterialShipment, shipment_id)

    def list(
        self,
        restriction: SiteRestriction,
        *,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ):
        stmt = apply_site_restriction(select(MaterialShipment), MaterialShipment.site_id, restriction)
        count_stmt = apply_site_restriction(
            select(func.count()).select_from(MaterialShipment),
            MaterialShipment.site_id,
            restriction,
        )
        if status:
            stmt = stmt.where(MaterialShipment.status == status)
            count_stmt = count_stmt.where(MaterialShipment.status == status)
        stmt = apply_page(stmt.order_by(MaterialShipment.created_at.desc()), limit=limit, offset=offset)
        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total

    def set_status(
        self,
        shipment_id: str,
        restriction: SiteRestriction,
        *,
        status: str,
        tracking_number: str | None = None,
    ) -> int:
        values = {"status": status, "updated_at": datetime.utcnow()}
        if tracking_number is not None:
            values["tracking_number"] = tracking_number
        stmt = update(MaterialShipment).where(MaterialShipment.id == shipment_id)
        stmt = apply_site_restriction(stmt, MaterialShipment.site_id, restriction)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        return self.db.execute(stmt).rowcount
