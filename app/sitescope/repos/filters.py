from sqlalchemy import and_, or_

from app.sitescope.core.scope import SiteRestriction


def apply_site_restriction(stmt, column, restriction: SiteRestriction, *, org_column=None):
    # An empty allow-list renders as an always-false IN, never as "no filter".
    if restriction.unrestricted:
        return stmt
    condition = column.in_(sorted(restriction.site_ids))
    if org_column is not None and restriction.org_id:
        condition = or_(condition, and_(column.is_(None), org_column == restriction.org_id))
    return stmt.where(condition)


def apply_page(stmt, *, limit: int | None = None, offset: int | None = None):
    if offset:
        stmt = stmt.offset(offset)
    if limit:
        stmt = stmt.limit(limit)
    return stmt
