from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.sitescope.db.models import LegacySitePartner, PartnerSiteMapping

logger = logging.getLogger(__name__)

TERMINATED_CONTRACT_STATUS = "terminated"


class MappingSourceError(Exception):
    """A mapping table could not be read."""

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        super().__init__(f"failed to read {source} mappings")
        if cause is not None:
            self.__cause__ = cause


@dataclass(frozen=True)
class PrimaryMappingRow:
    partner_company_id: str
    site_id: str
    is_active: bool
    # Informational only; not consulted by the resolver.
    start_date: date | None = None
    end_date: date | None = None

    @property
    def grants_access(self) -> bool:
        return self.is_active is True


@dataclass(frozen=True)
class LegacyMappingRow:
    partner_company_id: str
    site_id: str
    contract_status: str | None

    @property
    def grants_access(self) -> bool:
        return self.contract_status != TERMINATED_CONTRACT_STATUS


class MappingSource(Protocol):
    def list_primary(self, partner_company_id: str) -> list[PrimaryMappingRow]:
        ...

    def list_legacy(self, partner_company_id: str) -> list[LegacyMappingRow]:
        ...


class PartnerSiteMappingRepository:
    """Read-only access to partner_site_mappings and the legacy site_partners."""

    def __init__(self, db):
        self.db = db

    def list_primary(self, partner_company_id: str) -> list[PrimaryMappingRow]:
        stmt = select(PartnerSiteMapping).where(PartnerSiteMapping.partner_company_id == partner_company_id)
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            self._recover()
            raise MappingSourceError("partner_site_mappings", exc) from exc
        return [
            PrimaryMappingRow(
                partner_company_id=str(row.partner_company_id),
                site_id=str(row.site_id),
                is_active=bool(row.is_active),
                start_date=row.start_date,
                end_date=row.end_date,
            )
            for row in rows
        ]

    def list_legacy(self, partner_company_id: str) -> list[LegacyMappingRow]:
        stmt = select(LegacySitePartner).where(LegacySitePartner.partner_company_id == partner_company_id)
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            self._recover()
            raise MappingSourceError("site_partners", exc) from exc
        return [
            LegacyMappingRow(
                partner_company_id=str(row.partner_company_id),
                site_id=str(row.site_id),
                contract_status=row.contract_status,
            )
            for row in rows
        ]

    def _recover(self) -> None:
        # A failed read leaves the transaction unusable on some backends.
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after mapping read failure failed")
