from typing import Literal

from pydantic import BaseModel


class ActorSummary(BaseModel):
    user_id: str
    email: str
    role: str
    organization_id: str | None = None
    is_restricted: bool
    partner_company_id: str | None = None


class ScopeResponse(BaseModel):
    actor: ActorSummary
    mode: Literal["unrestricted", "org", "sites"]
    org_id: str | None = None
    site_ids: list[str] | None = None
    trace_id: str
