from pydantic import BaseModel


class SiteItem(BaseModel):
    id: str
    name: str
    address: str | None = None
    status: str
    organization_id: str | None = None


class SiteListResponse(BaseModel):
    sites: list[SiteItem]
    total: int
    trace_id: str
