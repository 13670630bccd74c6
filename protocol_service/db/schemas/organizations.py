from datetime import datetime
from pydantic import BaseModel, ConfigDict


class OrganizationBase(BaseModel):
    parent_id: int | None = None
    name: str
    address: str | None = None
    postal_code: str | None = None
    city: str | None = None
    country: str | None = None
    organization_type: str


class OrganizationCreate(OrganizationBase):
    pass


class OrganizationUpdate(OrganizationBase):
    id: int
    version: int


class Organization(OrganizationBase):
    id: int
    created_or_edited: datetime
    version: int
    model_config = ConfigDict(from_attributes=True)
