from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ProtocolTemplateBase(BaseModel):
    name: str
    description: str | None = None
    template: str
    organization_id: int


class ProtocolTemplateCreate(ProtocolTemplateBase):
    pass


class ProtocolTemplateUpdate(ProtocolTemplateBase):
    id: int
    version: int


class ProtocolTemplate(ProtocolTemplateBase):
    id: int
    created_or_edited: datetime
    version: int
    model_config = ConfigDict(from_attributes=True)
