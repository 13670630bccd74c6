from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ProtocolBase(BaseModel):
    is_draft: bool = True
    is_reviewed: bool = False
    review_comment: str | None = None
    is_closed: bool = False
    closed_at: datetime | None = None
    user_id: int


class ProtocolCreate(ProtocolBase):
    pass


class ProtocolUpdate(ProtocolBase):
    id: int
    version: int


class Protocol(ProtocolBase):
    id: int
    created_or_edited: datetime
    version: int
    model_config = ConfigDict(from_attributes=True)


class AdditionalUser(BaseModel):
    user_id: int
    protocol_id: int
    model_config = ConfigDict(from_attributes=True)
