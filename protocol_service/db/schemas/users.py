from datetime import datetime
from pydantic import BaseModel, ConfigDict


class UserBase(BaseModel):
    username: str
    first_name: str | None = None
    last_name: str | None = None
    email: str
    last_password_change_date: datetime | None = None
    password_change_required: bool | None = None
    organization_id: int


class UserCreate(UserBase):
    password: str


class UserUpdate(UserBase):
    id: int
    password: str
    version: int


class User(UserBase):
    """Response model; the stored password is never returned."""

    id: int
    created_or_edited: datetime
    version: int
    model_config = ConfigDict(from_attributes=True)
