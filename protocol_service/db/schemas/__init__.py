"""
Domain-split Pydantic schemas.

Create schemas carry the caller-supplied fields; Update schemas add the record
id and the version token the caller last read; response schemas read
straight from ORM rows.
"""

from .organizations import (
    OrganizationBase,
    OrganizationCreate,
    OrganizationUpdate,
    Organization,
)
from .users import UserBase, UserCreate, UserUpdate, User
from .protocols import (
    ProtocolBase,
    ProtocolCreate,
    ProtocolUpdate,
    Protocol,
    AdditionalUser,
)
from .protocol_templates import (
    ProtocolTemplateBase,
    ProtocolTemplateCreate,
    ProtocolTemplateUpdate,
    ProtocolTemplate,
)

__all__ = [
    # organizations
    "OrganizationBase",
    "OrganizationCreate",
    "OrganizationUpdate",
    "Organization",
    # users
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "User",
    # protocols
    "ProtocolBase",
    "ProtocolCreate",
    "ProtocolUpdate",
    "Protocol",
    "AdditionalUser",
    # protocol templates
    "ProtocolTemplateBase",
    "ProtocolTemplateCreate",
    "ProtocolTemplateUpdate",
    "ProtocolTemplate",
]
