"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes. Relationships are plain
foreign-key columns; related rows are resolved by the repositories through
indexed queries.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .organizations import Organization
from .users import User
from .protocols import Protocol, AdditionalUser
from .protocol_templates import ProtocolTemplate

__all__ = [
    # base
    "Base",
    "now_utc",
    # organizations/users
    "Organization",
    "User",
    # protocols
    "Protocol",
    "AdditionalUser",
    "ProtocolTemplate",
]
