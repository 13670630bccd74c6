from sqlalchemy import Column, Integer, Text

from ..types import BigIntId, UTCDateTime
from .base import Base, now_utc


class Organization(Base):
    __tablename__ = 'organizations'
    id = Column(BigIntId, primary_key=True, autoincrement=True)
    # Informational only; no referential constraint on the parent organization.
    parent_id = Column(BigIntId, nullable=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    country = Column(Text, nullable=True)
    organization_type = Column(Text, nullable=False)
    created_or_edited = Column(UTCDateTime, nullable=False, default=now_utc)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
