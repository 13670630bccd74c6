from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Text

from ..types import BigIntId, UTCDateTime
from .base import Base, now_utc


class User(Base):
    __tablename__ = 'users'
    id = Column(BigIntId, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    email = Column(Text, nullable=False)
    password = Column(Text, nullable=False)
    last_password_change_date = Column(UTCDateTime, nullable=True)
    password_change_required = Column(Boolean, nullable=True)
    created_or_edited = Column(UTCDateTime, nullable=False, default=now_utc)
    organization_id = Column(
        BigIntId,
        ForeignKey('organizations.id', ondelete='CASCADE', name='fk_users_organization_id'),
        nullable=False,
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index('ix_users_organization_id', 'organization_id'),
    )
