from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Text, false, true

from ..types import BigIntId, UTCDateTime
from .base import Base, now_utc


class Protocol(Base):
    __tablename__ = 'protocols'
    id = Column(BigIntId, primary_key=True, autoincrement=True)
    is_draft = Column(Boolean, nullable=False, default=True, server_default=true())
    is_reviewed = Column(Boolean, nullable=False, default=False, server_default=false())
    review_comment = Column(Text, nullable=True)
    is_closed = Column(Boolean, nullable=False, default=False, server_default=false())
    closed_at = Column(UTCDateTime, nullable=True)
    created_or_edited = Column(UTCDateTime, nullable=False, default=now_utc)
    user_id = Column(
        BigIntId,
        ForeignKey('users.id', ondelete='CASCADE', name='fk_protocols_user_id'),
        nullable=False,
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index('ix_protocols_user_id', 'user_id'),
    )


class AdditionalUser(Base):
    """Grants a secondary user participation on a protocol."""

    __tablename__ = 'additional_users'
    user_id = Column(
        BigIntId,
        ForeignKey('users.id', ondelete='CASCADE', name='fk_additional_users_user_id'),
        primary_key=True,
    )
    protocol_id = Column(
        BigIntId,
        ForeignKey('protocols.id', ondelete='CASCADE', name='fk_additional_users_protocol_id'),
        primary_key=True,
    )

    __table_args__ = (
        Index('ix_additional_users_protocol_id', 'protocol_id'),
    )
