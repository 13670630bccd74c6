from sqlalchemy import Column, ForeignKey, Index, Integer, Text

from ..types import BigIntId, UTCDateTime
from .base import Base, now_utc


class ProtocolTemplate(Base):
    __tablename__ = 'protocol_templates'
    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    template = Column(Text, nullable=False)
    created_or_edited = Column(UTCDateTime, nullable=False, default=now_utc)
    organization_id = Column(
        BigIntId,
        ForeignKey('organizations.id', ondelete='CASCADE', name='fk_protocol_templates_organization_id'),
        nullable=False,
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index('ix_protocol_templates_organization_id', 'organization_id'),
    )
