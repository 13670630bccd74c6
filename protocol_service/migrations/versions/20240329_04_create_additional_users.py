"""Create additional_users join table

Revision ID: 20240329_04
Revises: 20240329_03
Create Date: 2024-03-29 18:29:28

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20240329_04'
down_revision: Union[str, None] = '20240329_03'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _has_index(table: str, name: str) -> bool:
    return any(ix['name'] == name for ix in sa.inspect(op.get_bind()).get_indexes(table))


def upgrade() -> None:
    if not _has_table('additional_users'):
        op.create_table(
            'additional_users',
            sa.Column('user_id', BIGINT_ID, nullable=False),
            sa.Column('protocol_id', BIGINT_ID, nullable=False),
            sa.PrimaryKeyConstraint('user_id', 'protocol_id', name='pk_additional_users'),
            sa.ForeignKeyConstraint(
                ['protocol_id'], ['protocols.id'],
                name='fk_additional_users_protocol_id', ondelete='CASCADE',
            ),
            sa.ForeignKeyConstraint(
                ['user_id'], ['users.id'],
                name='fk_additional_users_user_id', ondelete='CASCADE',
            ),
        )
    if not _has_index('additional_users', 'ix_additional_users_protocol_id'):
        op.create_index('ix_additional_users_protocol_id', 'additional_users', ['protocol_id'], unique=False)


def downgrade() -> None:
    if not _has_table('additional_users'):
        return
    if _has_index('additional_users', 'ix_additional_users_protocol_id'):
        op.drop_index('ix_additional_users_protocol_id', table_name='additional_users')
    op.drop_table('additional_users')
