"""Create protocol_templates table

Revision ID: 20240329_05
Revises: 20240329_04
Create Date: 2024-03-29 18:29:29

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20240329_05'
down_revision: Union[str, None] = '20240329_04'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _has_index(table: str, name: str) -> bool:
    return any(ix['name'] == name for ix in sa.inspect(op.get_bind()).get_indexes(table))


def upgrade() -> None:
    if not _has_table('protocol_templates'):
        op.create_table(
            'protocol_templates',
            sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True, nullable=False),
            sa.Column('name', sa.Text(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('template', sa.Text(), nullable=False),
            sa.Column('created_or_edited', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('organization_id', BIGINT_ID, nullable=False),
            sa.Column('version', sa.Integer(), nullable=False, server_default=sa.text('1')),
            sa.ForeignKeyConstraint(
                ['organization_id'], ['organizations.id'],
                name='fk_protocol_templates_organization_id', ondelete='CASCADE',
            ),
        )
    if not _has_index('protocol_templates', 'ix_protocol_templates_organization_id'):
        op.create_index(
            'ix_protocol_templates_organization_id', 'protocol_templates', ['organization_id'], unique=False,
        )


def downgrade() -> None:
    if not _has_table('protocol_templates'):
        return
    if _has_index('protocol_templates', 'ix_protocol_templates_organization_id'):
        op.drop_index('ix_protocol_templates_organization_id', table_name='protocol_templates')
    op.drop_table('protocol_templates')
