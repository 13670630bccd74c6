"""Create organizations table

Revision ID: 20240329_01
Revises:
Create Date: 2024-03-29 18:29:25

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20240329_01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    if _has_table('organizations'):
        return
    op.create_table(
        'organizations',
        sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True, nullable=False),
        sa.Column('parent_id', BIGINT_ID, nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('postal_code', sa.Text(), nullable=True),
        sa.Column('city', sa.Text(), nullable=True),
        sa.Column('country', sa.Text(), nullable=True),
        sa.Column('organization_type', sa.Text(), nullable=False),
        sa.Column('created_or_edited', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('version', sa.Integer(), nullable=False, server_default=sa.text('1')),
    )


def downgrade() -> None:
    if _has_table('organizations'):
        op.drop_table('organizations')
