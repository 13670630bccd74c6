"""Create users table with cascading organization foreign key

Revision ID: 20240329_02
Revises: 20240329_01
Create Date: 2024-03-29 18:29:26

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20240329_02'
down_revision: Union[str, None] = '20240329_01'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _has_index(table: str, name: str) -> bool:
    return any(ix['name'] == name for ix in sa.inspect(op.get_bind()).get_indexes(table))


def upgrade() -> None:
    if not _has_table('users'):
        op.create_table(
            'users',
            sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True, nullable=False),
            sa.Column('username', sa.Text(), nullable=False),
            sa.Column('first_name', sa.Text(), nullable=True),
            sa.Column('last_name', sa.Text(), nullable=True),
            sa.Column('email', sa.Text(), nullable=False),
            sa.Column('password', sa.Text(), nullable=False),
            sa.Column('last_password_change_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('password_change_required', sa.Boolean(), nullable=True),
            sa.Column('created_or_edited', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('organization_id', BIGINT_ID, nullable=False),
            sa.Column('version', sa.Integer(), nullable=False, server_default=sa.text('1')),
            sa.ForeignKeyConstraint(
                ['organization_id'], ['organizations.id'],
                name='fk_users_organization_id', ondelete='CASCADE',
            ),
        )
    if not _has_index('users', 'ix_users_organization_id'):
        op.create_index('ix_users_organization_id', 'users', ['organization_id'], unique=False)


def downgrade() -> None:
    if not _has_table('users'):
        return
    if _has_index('users', 'ix_users_organization_id'):
        op.drop_index('ix_users_organization_id', table_name='users')
    op.drop_table('users')
