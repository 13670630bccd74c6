"""Create protocols table with cascading owner foreign key

Revision ID: 20240329_03
Revises: 20240329_02
Create Date: 2024-03-29 18:29:27

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20240329_03'
down_revision: Union[str, None] = '20240329_02'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_ID = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def _has_index(table: str, name: str) -> bool:
    return any(ix['name'] == name for ix in sa.inspect(op.get_bind()).get_indexes(table))


def upgrade() -> None:
    if not _has_table('protocols'):
        op.create_table(
            'protocols',
            sa.Column('id', BIGINT_ID, primary_key=True, autoincrement=True, nullable=False),
            sa.Column('is_draft', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('is_reviewed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('review_comment', sa.Text(), nullable=True),
            sa.Column('is_closed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_or_edited', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('user_id', BIGINT_ID, nullable=False),
            sa.Column('version', sa.Integer(), nullable=False, server_default=sa.text('1')),
            sa.ForeignKeyConstraint(
                ['user_id'], ['users.id'],
                name='fk_protocols_user_id', ondelete='CASCADE',
            ),
        )
    if not _has_index('protocols', 'ix_protocols_user_id'):
        op.create_index('ix_protocols_user_id', 'protocols', ['user_id'], unique=False)


def downgrade() -> None:
    if not _has_table('protocols'):
        return
    if _has_index('protocols', 'ix_protocols_user_id'):
        op.drop_index('ix_protocols_user_id', table_name='protocols')
    op.drop_table('protocols')
