# alembic/versions/001_initial.py

"""Initial schema: user accounts and investment positions

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

from app.infrastructure.db.models import ExactDecimal

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

asset_class_enum = sa.Enum('currency', 'metal', 'crypto', name='asset_class')


def upgrade():
    op.create_table('user_account',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index('ix_user_account_user_id', 'user_account', ['user_id'])

    op.create_table('investment_position',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('position_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('asset_class', asset_class_enum, nullable=False),
        sa.Column('asset_name', sa.String(length=100), nullable=False),
        sa.Column('asset_code', sa.String(length=20), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('purchase_quantity', ExactDecimal(), nullable=False),
        sa.Column('purchase_unit_price', ExactDecimal(), nullable=False),
        sa.Column('current_unit_price', ExactDecimal(), nullable=False),
        sa.Column('price_simulated', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('position_id')
    )
    op.create_index('ix_investment_position_user_id', 'investment_position', ['user_id'])
    op.create_index(
        'ix_investment_position_lookup',
        'investment_position',
        ['user_id', 'asset_class', 'asset_code'],
    )


def downgrade():
    op.drop_index('ix_investment_position_lookup', table_name='investment_position')
    op.drop_index('ix_investment_position_user_id', table_name='investment_position')
    op.drop_table('investment_position')
    op.drop_index('ix_user_account_user_id', table_name='user_account')
    op.drop_table('user_account')
    asset_class_enum.drop(op.get_bind(), checkfirst=True)
