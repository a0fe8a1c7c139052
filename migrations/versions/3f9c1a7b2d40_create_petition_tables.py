"""Create signatures, verification_codes and rate_limit_windows

Revision ID: 3f9c1a7b2d40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c1a7b2d40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'signatures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('hashed_identifier', sa.String(length=64), nullable=False),
        sa.Column('verification_type', sa.String(length=10), nullable=False),
        sa.Column('county', sa.String(length=100), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('ip_hash', sa.String(length=64), nullable=False),
        sa.Column('verification_token', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('signatures', schema=None) as batch_op:
        batch_op.create_index('ix_signatures_hashed_identifier', ['hashed_identifier'], unique=True)
        batch_op.create_index('ix_signatures_county', ['county'], unique=False)
        batch_op.create_index('ix_signatures_ip_hash_created_at', ['ip_hash', 'created_at'], unique=False)

    op.create_table(
        'verification_codes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('phone_hash', sa.String(length=64), nullable=False),
        sa.Column('code', sa.String(length=4), nullable=False),
        sa.Column('used', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('verification_codes', schema=None) as batch_op:
        batch_op.create_index('ix_verification_codes_phone_hash', ['phone_hash'], unique=False)

    op.create_table(
        'rate_limit_windows',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bucket', sa.String(length=100), nullable=False),
        sa.Column('window_start', sa.DateTime(), nullable=False),
        sa.Column('hits', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bucket', 'window_start', name='uq_rate_limit_windows_bucket_window'),
    )


def downgrade():
    op.drop_table('rate_limit_windows')

    with op.batch_alter_table('verification_codes', schema=None) as batch_op:
        batch_op.drop_index('ix_verification_codes_phone_hash')
    op.drop_table('verification_codes')

    with op.batch_alter_table('signatures', schema=None) as batch_op:
        batch_op.drop_index('ix_signatures_ip_hash_created_at')
        batch_op.drop_index('ix_signatures_county')
        batch_op.drop_index('ix_signatures_hashed_identifier')
    op.drop_table('signatures')
