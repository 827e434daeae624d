"""create stake_request table

Revision ID: 0001_create_stake_request
Revises:
Create Date: 2026-10-18 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_stake_request"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "stake_request",
        sa.Column("stake_request_hash", sa.Text(), nullable=False),
        sa.Column("amount", sa.Text(), nullable=False),
        sa.Column("beneficiary", sa.String(length=42), nullable=False),
        sa.Column("gas_price", sa.Text(), nullable=False),
        sa.Column("gas_limit", sa.Text(), nullable=False),
        sa.Column("nonce", sa.Text(), nullable=False),
        sa.Column("gateway", sa.String(length=42), nullable=False),
        sa.Column("staker", sa.String(length=42), nullable=False),
        sa.Column("staker_proxy", sa.String(length=42), nullable=False),
        sa.Column("block_number", sa.Text(), nullable=False),
        sa.Column("message_hash", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("stake_request_hash", name=op.f("pk_stake_request")),
    )


def downgrade() -> None:
    op.drop_table("stake_request")
