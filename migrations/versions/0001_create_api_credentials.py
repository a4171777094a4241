"""create api_credentials

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "api_credentials",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("provider", sa.String(length=50), nullable=False),
        sa.Column("key_name", sa.String(length=50), nullable=False),
        sa.Column("key_value", sa.String(length=500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_api_credentials_lookup",
        "api_credentials",
        ["provider", "key_name", "is_active"],
    )


def downgrade() -> None:
    op.drop_index("ix_api_credentials_lookup", table_name="api_credentials")
    op.drop_table("api_credentials")
