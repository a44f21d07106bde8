"""add assets and audit logs

Revision ID: 8e1f5b2c6a90
Revises: 3c9a41f07d2e
Create Date: 2026-10-12 10:31:07.904113
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8e1f5b2c6a90"
down_revision: Union[str, Sequence[str], None] = "3c9a41f07d2e"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("asset_number", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("asset_group", sa.String(), nullable=True),
        sa.Column("safety_criticality", sa.String(), nullable=True),
        sa.Column("operational_criticality", sa.String(), nullable=True),
        sa.Column("iadc_code", sa.String(), nullable=True),
        sa.Column("main_parent", sa.String(), nullable=True),
        sa.Column("make", sa.String(), nullable=True),
        sa.Column("model", sa.String(), nullable=True),
        sa.Column("serial_number", sa.String(), nullable=True),
        sa.Column("rfid_code", sa.String(), nullable=True),
        sa.Column("rfid_tag_number", sa.String(), nullable=True),
        sa.Column("remarks", sa.String(), nullable=True),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("photo_a", sa.String(), nullable=True),
        sa.Column("photo_b", sa.String(), nullable=True),
        sa.Column("photo_c", sa.String(), nullable=True),
        sa.Column("photo_d", sa.String(), nullable=True),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("assigned_to", sa.String(), nullable=True),
        sa.Column("last_updated", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )

    op.create_index(op.f("ix_assets_id"), "assets", ["id"], unique=False)
    op.create_index(op.f("ix_assets_asset_number"), "assets", ["asset_number"], unique=True)
    op.create_index("ix_assets_unit", "assets", ["unit"], unique=False)
    op.create_index("ix_assets_unit_complete", "assets", ["unit", "is_complete"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("asset_number", sa.String(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("fields", sa.String(), nullable=False, server_default=""),
        sa.Column("actor", sa.String(), nullable=False, server_default="system"),
        sa.Column("ip", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    op.create_index(op.f("ix_audit_logs_id"), "audit_logs", ["id"], unique=False)
    op.create_index(op.f("ix_audit_logs_asset_number"), "audit_logs", ["asset_number"], unique=False)
    op.create_index(op.f("ix_audit_logs_unit"), "audit_logs", ["unit"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_audit_logs_unit"), table_name="audit_logs")
    op.drop_index(op.f("ix_audit_logs_asset_number"), table_name="audit_logs")
    op.drop_index(op.f("ix_audit_logs_id"), table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_assets_unit_complete", table_name="assets")
    op.drop_index("ix_assets_unit", table_name="assets")
    op.drop_index(op.f("ix_assets_asset_number"), table_name="assets")
    op.drop_index(op.f("ix_assets_id"), table_name="assets")
    op.drop_table("assets")
