"""Initial schema — config_templates, device_template_assignments.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "config_templates",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("scope", sa.String(20), nullable=False),
        sa.Column("device_type", sa.String(100), nullable=True),
        sa.Column("config", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_config_templates"),
    )
    op.create_index("ix_config_templates_scope", "config_templates", ["scope"])
    op.create_index("ix_config_templates_device_type", "config_templates", ["device_type"])

    op.create_table(
        "device_template_assignments",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column("device_id", sa.String(64), nullable=False),
        sa.Column("template_id", sa.Integer, nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_device_template_assignments"),
        sa.ForeignKeyConstraint(
            ["template_id"], ["config_templates.id"],
            name="fk_device_template_assignments_template_id_config_templates",
        ),
        sa.UniqueConstraint("device_id", "template_id", name="uq_device_template"),
    )
    op.create_index(
        "ix_device_template_assignments_device_id",
        "device_template_assignments", ["device_id"],
    )
    op.create_index(
        "ix_device_template_assignments_template_id",
        "device_template_assignments", ["template_id"],
    )


def downgrade() -> None:
    op.drop_table("device_template_assignments")
    op.drop_table("config_templates")
