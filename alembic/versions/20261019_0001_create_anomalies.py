"""create anomalies table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "anomalies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("equipment_number", sa.String(length=100), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("detection_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="new, in_progress, resolved, closed, cancelled",
        ),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("equipment_description", sa.Text(), nullable=True),
        sa.Column("responsible_section", sa.String(length=255), nullable=True),
        sa.Column("criticality", sa.String(length=16), nullable=False, comment="critical, medium, low"),
        sa.Column("origin_system", sa.String(length=16), nullable=False, comment="excel, oracle, manual"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("priority BETWEEN 1 AND 5", name="ck_anomalies_priority_range"),
        sa.CheckConstraint(
            "status IN ('new', 'in_progress', 'resolved', 'closed', 'cancelled')",
            name="ck_anomalies_status",
        ),
        sa.CheckConstraint(
            "criticality IN ('critical', 'medium', 'low')",
            name="ck_anomalies_criticality",
        ),
        sa.CheckConstraint(
            "origin_system IN ('excel', 'oracle', 'manual')",
            name="ck_anomalies_origin_system",
        ),
    )
    op.create_index("ix_anomalies_equipment_number", "anomalies", ["equipment_number"], unique=False)
    op.create_index("ix_anomalies_status", "anomalies", ["status"], unique=False)
    op.create_index("ix_anomalies_criticality", "anomalies", ["criticality"], unique=False)
    op.create_index("ix_anomalies_detection_date", "anomalies", ["detection_date"], unique=False)
    op.create_index(
        "ix_anomalies_equipment_title_detection_date",
        "anomalies",
        ["equipment_number", "title", "detection_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_anomalies_equipment_title_detection_date", table_name="anomalies")
    op.drop_index("ix_anomalies_detection_date", table_name="anomalies")
    op.drop_index("ix_anomalies_criticality", table_name="anomalies")
    op.drop_index("ix_anomalies_status", table_name="anomalies")
    op.drop_index("ix_anomalies_equipment_number", table_name="anomalies")
    op.drop_table("anomalies")
