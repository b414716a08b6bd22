"""initial schema: bed categories, patients, archive, facilities

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

Bed categories are not seeded here. Run ``python -m bedtracker.seed seed-beds``
(idempotent) or ``reset-beds`` (destructive) as a separate, deliberate step.
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _patient_columns():
    return [
        sa.Column("patient_id", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(length=20), nullable=False),
        sa.Column("condition", sa.Text(), nullable=True),
        sa.Column("blood_group", sa.String(length=10), nullable=True),
        sa.Column("phone_no", sa.String(length=30), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(length=200), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(length=30), nullable=True),
        sa.Column("emergency_contact_relationship", sa.String(length=50), nullable=True),
        sa.Column("bed_type", sa.String(length=100), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "bed_categories",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("bed_type", sa.String(length=100), nullable=False),
        sa.Column("beds_available", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("beds_available >= 0", name="ck_bed_categories_beds_available_non_negative"),
    )
    op.create_index("ix_bed_categories_bed_type", "bed_categories", ["bed_type"], unique=True)

    op.create_table(
        "patients",
        sa.Column("id", sa.String(), primary_key=True),
        *_patient_columns(),
        *_timestamps(),
        sa.UniqueConstraint("patient_id", name="uq_patients_patient_id"),
    )
    op.create_index("ix_patients_patient_id", "patients", ["patient_id"])
    op.create_index("ix_patients_bed_type", "patients", ["bed_type"])

    op.create_table(
        "checked_out_patients",
        sa.Column("id", sa.String(), primary_key=True),
        *_patient_columns(),
        sa.Column("checkout_date", sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_checked_out_patients_patient_id", "checked_out_patients", ["patient_id"])
    op.create_index("ix_checked_out_patients_bed_type", "checked_out_patients", ["bed_type"])

    op.create_table(
        "facilities",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("contact", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("lat >= -90 AND lat <= 90", name="ck_facilities_lat_range"),
        sa.CheckConstraint("lng >= -180 AND lng <= 180", name="ck_facilities_lng_range"),
    )
    op.create_index("ix_facilities_name", "facilities", ["name"])


def downgrade() -> None:
    op.drop_index("ix_facilities_name", table_name="facilities")
    op.drop_table("facilities")
    op.drop_index("ix_checked_out_patients_bed_type", table_name="checked_out_patients")
    op.drop_index("ix_checked_out_patients_patient_id", table_name="checked_out_patients")
    op.drop_table("checked_out_patients")
    op.drop_index("ix_patients_bed_type", table_name="patients")
    op.drop_index("ix_patients_patient_id", table_name="patients")
    op.drop_table("patients")
    op.drop_index("ix_bed_categories_bed_type", table_name="bed_categories")
    op.drop_table("bed_categories")
