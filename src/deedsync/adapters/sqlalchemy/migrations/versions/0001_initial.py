"""Create listing, scraper state and scraper run tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from deedsync.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

_PROPERTY_STATUSES = ("new", "reviewed", "skipped", "exported", "removed")
_RUN_STATUSES = ("running", "ok", "failed")


def upgrade() -> None:
    op.create_table(
        "property",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("county", sa.String(), nullable=False),
        sa.Column("state", sa.String(length=8), nullable=False),
        sa.Column("node", sa.String(), nullable=False),
        sa.Column("tax_sale_id", sa.String(), nullable=True),
        sa.Column("parcel_number", sa.String(), nullable=True),
        sa.Column("sale_date", sa.String(), nullable=True),
        sa.Column("opening_bid", sa.Numeric(14, 2), nullable=True),
        sa.Column("deed_status", sa.String(), nullable=True),
        sa.Column("applicant_name", sa.String(), nullable=True),
        sa.Column("pdf_url", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state_address", sa.String(), nullable=True),
        sa.Column("zip", sa.String(), nullable=True),
        sa.Column("address_source_marker", sa.String(), nullable=True),
        sa.Column("auction_location", sa.String(), nullable=True),
        sa.Column("auction_start_time", sa.String(), nullable=True),
        sa.Column("auction_platform", sa.String(), nullable=True),
        sa.Column("auction_source_url", sa.String(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*_PROPERTY_STATUSES, name="property_status", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("removed_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_property"),
        sa.UniqueConstraint("county", "state", "node", name="uq_property_county_state_node"),
    )
    op.create_index(
        "ix_property_jurisdiction_active",
        "property",
        ["county", "state", "is_active"],
    )

    op.create_table(
        "scraper_state",
        sa.Column("scraper_name", sa.String(), nullable=False),
        sa.Column("offset", sa.Integer(), nullable=False),
        sa.Column("last_tax_sale_id", sa.String(), nullable=True),
        sa.Column("last_node", sa.String(), nullable=True),
        sa.Column("last_run_id", sa.String(), nullable=True),
        sa.Column("last_run_at", UTCDateTime(), nullable=True),
        sa.Column("done_for_today", sa.Boolean(), nullable=False),
        sa.Column("resume_after", UTCDateTime(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("scraper_name", name="pk_scraper_state"),
    )

    op.create_table(
        "scraper_run",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("scraper_name", sa.String(), nullable=False),
        sa.Column("run_id", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*_RUN_STATUSES, name="run_status", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("found_total", sa.Integer(), nullable=False),
        sa.Column("processed", sa.Integer(), nullable=False),
        sa.Column("inserted", sa.Integer(), nullable=False),
        sa.Column("updated", sa.Integer(), nullable=False),
        sa.Column("skipped", sa.Integer(), nullable=False),
        sa.Column("removed_marked", sa.Integer(), nullable=False),
        sa.Column("started_at", UTCDateTime(), nullable=False),
        sa.Column("finished_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_scraper_run"),
        sa.UniqueConstraint("scraper_name", "run_id", name="uq_scraper_run_scraper_name_run_id"),
    )


def downgrade() -> None:
    op.drop_table("scraper_run")
    op.drop_table("scraper_state")
    op.drop_index("ix_property_jurisdiction_active", table_name="property")
    op.drop_table("property")
