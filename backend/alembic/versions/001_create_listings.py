"""Initial schema - listings and ingestion log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates listings (keyed for lookup on listing_link) and ingestion_log.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA_SQL = """
-- Reconciled rental listings
-- listing_link is not UNIQUE: bulk mode stores in-run duplicates as-is
CREATE TABLE IF NOT EXISTS listings (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    address TEXT NOT NULL,
    neighborhood TEXT,
    price TEXT NOT NULL,
    bed_bath TEXT NOT NULL,
    sqft TEXT,
    unit_type TEXT NOT NULL,
    availability TEXT NOT NULL,
    contact_name TEXT,
    contact_phone TEXT,
    listing_link TEXT NOT NULL,
    summary TEXT,
    amenities TEXT NOT NULL DEFAULT '[]',
    images TEXT NOT NULL DEFAULT '[]',
    notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Per-source audit of ingestion runs
CREATE TABLE IF NOT EXISTS ingestion_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_name TEXT NOT NULL,
    mode TEXT NOT NULL,
    status TEXT NOT NULL,
    records_processed INTEGER NOT NULL,
    records_created INTEGER NOT NULL,
    records_updated INTEGER NOT NULL,
    records_skipped INTEGER NOT NULL,
    run_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_listings_listing_link ON listings(listing_link);
CREATE INDEX IF NOT EXISTS idx_listings_created_at ON listings(created_at);
CREATE INDEX IF NOT EXISTS idx_listings_unit_type ON listings(unit_type);
CREATE INDEX IF NOT EXISTS idx_ingestion_log_run_at ON ingestion_log(run_at);
"""


def upgrade() -> None:
    # Use raw DBAPI connection for multi-statement SQL
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.executescript(SCHEMA_SQL)


def downgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    for table in ("ingestion_log", "listings"):
        raw_conn.execute(f"DROP TABLE IF EXISTS {table}")
