"""
Listing repository with SQLite backend.

Storage collaborator for the ingestion pipeline:
- Identity lookup by listing link
- Create / update / bulk clear
- Newest-first listing for run reports
- Ingestion audit log
"""

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..db import BaseRepository
from ..ingestion.protocols import NormalizedListing, SourceStats
from ..models.enums import IngestMode

_LISTING_COLUMNS = (
    "title",
    "address",
    "neighborhood",
    "price",
    "bed_bath",
    "sqft",
    "unit_type",
    "availability",
    "contact_name",
    "contact_phone",
    "listing_link",
    "summary",
    "amenities",
    "images",
    "notes",
)


@dataclass
class StoredListing:
    """A listing row from the database."""
    id: str
    title: str
    address: str
    price: str
    bed_bath: str
    unit_type: str
    availability: str
    listing_link: str
    created_at: str
    updated_at: str
    neighborhood: Optional[str] = None
    sqft: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    summary: Optional[str] = None
    notes: Optional[str] = None
    amenities: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)


@dataclass
class IngestionLogEntry:
    """One row of the ingestion audit log."""
    source_name: str
    mode: str
    status: str
    records_processed: int
    records_created: int
    records_updated: int
    records_skipped: int
    run_at: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ListingRepository(BaseRepository):
    """
    SQLite repository for reconciled listings.

    ``listing_link`` is indexed but not unique: bulk mode stores whatever
    the sources contain, merge mode keeps it unique by looking up first.
    """

    def clear_all(self) -> int:
        """Delete every listing. Returns number of rows removed."""
        with self._transaction() as cursor:
            cursor.execute("SELECT COUNT(*) FROM listings")
            removed = cursor.fetchone()[0]
            cursor.execute("DELETE FROM listings")
        return removed

    def find_by_link(self, listing_link: str) -> Optional[StoredListing]:
        """Find the stored listing for an identity key."""
        with self._cursor() as cursor:
            cursor.execute("""
                SELECT * FROM listings
                WHERE listing_link = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
            """, (listing_link,))
            row = cursor.fetchone()
        return self._row_to_listing(row) if row else None

    def create(self, record: NormalizedListing) -> StoredListing:
        """Insert a new listing with a generated id and timestamps."""
        listing_id = uuid.uuid4().hex
        now = _now()
        values = self._record_values(record)

        columns = ", ".join(("id",) + _LISTING_COLUMNS + ("created_at", "updated_at"))
        placeholders = ", ".join("?" for _ in range(len(_LISTING_COLUMNS) + 3))
        with self._transaction() as cursor:
            cursor.execute(
                f"INSERT INTO listings ({columns}) VALUES ({placeholders})",
                (listing_id, *values, now, now),
            )
        return self.get(listing_id)

    def update(self, listing_id: str, record: NormalizedListing) -> StoredListing:
        """Overwrite every listing field of an existing row."""
        assignments = ", ".join(f"{column} = ?" for column in _LISTING_COLUMNS)
        with self._transaction() as cursor:
            cursor.execute(
                f"UPDATE listings SET {assignments}, updated_at = ? WHERE id = ?",
                (*self._record_values(record), _now(), listing_id),
            )
            if cursor.rowcount == 0:
                raise sqlite3.IntegrityError(f"Listing {listing_id} does not exist")
        return self.get(listing_id)

    def get(self, listing_id: str) -> Optional[StoredListing]:
        """Get listing by id."""
        with self._cursor() as cursor:
            cursor.execute("SELECT * FROM listings WHERE id = ?", (listing_id,))
            row = cursor.fetchone()
        return self._row_to_listing(row) if row else None

    def list_all(self) -> list[StoredListing]:
        """All listings, newest created first."""
        with self._cursor() as cursor:
            cursor.execute("SELECT * FROM listings ORDER BY created_at DESC, rowid DESC")
            rows = cursor.fetchall()
        return [self._row_to_listing(row) for row in rows]

    def count(self) -> int:
        """Get total listing count."""
        with self._cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM listings")
            return cursor.fetchone()[0]

    def log_ingestion(self, stats: SourceStats, mode: IngestMode) -> None:
        """Record one source's outcome in the ingestion log."""
        with self._transaction() as cursor:
            cursor.execute("""
                INSERT INTO ingestion_log
                (source_name, mode, status, records_processed, records_created,
                 records_updated, records_skipped, run_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                stats.source_name,
                mode.value,
                stats.status.value,
                stats.records_processed,
                stats.records_created,
                stats.records_updated,
                stats.records_skipped,
                _now(),
            ))

    def recent_ingestions(self, limit: int = 10) -> list[IngestionLogEntry]:
        """Most recent ingestion log entries, newest first."""
        with self._cursor() as cursor:
            cursor.execute("""
                SELECT source_name, mode, status, records_processed, records_created,
                       records_updated, records_skipped, run_at
                FROM ingestion_log
                ORDER BY run_at DESC, id DESC
                LIMIT ?
            """, (limit,))
            rows = cursor.fetchall()
        return [IngestionLogEntry(**dict(row)) for row in rows]

    @staticmethod
    def _record_values(record: NormalizedListing) -> tuple:
        data = record.to_dict()
        data["amenities"] = json.dumps(data["amenities"])
        data["images"] = json.dumps(data["images"])
        return tuple(data[column] for column in _LISTING_COLUMNS)

    @staticmethod
    def _row_to_listing(row: sqlite3.Row) -> StoredListing:
        """Convert database row to StoredListing."""
        data = dict(row)
        data["amenities"] = json.loads(data["amenities"] or "[]")
        data["images"] = json.loads(data["images"] or "[]")
        return StoredListing(**data)
