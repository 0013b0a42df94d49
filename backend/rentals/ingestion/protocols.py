"""
Data classes shared by the ingestion stages.

RawRow is what the CSV parser yields; NormalizedListing is the canonical
record handed to the reconciler and the repository.
"""

from dataclasses import asdict, dataclass, field
from typing import Optional

from ..models.enums import IngestMode, ReconcileAction, SourceStatus

# Column name -> raw string value, one per parsed line
RawRow = dict[str, str]


@dataclass(frozen=True)
class NormalizedListing:
    """
    A canonical rental listing produced from one source row.

    Optional fields are None when the source left them blank or used a
    no-value sentinel. ``listing_link`` is the identity key.
    """
    title: str
    address: str
    price: str
    bed_bath: str
    unit_type: str
    availability: str
    listing_link: str
    neighborhood: Optional[str] = None
    sqft: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    summary: Optional[str] = None
    notes: Optional[str] = None
    amenities: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to a plain dict with list-valued sequences."""
        data = asdict(self)
        data["amenities"] = list(self.amenities)
        data["images"] = list(self.images)
        return data


@dataclass(frozen=True)
class ReconcileResult:
    """What the reconciler did with one record."""
    action: ReconcileAction
    identity: Optional[str]


@dataclass
class SourceStats:
    """Statistics for one source within a run."""
    source_name: str
    status: SourceStatus = SourceStatus.COMPLETE
    records_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    detail: Optional[str] = None  # Why the source was skipped

    def record(self, action: ReconcileAction) -> None:
        """Count one reconciled record."""
        self.records_processed += 1
        if action is ReconcileAction.CREATED:
            self.records_created += 1
        elif action is ReconcileAction.UPDATED:
            self.records_updated += 1
        else:
            self.records_skipped += 1

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/storage."""
        return {
            "source_name": self.source_name,
            "status": self.status.value,
            "records_processed": self.records_processed,
            "records_created": self.records_created,
            "records_updated": self.records_updated,
            "records_skipped": self.records_skipped,
        }


@dataclass
class RunSummary:
    """Aggregate result of a pipeline run."""
    mode: IngestMode
    sources: list[SourceStats] = field(default_factory=list)
    listings: list = field(default_factory=list)  # StoredListing, newest first

    @property
    def records_processed(self) -> int:
        return sum(s.records_processed for s in self.sources)

    @property
    def records_created(self) -> int:
        return sum(s.records_created for s in self.sources)

    @property
    def records_updated(self) -> int:
        return sum(s.records_updated for s in self.sources)

    @property
    def records_skipped(self) -> int:
        return sum(s.records_skipped for s in self.sources)

    @property
    def skipped_sources(self) -> list[SourceStats]:
        """Sources that contributed nothing because they were missing or unreadable."""
        return [s for s in self.sources if s.status is not SourceStatus.COMPLETE]

    def get(self, source_name: str) -> Optional[SourceStats]:
        for stats in self.sources:
            if stats.source_name == source_name:
                return stats
        return None
