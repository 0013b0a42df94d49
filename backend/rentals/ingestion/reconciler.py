"""
Identity-key reconciliation of normalized listings against storage.

Bulk mode clears the table once per run and creates every valid record.
Merge mode looks each record up by listing link and updates or creates,
so repeated runs converge instead of duplicating rows.
"""

import logging
from typing import Optional

from ..exceptions import InvalidRecordError
from ..models.enums import IngestMode, ReconcileAction
from .normalizers import ListingNormalizer
from .protocols import NormalizedListing, ReconcileResult

logger = logging.getLogger(__name__)


class ListingReconciler:
    """
    Decides insert vs. update for each normalized listing.

    Records must be passed one at a time in source order; with merge mode
    the last record seen for a link wins. Storage errors are not retried.
    """

    def __init__(self, repository, mode: IngestMode = IngestMode.MERGE):
        """
        Initialize reconciler.

        Args:
            repository: Storage with clear_all/find_by_link/create/update
            mode: IngestMode.BULK or IngestMode.MERGE
        """
        self.repository = repository
        self.mode = IngestMode(mode)
        self._cleared = False
        self._seen_links: set[str] = set()

    def start_run(self):
        """Reset per-run state. Bulk mode clears storage again on the next create."""
        self._cleared = False
        self._seen_links.clear()

    def reconcile(
        self,
        record: NormalizedListing,
        source_name: Optional[str] = None,
        row_number: Optional[int] = None,
    ) -> ReconcileResult:
        """
        Reconcile one record against storage.

        Args:
            record: Normalized listing
            source_name: Source the record came from (for log context)
            row_number: Data row number within the source (for log context)

        Returns:
            ReconcileResult with created, updated or skipped
        """
        try:
            self.validate(record)
        except InvalidRecordError as e:
            location = source_name or "unknown source"
            if row_number:
                location += f" row {row_number}"
            logger.warning(
                f"Skipping listing from {location}: {e} "
                f"(title='{record.title}', address='{record.address}')"
            )
            return ReconcileResult(ReconcileAction.SKIPPED, None)

        if self.mode is IngestMode.BULK:
            return self._create_bulk(record, source_name)
        return self._merge(record)

    @staticmethod
    def validate(record: NormalizedListing):
        """Raise InvalidRecordError if the record has no usable identity key."""
        if not record.listing_link:
            raise InvalidRecordError("missing listing link")
        if record.listing_link == ListingNormalizer.PLACEHOLDER_LINK:
            raise InvalidRecordError("listing link is a placeholder")

    def _create_bulk(self, record: NormalizedListing, source_name: Optional[str]) -> ReconcileResult:
        if not self._cleared:
            removed = self.repository.clear_all()
            self._cleared = True
            logger.warning(f"Bulk mode: cleared {removed} existing listing(s) before reseeding")

        if record.listing_link in self._seen_links:
            logger.warning(
                f"Duplicate listing link in bulk run (not deduplicated): {record.listing_link} "
                f"from {source_name or 'unknown source'}"
            )
        self._seen_links.add(record.listing_link)

        self.repository.create(record)
        return ReconcileResult(ReconcileAction.CREATED, record.listing_link)

    def _merge(self, record: NormalizedListing) -> ReconcileResult:
        existing = self.repository.find_by_link(record.listing_link)
        if existing is not None:
            self.repository.update(existing.id, record)
            logger.debug(f"Updated listing {existing.id} for {record.listing_link}")
            return ReconcileResult(ReconcileAction.UPDATED, record.listing_link)

        stored = self.repository.create(record)
        logger.debug(f"Created listing {stored.id} for {record.listing_link}")
        return ReconcileResult(ReconcileAction.CREATED, record.listing_link)
