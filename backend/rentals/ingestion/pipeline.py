"""
Listing ingestion pipeline.

Orchestrates the flow: file provider → parser → adapter → normalizer →
reconciler → repository
"""

import logging
from typing import Optional, Sequence

from ..exceptions import ParseError, SourceNotFoundError
from ..models.enums import IngestMode, PipelineState, SourceStatus
from .adapters import SourceAdapter
from .csv_parser import parse_rows
from .normalizers import ListingNormalizer
from .protocols import NormalizedListing, RunSummary, SourceStats
from .reconciler import ListingReconciler
from .sources import SourceFileProvider

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Main ingestion pipeline for listing exports.

    Coordinates:
    1. Reading each configured source from the file provider
    2. Parsing and normalizing rows through the source's adapter
    3. Reconciling records against the repository
    4. Summarizing the run

    Sources and records are processed strictly in order. A missing or
    unreadable source is skipped; any other error fails the run.
    """

    def __init__(
        self,
        repository,
        provider: SourceFileProvider,
        normalizer: Optional[ListingNormalizer] = None,
        mode: IngestMode = IngestMode.MERGE,
    ):
        """
        Initialize pipeline.

        Args:
            repository: Listing repository (storage collaborator)
            provider: Source file provider
            normalizer: Listing normalizer (creates default if None)
            mode: Reconciliation mode
        """
        self.repository = repository
        self.provider = provider
        self.normalizer = normalizer or ListingNormalizer()
        self.mode = IngestMode(mode)
        self.reconciler = ListingReconciler(repository, self.mode)
        self.state = PipelineState.IDLE

    def run(self, sources: Sequence[tuple[str, SourceAdapter]]) -> RunSummary:
        """
        Ingest every source in order.

        Args:
            sources: Ordered (source_name, adapter) pairs

        Returns:
            RunSummary with per-source stats and the stored listings
        """
        summary = RunSummary(mode=self.mode)
        self.reconciler.start_run()
        logger.info(f"Starting {self.mode.value} ingestion of {len(sources)} source(s)")

        try:
            for source_name, adapter in sources:
                stats = self.ingest_source(source_name, adapter)
                summary.sources.append(stats)
                self.repository.log_ingestion(stats, self.mode)

            self._transition(PipelineState.SUMMARIZING)
            summary.listings = self.repository.list_all()
        except Exception:
            self._transition(PipelineState.FAILED)
            logger.error(f"Ingestion failed in {self.mode.value} mode")
            raise

        self._transition(PipelineState.DONE)
        logger.info(
            f"Ingestion complete: {summary.records_created} created, "
            f"{summary.records_updated} updated, {summary.records_skipped} skipped, "
            f"{len(summary.skipped_sources)} source(s) skipped"
        )
        return summary

    def ingest_source(self, source_name: str, adapter: SourceAdapter) -> SourceStats:
        """Read, parse, normalize and reconcile one source."""
        stats = SourceStats(source_name=source_name)

        self._transition(PipelineState.READING_SOURCE)
        try:
            text = self.provider.read_text(adapter.file_name)
        except SourceNotFoundError as e:
            logger.warning(f"Skipping source {source_name}: {e}")
            stats.status = SourceStatus.MISSING
            stats.detail = "source file not found"
            return stats
        except ParseError as e:
            logger.warning(f"Skipping source {source_name}: {e}")
            stats.status = SourceStatus.UNREADABLE
            stats.detail = "source file is not valid text"
            return stats

        self._transition(PipelineState.PARSING)
        for row_number, row in enumerate(parse_rows(text), start=1):
            self._transition(PipelineState.NORMALIZING)
            record = self.normalizer.normalize(adapter.canonicalize(row))

            self._transition(PipelineState.RECONCILING)
            try:
                result = self.reconciler.reconcile(record, source_name, row_number)
            except Exception:
                logger.error(
                    f"Storage failure on {source_name} row {row_number} "
                    f"(title='{record.title}', address='{record.address}')"
                )
                raise
            stats.record(result.action)

            if stats.records_processed % 1000 == 0:
                logger.info(f"{source_name}: processed {stats.records_processed} records...")

        logger.info(
            f"Processed {source_name}: {stats.records_created} created, "
            f"{stats.records_updated} updated, {stats.records_skipped} skipped "
            f"({stats.records_processed} total rows)"
        )
        return stats

    def _transition(self, state: PipelineState):
        if state is not self.state:
            logger.debug(f"Pipeline state: {self.state.value} -> {state.value}")
            self.state = state


def preview(
    adapter: SourceAdapter,
    provider: SourceFileProvider,
    limit: int = 10,
    normalizer: Optional[ListingNormalizer] = None,
) -> list[NormalizedListing]:
    """
    Preview normalized records without touching storage.

    Args:
        adapter: Source adapter
        provider: Source file provider
        limit: Max records to return
        normalizer: Listing normalizer (creates default if None)

    Returns:
        List of normalized records
    """
    normalizer = normalizer or ListingNormalizer()
    text = provider.read_text(adapter.file_name)

    results = []
    for i, row in enumerate(parse_rows(text)):
        if i >= limit:
            break
        results.append(normalizer.normalize(adapter.canonicalize(row)))
    return results
