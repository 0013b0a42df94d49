"""
Listing ingestion CLI.

Usage:
    rentals-ingest                              # Ingest INGEST_SOURCES in INGEST_MODE
    rentals-ingest --source apartments          # Ingest one source
    rentals-ingest -s apartments -s craigslist  # Ingest several, in order
    rentals-ingest --mode bulk                  # Clear the table and reseed
    rentals-ingest --preview roomfinder         # Preview first 10 normalized records
    rentals-ingest --history                    # Show recent ingestion log
    rentals-ingest --list-sources               # Show registered sources
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from .config import Config
from .db import ensure_schema
from .exceptions import ConfigurationError, RentalsError
from .ingestion.adapters import available_sources, get_adapter
from .ingestion.pipeline import IngestionPipeline, preview
from .ingestion.reporting import format_listings, format_run_summary, format_unit_type_breakdown
from .ingestion.sources import SourceFileProvider
from .models.enums import IngestMode
from .services.listing_repository import ListingRepository

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure logging from environment."""
    logging.basicConfig(
        level=getattr(logging, Config.log_level(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rental listing ingestion CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "--source", "-s",
        action="append",
        help="Source to ingest (repeatable; default: INGEST_SOURCES)"
    )
    parser.add_argument(
        "--mode", "-m",
        choices=[mode.value for mode in IngestMode],
        help="Reconciliation mode (default: INGEST_MODE or merge)"
    )
    parser.add_argument(
        "--data-dir",
        help="Directory holding source exports (default: SOURCE_DATA_DIR)"
    )
    parser.add_argument(
        "--preview", "-p",
        choices=available_sources(),
        help="Preview normalized records from a source"
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Show recent ingestion log entries"
    )
    parser.add_argument(
        "--no-dump",
        action="store_true",
        help="Skip the stored listings dump after a run"
    )
    parser.add_argument(
        "--list-sources",
        action="store_true",
        help="List registered sources"
    )
    return parser


def preview_source(source_name: str, data_dir: str) -> int:
    """Print the first normalized records of one source."""
    adapter = get_adapter(source_name)
    print(f"\nPreview: {source_name} (first {Config.PREVIEW_LIMIT} records)")
    print("=" * 60)
    try:
        records = preview(adapter, SourceFileProvider(data_dir), limit=Config.PREVIEW_LIMIT)
    except RentalsError as e:
        print(f"\nError: {e}")
        return 1

    for i, record in enumerate(records, 1):
        print(f"\n{i}. {record.title}")
        print(f"   Address: {record.address}")
        print(f"   Price: {record.price}  Bed/Bath: {record.bed_bath}  Type: {record.unit_type}")
        print(f"   Link: {record.listing_link}")
        print(f"   Amenities: {len(record.amenities)}  Images: {len(record.images)}")
    return 0


def show_history(db_path: str) -> int:
    """Print the ingestion log."""
    ensure_schema(db_path)
    with ListingRepository(db_path) as repo:
        entries = repo.recent_ingestions()
        print(f"\nStored listings: {repo.count():,}")
    print("\nIngestion history:")
    if not entries:
        print("  No ingestion runs recorded.")
    for entry in entries:
        print(
            f"  {entry.run_at}: {entry.source_name} ({entry.mode}, {entry.status}) - "
            f"{entry.records_processed:,} rows, {entry.records_created:,} created, "
            f"{entry.records_updated:,} updated, {entry.records_skipped:,} skipped"
        )
    return 0


def run_ingestion(source_names: Sequence[str], mode: IngestMode, data_dir: str,
                  db_path: str, dump: bool = True) -> int:
    """Run the pipeline over the given sources and print the report."""
    sources = [(name, get_adapter(name)) for name in source_names]

    ensure_schema(db_path)
    with ListingRepository(db_path) as repo:
        pipeline = IngestionPipeline(repo, SourceFileProvider(data_dir), mode=mode)
        summary = pipeline.run(sources)

    print()
    for line in format_run_summary(summary):
        print(line)
    breakdown = format_unit_type_breakdown(summary.listings)
    if breakdown:
        print()
        for line in breakdown:
            print(line)
    if dump:
        for line in format_listings(summary.listings):
            print(line)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    configure_logging()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_sources:
        for name in available_sources():
            adapter = get_adapter(name)
            print(f"  {name}: {adapter.file_name} (images: {adapter.image_shape.value})")
        return 0

    data_dir = args.data_dir or Config.source_data_dir()

    if args.preview:
        return preview_source(args.preview, data_dir)

    mode = None
    try:
        db_path = Config.database_path()
        if args.history:
            return show_history(db_path)

        mode = IngestMode(args.mode or Config.ingest_mode())
        source_names = args.source or Config.ingest_sources()
        unknown = [name for name in source_names if name not in available_sources()]
        if unknown:
            raise ConfigurationError(
                f"Unknown source(s): {', '.join(unknown)}. Available: {', '.join(available_sources())}"
            )
        return run_ingestion(source_names, mode, data_dir, db_path, dump=not args.no_dump)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except RentalsError as e:
        logger.error(f"Ingestion failed: {e}")
        if mode is IngestMode.BULK:
            logger.error("Bulk mode may have cleared stored listings before the failure")
        return 1
    except Exception:
        logger.exception("Ingestion failed with an unexpected error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
