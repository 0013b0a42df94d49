"""
Operator-facing report lines for ingestion runs.

Functions return lists of lines; the CLI prints them.
"""

from collections import Counter
from typing import Iterable

from ..config import Config
from ..models.enums import IngestMode, SourceStatus
from .protocols import RunSummary, SourceStats


def format_source_line(stats: SourceStats) -> str:
    """One line per source: counts for processed sources, reason for skipped ones."""
    if stats.status is not SourceStatus.COMPLETE:
        return f"⚠️  Skipped {stats.source_name}: {stats.detail or stats.status.value}"
    return (
        f"✅ Processed {stats.source_name}: {stats.records_created} created, "
        f"{stats.records_updated} updated ({stats.records_processed} total rows)"
    )


def format_run_summary(summary: RunSummary) -> list[str]:
    """Per-source lines followed by run totals."""
    lines = [format_source_line(stats) for stats in summary.sources]
    lines.append("")
    lines.append(f"Run summary ({summary.mode.value} mode):")
    lines.append(f"  Sources processed: {len(summary.sources) - len(summary.skipped_sources)}")
    if summary.skipped_sources:
        names = ", ".join(s.source_name for s in summary.skipped_sources)
        lines.append(f"  Sources skipped: {len(summary.skipped_sources)} ({names})")
    lines.append(f"  Rows processed: {summary.records_processed:,}")
    lines.append(f"  Listings created: {summary.records_created:,}")
    lines.append(f"  Listings updated: {summary.records_updated:,}")
    lines.append(f"  Rows skipped (no listing link): {summary.records_skipped:,}")
    if summary.mode is IngestMode.BULK:
        lines.append("  Note: bulk mode replaced all previously stored listings")
    return lines


def format_unit_type_breakdown(listings: Iterable) -> list[str]:
    """Count stored listings by unit type, most common first."""
    counts = Counter(listing.unit_type for listing in listings)
    if not counts:
        return []
    lines = ["Unit type breakdown:"]
    for unit_type, count in counts.most_common():
        lines.append(f"   {unit_type}: {count}")
    return lines


def truncate_summary(summary: str, length: int = Config.SUMMARY_PREVIEW_LENGTH) -> str:
    if len(summary) > length:
        return summary[:length] + "..."
    return summary


def format_listing(index: int, listing) -> list[str]:
    """Human-readable block for one stored listing."""
    lines = [
        f"{index}. {listing.title}",
        f"   Address: {listing.address}",
        f"   Neighborhood: {listing.neighborhood or 'N/A'}",
        f"   Price: {listing.price}",
        f"   Bed/Bath: {listing.bed_bath}",
        f"   Sqft: {listing.sqft or 'N/A'}",
        f"   Unit Type: {listing.unit_type}",
        f"   Availability: {listing.availability}",
    ]
    if listing.contact_name:
        phone = f" - {listing.contact_phone}" if listing.contact_phone else ""
        lines.append(f"   Contact: {listing.contact_name}{phone}")
    lines.append(f"   Link: {listing.listing_link}")
    if listing.amenities:
        lines.append(f"   Amenities: {', '.join(listing.amenities)}")
    if listing.summary:
        lines.append(f"   Summary: {truncate_summary(listing.summary)}")
    lines.append("")
    return lines


def format_listings(listings: list) -> list[str]:
    """Full dump of stored listings, in the order given."""
    rule = "=" * Config.REPORT_RULE_WIDTH
    lines = ["", rule, f"DATABASE LISTINGS (Total: {len(listings)})", rule, ""]
    if not listings:
        lines.append("No listings found in database.")
        return lines
    for index, listing in enumerate(listings, start=1):
        lines.extend(format_listing(index, listing))
    return lines
