"""
Listing ingestion package.

Provides a sequential pipeline for reconciling listing exports from
several sources into the listings table, keyed on listing link.
"""

from .protocols import NormalizedListing, RawRow, ReconcileResult, RunSummary, SourceStats
from .csv_parser import parse_rows
from .normalizers import ListingNormalizer
from .reconciler import ListingReconciler
from .pipeline import IngestionPipeline

__all__ = [
    "NormalizedListing",
    "RawRow",
    "ReconcileResult",
    "RunSummary",
    "SourceStats",
    "parse_rows",
    "ListingNormalizer",
    "ListingReconciler",
    "IngestionPipeline",
]
