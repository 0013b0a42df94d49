"""
Rental listing ingestion backend.

Reconciles CSV exports from third-party listing sources into a single
deduplicated listings table.
"""
