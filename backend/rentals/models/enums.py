"""
Enums for type-safe string constants in the ingestion backend.
"""

from enum import Enum


class IngestMode(str, Enum):
    """Reconciliation strategy for a run."""
    BULK = "bulk"    # Clear storage once, then create every valid record
    MERGE = "merge"  # Look up each record by listing link, create or update


class ReconcileAction(str, Enum):
    """Outcome of reconciling one normalized listing."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


class ImageShape(str, Enum):
    """How a source exposes listing images."""
    LIST = "list"                          # Comma-joined list column
    SINGLE = "single"                      # One image URL column
    LIST_THEN_SINGLE = "list_then_single"  # Both; list column wins


class SourceStatus(str, Enum):
    """Per-source outcome of a pipeline run."""
    COMPLETE = "complete"
    MISSING = "missing"
    UNREADABLE = "unreadable"


class PipelineState(str, Enum):
    """Pipeline driver lifecycle."""
    IDLE = "idle"
    READING_SOURCE = "reading_source"
    PARSING = "parsing"
    NORMALIZING = "normalizing"
    RECONCILING = "reconciling"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"
