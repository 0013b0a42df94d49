from .enums import ImageShape, IngestMode, PipelineState, ReconcileAction, SourceStatus

__all__ = [
    "ImageShape",
    "IngestMode",
    "PipelineState",
    "ReconcileAction",
    "SourceStatus",
]
