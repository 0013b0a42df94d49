"""
Source adapters for listing ingestion.

The set of sources is fixed: each name maps to one YAML column mapping
under ``configs/``. Adding a source means adding a config file and an
entry here.
"""

from pathlib import Path

from .source_adapter import CANONICAL_FIELDS, SourceAdapter

CONFIG_DIR = Path(__file__).parent / "configs"

SOURCES = {
    "apartments": "apartments.yaml",
    "roomfinder": "roomfinder.yaml",
    "craigslist": "craigslist.yaml",
}


def available_sources() -> list[str]:
    """Registered source names in declaration order."""
    return list(SOURCES)


def get_adapter(source_name: str) -> SourceAdapter:
    """Get the adapter for a registered source."""
    if source_name not in SOURCES:
        available = ", ".join(SOURCES)
        raise ValueError(f"Unknown source: {source_name}. Available: {available}")
    return SourceAdapter.from_yaml(CONFIG_DIR / SOURCES[source_name])


__all__ = [
    "CANONICAL_FIELDS",
    "SOURCES",
    "SourceAdapter",
    "available_sources",
    "get_adapter",
]
