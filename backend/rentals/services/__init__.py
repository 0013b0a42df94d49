from .listing_repository import IngestionLogEntry, ListingRepository, StoredListing

__all__ = ["IngestionLogEntry", "ListingRepository", "StoredListing"]
