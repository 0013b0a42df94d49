"""
Field normalization for listing ingestion.

Maps a canonical raw row (source columns already renamed by the adapter)
to a NormalizedListing. Blank values and no-value sentinels become None,
required fields get fixed fallbacks, and list columns are split on commas.
"""

import re
from typing import Iterable, Optional, Pattern

from .protocols import NormalizedListing, RawRow

NO_VALUE_SENTINELS = frozenset({
    "--",
    "n/a",
    "none",
    "no phone listed",
    "no contact listed",
})

NO_AMENITIES = re.compile(r"no amenities", re.IGNORECASE)
NO_IMAGES = re.compile(r"no (images|photos)", re.IGNORECASE)


def required_with_fallback(value: Optional[str], fallback: str) -> str:
    """Trimmed value, or ``fallback`` if blank."""
    trimmed = (value or "").strip()
    return trimmed or fallback


def optional_or_absent(
    value: Optional[str],
    sentinels: Iterable[str] = NO_VALUE_SENTINELS,
) -> Optional[str]:
    """Trimmed value, or None if blank or a (case-insensitive) sentinel."""
    trimmed = (value or "").strip()
    if not trimmed:
        return None
    lowered = trimmed.lower()
    if any(lowered == sentinel.lower() for sentinel in sentinels):
        return None
    return trimmed


def list_field(value: Optional[str], empty_pattern: Optional[Pattern] = None) -> tuple[str, ...]:
    """
    Split a comma-joined column into trimmed entries.

    Returns an empty tuple for blank text or text matching ``empty_pattern``
    (e.g. "No amenities available"). Order and duplicates are preserved.
    """
    normalized = (value or "").strip()
    if not normalized:
        return ()
    if empty_pattern is not None and empty_pattern.search(normalized):
        return ()
    return tuple(entry.strip() for entry in normalized.split(",") if entry.strip())


def resolve_images(images: Optional[str], image_url: Optional[str]) -> tuple[str, ...]:
    """List column first; a single URL column is the fallback."""
    resolved = list_field(images, NO_IMAGES)
    if resolved:
        return resolved
    single = optional_or_absent(image_url)
    if single and not NO_IMAGES.search(single):
        return (single,)
    return ()


class ListingNormalizer:
    """
    Normalizes canonical rows into NormalizedListing records.

    Fallbacks for required fields:
    - title → "Untitled listing"
    - price → "Contact for pricing"
    - unit_type → "Room"
    - listing_link → placeholder URL (records keeping it are never stored)
    """

    PLACEHOLDER_LINK = "https://example.com"

    FALLBACKS = {
        "title": "Untitled listing",
        "address": "Unknown address",
        "price": "Contact for pricing",
        "bed_bath": "Unknown configuration",
        "unit_type": "Room",
        "availability": "Check availability",
        "listing_link": PLACEHOLDER_LINK,
    }

    OPTIONAL_FIELDS = (
        "neighborhood",
        "sqft",
        "contact_name",
        "contact_phone",
        "summary",
        "notes",
    )

    def __init__(self, sentinels: Optional[Iterable[str]] = None):
        """
        Initialize normalizer.

        Args:
            sentinels: No-value sentinels for optional fields (defaults to NO_VALUE_SENTINELS)
        """
        self.sentinels = frozenset(sentinels) if sentinels is not None else NO_VALUE_SENTINELS

    def normalize(self, row: RawRow) -> NormalizedListing:
        """
        Normalize one canonical row.

        Args:
            row: Mapping of canonical field name to raw value. Unknown keys are ignored.

        Returns:
            NormalizedListing
        """
        required = {
            name: required_with_fallback(row.get(name), fallback)
            for name, fallback in self.FALLBACKS.items()
        }
        optional = {
            name: optional_or_absent(row.get(name), self.sentinels)
            for name in self.OPTIONAL_FIELDS
        }
        return NormalizedListing(
            **required,
            **optional,
            amenities=list_field(row.get("amenities"), NO_AMENITIES),
            images=resolve_images(row.get("images"), row.get("image_url")),
        )

    def is_placeholder_link(self, listing_link: Optional[str]) -> bool:
        """True if the link is missing or still the fallback placeholder."""
        return not listing_link or listing_link == self.FALLBACKS["listing_link"]
