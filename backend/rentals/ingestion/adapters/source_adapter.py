"""
Config-driven source adapter for listing exports.

Uses YAML configuration to map a source's CSV headers onto canonical
listing fields.
"""

from dataclasses import dataclass, field
from typing import Optional

import yaml

from ...models.enums import ImageShape
from ..protocols import RawRow

CANONICAL_FIELDS = (
    "title",
    "address",
    "neighborhood",
    "price",
    "bed_bath",
    "sqft",
    "unit_type",
    "availability",
    "contact_name",
    "contact_phone",
    "listing_link",
    "summary",
    "amenities",
    "images",
    "image_url",
    "notes",
)

# Image columns each shape is allowed to read
_IMAGE_FIELDS = {
    ImageShape.LIST: ("images",),
    ImageShape.SINGLE: ("image_url",),
    ImageShape.LIST_THEN_SINGLE: ("images", "image_url"),
}


@dataclass
class SourceAdapter:
    """
    Column mapping for one listing source.

    Config structure:
    ```yaml
    source_name: craigslist
    file_name: craigslist-rentals.csv
    image_shape: single

    column_mapping:
      title: posting_title
      address: street+city
      listing_link: post_url|url
    ```

    Column specs:
    - Simple column name: "title"
    - Fallback (pipe separated): "post_url|url" tries each in order
    - Compound (plus separated): "street+city" joins non-blank parts with ", "

    Fields without a mapping are read from a column of the same name.
    """
    source_name: str
    file_name: str
    image_shape: ImageShape = ImageShape.LIST_THEN_SINGLE
    column_mapping: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.column_mapping) - set(CANONICAL_FIELDS)
        if unknown:
            raise ValueError(
                f"Unknown fields in column mapping for {self.source_name}: {', '.join(sorted(unknown))}"
            )

    @classmethod
    def from_yaml(cls, config_path) -> "SourceAdapter":
        """Load and validate an adapter from a YAML config file."""
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        required = ["source_name", "file_name"]
        for key in required:
            if key not in config:
                raise ValueError(f"Missing required config field '{key}' in {config_path}")

        shape = config.get("image_shape", ImageShape.LIST_THEN_SINGLE.value)
        try:
            image_shape = ImageShape(shape)
        except ValueError:
            raise ValueError(f"Unknown image_shape '{shape}' in {config_path}") from None

        return cls(
            source_name=config["source_name"],
            file_name=config["file_name"],
            image_shape=image_shape,
            column_mapping=dict(config.get("column_mapping") or {}),
        )

    def canonicalize(self, row: RawRow) -> RawRow:
        """Map a source row onto canonical field names."""
        allowed_images = _IMAGE_FIELDS[self.image_shape]
        canonical: RawRow = {}
        for name in CANONICAL_FIELDS:
            if name in ("images", "image_url") and name not in allowed_images:
                continue
            value = self._get_value(row, self.column_mapping.get(name, name))
            if value is not None:
                canonical[name] = value
        return canonical

    def _get_value(self, row: RawRow, column_spec: Optional[str]) -> Optional[str]:
        """Get value from row by column spec (see class docstring)."""
        if not column_spec:
            return None

        if '|' in column_spec:
            for spec in column_spec.split('|'):
                value = self._get_value(row, spec.strip())
                if value:
                    return value
            return None

        if '+' in column_spec:
            parts = []
            for col in column_spec.split('+'):
                val = row.get(col.strip())
                if val and val.strip():
                    parts.append(val.strip())
            return ', '.join(parts) if parts else None

        value = row.get(column_spec)
        if value is None:
            return None
        return value.strip()
