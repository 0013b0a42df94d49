"""
Pytest configuration for the listing ingestion tests.
"""

from pathlib import Path

import pytest

from rentals.db import ensure_schema
from rentals.ingestion.sources import SourceFileProvider
from rentals.services.listing_repository import ListingRepository

APARTMENTS_HEADER = (
    "title,address,neighborhood,price,bed_bath,sqft,unit_type,availability,"
    "contact_name,contact_phone,listing_link,summary,amenities,images,image_url,notes"
)


@pytest.fixture
def db_path(tmp_path):
    """Create a fresh DB with schema applied."""
    path = str(tmp_path / "test.db")
    ensure_schema(path)
    return path


@pytest.fixture
def repo(db_path):
    repository = ListingRepository(db_path=db_path)
    yield repository
    repository.close()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "sources"
    path.mkdir()
    return path


@pytest.fixture
def provider(data_dir):
    return SourceFileProvider(data_dir)


def write_source(data_dir: Path, file_name: str, *lines: str) -> Path:
    """Write a source export from header and row lines."""
    path = data_dir / file_name
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def apartment_row(title="Sunny room", address="1 Main St", price="$1,500/mo",
                  link="https://rentals.example.com/1", amenities="", images="",
                  image_url="", summary="", contact_name="", contact_phone=""):
    """Build one CSV line in the apartments export layout."""
    fields = [
        title, address, "Mission", price, "1 bd / 1 ba", "", "Room", "Available now",
        contact_name, contact_phone, link, summary, amenities, images, image_url, "",
    ]
    return ",".join(f'"{value}"' if "," in value else value for value in fields)
