"""Tests for the ingestion pipeline driver."""

from unittest.mock import MagicMock

import pytest

from conftest import APARTMENTS_HEADER, apartment_row, write_source
from rentals.exceptions import SourceNotFoundError, StorageError
from rentals.ingestion.adapters import get_adapter
from rentals.ingestion.pipeline import IngestionPipeline, preview
from rentals.models.enums import IngestMode, PipelineState, SourceStatus
from rentals.services.listing_repository import ListingRepository

ROOMFINDER_HEADER = (
    "Listing Title,Street Address,Neighborhood,Monthly Rent,Beds/Baths,Square Feet,Type,"
    "Available,Contact,Phone,URL,Description,Amenities,Photos,Notes"
)


def _sources(*names):
    return [(name, get_adapter(name)) for name in names]


@pytest.fixture
def apartments_file(data_dir):
    return write_source(
        data_dir,
        "apartments-room-data.csv",
        APARTMENTS_HEADER,
        apartment_row(title="Sunny room", link="https://rentals.example.com/1",
                      amenities="Laundry, Backyard"),
        apartment_row(title="Loft", link="https://rentals.example.com/2"),
    )


class TestMergeRuns:
    def test_second_identical_run_only_updates(self, repo, provider, apartments_file):
        first = IngestionPipeline(repo, provider, mode=IngestMode.MERGE).run(_sources("apartments"))
        snapshot = {(l.listing_link, l.title, l.price) for l in repo.list_all()}
        second = IngestionPipeline(repo, provider, mode=IngestMode.MERGE).run(_sources("apartments"))

        assert first.records_created == 2
        assert second.records_created == 0
        assert second.records_updated == first.records_created
        assert {(l.listing_link, l.title, l.price) for l in repo.list_all()} == snapshot
        assert repo.count() == 2

    def test_same_link_across_sources_keeps_last(self, repo, provider, data_dir, apartments_file):
        write_source(
            data_dir,
            "roomfinder-export.csv",
            ROOMFINDER_HEADER,
            'Loft (updated),"9 Pine St",SoMa,"$2,100",Studio,,Studio,Now,,,'
            "https://rentals.example.com/2,,,,",
        )

        summary = IngestionPipeline(repo, provider).run(_sources("apartments", "roomfinder"))

        assert summary.get("apartments").records_created == 2
        assert summary.get("roomfinder").records_updated == 1
        assert repo.count() == 2
        stored = repo.find_by_link("https://rentals.example.com/2")
        assert stored.title == "Loft (updated)"
        assert stored.price == "$2,100"

    def test_row_without_link_is_skipped(self, repo, provider, data_dir):
        write_source(
            data_dir,
            "apartments-room-data.csv",
            APARTMENTS_HEADER,
            apartment_row(title="", link=""),
            apartment_row(link="https://rentals.example.com/3"),
        )

        stats = IngestionPipeline(repo, provider).run(_sources("apartments")).get("apartments")

        assert stats.records_processed == 2
        assert stats.records_skipped == 1
        assert stats.records_created == 1
        assert repo.find_by_link("https://example.com") is None


class TestBulkRuns:
    def test_bulk_rerun_replaces_rows(self, repo, provider, apartments_file):
        IngestionPipeline(repo, provider, mode=IngestMode.BULK).run(_sources("apartments"))
        summary = IngestionPipeline(repo, provider, mode=IngestMode.BULK).run(_sources("apartments"))

        assert summary.records_created == 2
        assert summary.records_updated == 0
        assert repo.count() == 2


class TestSkippedSources:
    def test_missing_source_is_skipped(self, repo, provider, apartments_file):
        pipeline = IngestionPipeline(repo, provider)
        summary = pipeline.run(_sources("craigslist", "apartments"))

        assert [s.source_name for s in summary.skipped_sources] == ["craigslist"]
        assert summary.get("craigslist").status is SourceStatus.MISSING
        assert summary.get("craigslist").records_processed == 0
        assert summary.get("apartments").records_created == 2
        assert pipeline.state is PipelineState.DONE

    def test_undecodable_source_is_skipped(self, repo, provider, data_dir):
        (data_dir / "roomfinder-export.csv").write_bytes(b"Listing Title\n\xff\xfe\xfa\n")

        summary = IngestionPipeline(repo, provider).run(_sources("roomfinder"))

        assert summary.get("roomfinder").status is SourceStatus.UNREADABLE

    def test_outcomes_recorded_in_ingestion_log(self, repo, provider, apartments_file):
        IngestionPipeline(repo, provider).run(_sources("apartments", "craigslist"))

        entries = {entry.source_name: entry for entry in repo.recent_ingestions()}
        assert entries["apartments"].status == "complete"
        assert entries["apartments"].records_created == 2
        assert entries["craigslist"].status == "missing"


class TestSummary:
    def test_listings_newest_first(self, repo, provider, apartments_file):
        summary = IngestionPipeline(repo, provider).run(_sources("apartments"))

        assert [l.listing_link for l in summary.listings] == [
            "https://rentals.example.com/2",
            "https://rentals.example.com/1",
        ]
        assert summary.listings[1].amenities == ["Laundry", "Backyard"]

    def test_storage_failure_fails_run(self, provider, apartments_file):
        repository = MagicMock(spec=ListingRepository)
        repository.find_by_link.side_effect = StorageError("disk I/O error")
        pipeline = IngestionPipeline(repository, provider)

        with pytest.raises(StorageError):
            pipeline.run(_sources("apartments"))
        assert pipeline.state is PipelineState.FAILED
        repository.list_all.assert_not_called()

    def test_pipeline_starts_idle(self, repo, provider):
        assert IngestionPipeline(repo, provider).state is PipelineState.IDLE


class TestPreview:
    def test_preview_does_not_need_storage(self, provider, apartments_file):
        records = preview(get_adapter("apartments"), provider, limit=1)

        assert len(records) == 1
        assert records[0].title == "Sunny room"
        assert records[0].amenities == ("Laundry", "Backyard")

    def test_preview_missing_source(self, provider):
        with pytest.raises(SourceNotFoundError):
            preview(get_adapter("craigslist"), provider)
