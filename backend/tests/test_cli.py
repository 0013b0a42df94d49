"""Tests for the ingestion CLI entry point and configuration."""

import pytest

from conftest import APARTMENTS_HEADER, apartment_row, write_source
from rentals.cli import main
from rentals.config import Config
from rentals.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "INGEST_SOURCES", "INGEST_MODE", "SOURCE_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


class TestConfig:
    def test_missing_database_url(self):
        with pytest.raises(ConfigurationError):
            Config.database_path()

    def test_non_sqlite_url_rejected(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/rentals")
        with pytest.raises(ConfigurationError):
            Config.database_path()

    def test_sqlite_path(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:////var/data/listings.db")
        assert Config.database_path() == "/var/data/listings.db"

    def test_sources_and_mode(self, monkeypatch):
        assert Config.ingest_sources() == ["apartments"]
        assert Config.ingest_mode() == "merge"
        monkeypatch.setenv("INGEST_SOURCES", "roomfinder, apartments,")
        monkeypatch.setenv("INGEST_MODE", "BULK")
        assert Config.ingest_sources() == ["roomfinder", "apartments"]
        assert Config.ingest_mode() == "bulk"

    def test_invalid_mode(self, monkeypatch):
        monkeypatch.setenv("INGEST_MODE", "append")
        with pytest.raises(ConfigurationError):
            Config.ingest_mode()


class TestMain:
    def test_missing_database_url_exits_non_zero(self, data_dir):
        assert main(["--data-dir", str(data_dir)]) == 1

    def test_successful_run(self, database_url, data_dir, capsys):
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER,
                     apartment_row(summary="z" * 150))

        code = main(["--source", "apartments", "--data-dir", str(data_dir)])

        out = capsys.readouterr().out
        assert code == 0
        assert "✅ Processed apartments: 1 created, 0 updated (1 total rows)" in out
        assert "DATABASE LISTINGS (Total: 1)" in out
        assert f"   Summary: {'z' * 100}..." in out

    def test_missing_source_still_succeeds(self, database_url, data_dir, capsys):
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER, apartment_row())

        code = main(["-s", "craigslist", "-s", "apartments", "--data-dir", str(data_dir), "--no-dump"])

        out = capsys.readouterr().out
        assert code == 0
        assert "⚠️  Skipped craigslist: source file not found" in out
        assert "✅ Processed apartments: 1 created" in out
        assert "DATABASE LISTINGS" not in out

    def test_unknown_source_exits_non_zero(self, database_url, data_dir):
        assert main(["-s", "zillow", "--data-dir", str(data_dir)]) == 1

    def test_rerun_reports_updates(self, database_url, data_dir, capsys):
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER, apartment_row())
        main(["-s", "apartments", "--data-dir", str(data_dir), "--no-dump"])
        capsys.readouterr()

        assert main(["-s", "apartments", "--data-dir", str(data_dir), "--no-dump"]) == 0
        assert "✅ Processed apartments: 0 created, 1 updated (1 total rows)" in capsys.readouterr().out

    def test_history(self, database_url, data_dir, capsys):
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER, apartment_row())
        main(["-s", "apartments", "--data-dir", str(data_dir), "--no-dump"])
        capsys.readouterr()

        assert main(["--history"]) == 0
        out = capsys.readouterr().out
        assert "Stored listings: 1" in out
        assert "apartments (merge, complete)" in out

    def test_preview_without_database(self, data_dir, capsys):
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER, apartment_row())

        assert main(["--preview", "apartments", "--data-dir", str(data_dir)]) == 0
        assert "1. Sunny room" in capsys.readouterr().out

    def test_storage_failure_exits_non_zero(self, tmp_path, monkeypatch, data_dir):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{blocker / 'cli.db'}")
        write_source(data_dir, "apartments-room-data.csv", APARTMENTS_HEADER, apartment_row())

        assert main(["-s", "apartments", "--data-dir", str(data_dir)]) == 1
