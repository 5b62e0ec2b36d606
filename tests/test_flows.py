"""Tests for the fetch and build flows."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from ghost_sightings.errors import StoreError
from ghost_sightings.flows import build, fetch
from ghost_sightings.store import SIGHTINGS_PATH, DataStore

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import SightingFactory


class TestFetchFlow:
    """fetch-sightings: skip while fresh, else fetch and cache."""

    @patch("ghost_sightings.flows.fetch.SightingRepository.from_settings")
    def test_fetch_and_save(
        self,
        mock_from_settings: Mock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        make_sighting: SightingFactory,
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(fetch, "store", store)
        sightings = [make_sighting(), make_sighting(city="Salem", state="MA")]
        mock_from_settings.return_value.fetch_all.return_value = sightings

        result = fetch.fetch_all()

        assert result == {"skipped": False, "sightings": 2}
        assert (tmp_path / "live" / "sightings.json").exists()
        assert store.load_sightings() == sightings
        assert store.is_fresh(SIGHTINGS_PATH)

    @patch("ghost_sightings.flows.fetch.SightingRepository.from_settings")
    def test_skips_when_fresh(
        self,
        mock_from_settings: Mock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        make_sighting: SightingFactory,
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(fetch, "store", store)
        store.save_sightings(
            [make_sighting()],
            source="test",
            valid_until=datetime.now(UTC) + timedelta(minutes=5),
        )

        result = fetch.fetch_all()

        assert result == {"skipped": True, "sightings": 1}
        mock_from_settings.assert_not_called()

    @patch("ghost_sightings.flows.fetch.SightingRepository.from_settings")
    def test_force_refetches(
        self,
        mock_from_settings: Mock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        make_sighting: SightingFactory,
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(fetch, "store", store)
        store.save_sightings(
            [make_sighting()],
            source="test",
            valid_until=datetime.now(UTC) + timedelta(minutes=5),
        )
        mock_from_settings.return_value.fetch_all.return_value = []

        result = fetch.fetch_all(force=True)

        assert result == {"skipped": False, "sightings": 0}
        assert store.load_sightings() == []

    def test_save_sightings_ttl(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_sighting: SightingFactory
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(fetch, "store", store)

        fetch.save_sightings([make_sighting()])

        expiry = datetime.fromisoformat(store.meta(SIGHTINGS_PATH)["valid_until"])
        remaining = expiry - datetime.now(UTC)
        assert timedelta(seconds=0) < remaining <= timedelta(seconds=60)


class TestBuildFlow:
    """build-site: render the cached snapshot."""

    def test_no_snapshot(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(build, "store", DataStore(tmp_path))
        assert build.build_all() == {"error": "no data"}

    def test_builds_static_site(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_sighting: SightingFactory
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(build, "store", store)
        store.save_sightings(
            [
                make_sighting(city="Austin", state="TX"),
                make_sighting(city="Austin", state="TX"),
                make_sighting(city="Null Island", latitude=0.0, longitude=0.0),
            ],
            source="test",
        )

        result = build.build_all()

        output = tmp_path / "derived" / "site" / "index.html"
        assert result["output"] == str(output)
        assert result["sightings"] == 3
        html = output.read_text()
        assert "Austin, TX" in html
        assert "Null Island" not in html
        assert 'id="sighting-form"' not in html
        assert "Add Sighting" not in html

    def test_every_table_page_written(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_sighting: SightingFactory
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(build, "store", store)
        store.save_sightings(
            [make_sighting(notes=f"note-{i:03d}") for i in range(120)], source="test"
        )

        result = build.build_all()

        site = tmp_path / "derived" / "site"
        assert result["pages"] == 3
        assert sorted(p.name for p in site.iterdir()) == [
            "index.html",
            "page-2.html",
            "page-3.html",
        ]
        last = (site / "page-3.html").read_text()
        assert "Page 3 of 3" in last
        assert 'href="page-2.html" rel="prev"' in last
        assert 'class="filters"' not in last

    def test_empty_snapshot_still_writes_index(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(build, "store", store)
        store.save_sightings([], source="test")

        result = build.build_all()

        assert result["pages"] == 1
        html = (tmp_path / "derived" / "site" / "index.html").read_text()
        assert "No sightings match the current filters." in html

    def test_load_sightings_task(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_sighting: SightingFactory
    ) -> None:
        store = DataStore(tmp_path)
        monkeypatch.setattr(build, "store", store)
        assert build.load_sightings() is None
        store.save_sightings([make_sighting()], source="test")
        assert len(build.load_sightings()) == 1


class TestSnapshotSource:
    """Read-only source backing the static build."""

    def test_fetch_all_returns_copy(self, make_sighting: SightingFactory) -> None:
        sightings = [make_sighting()]
        source = build.SnapshotSource(sightings)
        fetched = source.fetch_all()
        fetched.clear()
        assert source.fetch_all() == sightings

    def test_insert_rejected(self, make_sighting: SightingFactory) -> None:
        with pytest.raises(StoreError):
            build.SnapshotSource([]).insert(make_sighting())
