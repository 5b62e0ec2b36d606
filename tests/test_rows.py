"""Tests for store row <-> model transformation."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import pytest

from ghost_sightings.datasources.sightings.rows import row_to_sighting, sighting_to_row

if TYPE_CHECKING:
    from conftest import SightingFactory


def _row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": 7,
        "date": "2023-06-12",
        "latitude": 29.9511,
        "longitude": -90.0715,
        "city": "New Orleans",
        "state": "LA",
        "notes": "Music from an empty hall",
        "timeofday": "Evening",
        "apparitiontag": "Poltergeist",
        "imagelink": "https://img.example/hall.jpg",
        "created_at": "2023-06-13T01:02:03Z",
    }
    row.update(overrides)
    return row


class TestRowToSighting:
    """Store row -> Sighting."""

    def test_renames_columns(self) -> None:
        sighting = row_to_sighting(_row())
        assert sighting.id == "7"
        assert sighting.date == date(2023, 6, 12)
        assert sighting.time_of_day == "Evening"
        assert sighting.apparition_tag == "Poltergeist"
        assert sighting.image_link == "https://img.example/hall.jpg"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_image_link_is_absent(self, value: str | None) -> None:
        assert row_to_sighting(_row(imagelink=value)).image_link is None

    def test_image_link_column_optional(self) -> None:
        row = _row()
        del row["imagelink"]
        assert row_to_sighting(row).image_link is None

    def test_missing_column(self) -> None:
        row = _row()
        del row["timeofday"]
        with pytest.raises(KeyError):
            row_to_sighting(row)


class TestSightingToRow:
    """Sighting -> store row."""

    def test_renames_fields(self, make_sighting: SightingFactory) -> None:
        row = sighting_to_row(make_sighting(image_link="https://img.example/a.png"))
        assert row == {
            "date": "2024-10-01",
            "latitude": 30.2672,
            "longitude": -97.7431,
            "city": "Austin",
            "state": "TX",
            "notes": "Cold spot near the stairs",
            "timeofday": "Night",
            "apparitiontag": "Shadow Figure",
            "imagelink": "https://img.example/a.png",
        }

    def test_never_sends_id(self, make_sighting: SightingFactory) -> None:
        assert "id" not in sighting_to_row(make_sighting())

    def test_absent_image_is_null(self, make_sighting: SightingFactory) -> None:
        assert sighting_to_row(make_sighting())["imagelink"] is None

    def test_inverse(self, make_sighting: SightingFactory) -> None:
        original = make_sighting(id="42", image_link="https://img.example/a.png")
        assert row_to_sighting({"id": "42", **sighting_to_row(original)}) == original
