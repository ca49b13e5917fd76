"""Unit tests for the Date value object."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from meta_map.core.engine import EngineContext
from meta_map.core.exceptions import MissingObjectError
from meta_map.items.date import Date


class TestDate:
    def test_mysql_datetime(self) -> None:
        value = Date("2024-03-01 10:30:00")
        assert str(value) == "2024-03-01"
        assert value.time == "10:30"

    def test_iso_datetime(self) -> None:
        assert Date("2024-03-01T10:30:00+00:00").timestamp == 1709289000

    def test_timestamps(self) -> None:
        assert Date(0).timestamp == 0
        assert Date("1709289000").timestamp == 1709289000
        assert Date(1709289000.0) == Date(1709289000)

    def test_native_values(self) -> None:
        moment = datetime(2024, 3, 1, 10, 30)
        assert Date(moment).datetime == moment
        assert Date(date(2024, 3, 1)).datetime == datetime(2024, 3, 1)
        assert Date(Date(moment)) == Date(moment)

    def test_empty_means_now(self) -> None:
        before = datetime.now(tz=timezone.utc)
        value = Date()
        assert before - timedelta(seconds=1) <= value.datetime <= before + timedelta(seconds=5)
        assert Date("").datetime.tzinfo is timezone.utc

    def test_format(self) -> None:
        assert Date("2024-03-01 10:30:00").format("%d.%m.%Y") == "01.03.2024"

    @pytest.mark.parametrize("value", ["not a date", True, ["2024"]])
    def test_invalid_value_is_missing_object(self, value: object) -> None:
        with pytest.raises(MissingObjectError):
            Date(value)

    def test_create(self) -> None:
        assert Date.create("2024-03-01") == Date("2024-03-01")

    def test_hashable(self) -> None:
        assert len({Date("2024-03-01"), Date("2024-03-01")}) == 1

    def test_repr(self) -> None:
        assert repr(Date("2024-03-01 10:30:00")) == "Date('2024-03-01T10:30:00')"

    @pytest.mark.parametrize(
        "value",
        ["99999999999999999999", 10**20, float("nan"), float("inf"), "9" * 5000],
    )
    def test_out_of_range_timestamp_is_missing_object(self, value: object) -> None:
        with pytest.raises(MissingObjectError):
            Date(value)

    def test_out_of_range_timestamp_maps_to_false(self) -> None:
        context = EngineContext()
        context.types.register_type("Date", Date)
        assert context.map("99999999999999999999", "d", {"d": "date"}) is False
        assert context.map(float("nan"), "d", {"d": "date"}) is False
