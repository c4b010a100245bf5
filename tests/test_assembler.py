"""Tests for merging forecast layers into the hourly dataset."""

from dataclasses import FrozenInstanceError
from typing import Any

import pandas as pd
import pytest
from conftest import NOW, TZ, empty_payload, make_layer

from hourcast.dataset.assembler import assemble_dataset
from hourcast.dataset.models import DATASET_SLOTS, DataPoint, Quantity, WeatherDataset
from hourcast.errors import (
    AlignmentError,
    MissingQuantityError,
    PeriodDecodeError,
    ValueDecodeError,
)
from hourcast.ingestion.payload import parse_gridpoint_payload


def assemble(payload: dict[str, Any]) -> WeatherDataset:
    """Parse and assemble a payload at the fixed reference instant."""
    return assemble_dataset(parse_gridpoint_payload(payload), TZ, NOW)


class TestMerge:
    """Tests for writing run-length-encoded values into slots."""

    def test_two_pair_element(self) -> None:
        """Test that consecutive pairs fill consecutive slots."""
        payload = empty_payload()
        payload["properties"]["skyCover"] = make_layer(
            "wmoUnit:percent",
            [
                (10, "2024-05-10T04:00:00+00:00", "PT2H"),
                (20, "2024-05-10T06:00:00+00:00", "PT1H"),
            ],
        )

        sky = assemble(payload).series(Quantity.SKY_COVER)

        assert sky[0] == 10
        assert sky[1] == 10
        assert sky[2] == 20
        assert all(v == 0 for v in sky[3:])

    def test_other_quantities_untouched(self) -> None:
        """Test that writing one quantity leaves the other fields at zero."""
        payload = empty_payload()
        payload["properties"]["skyCover"] = make_layer(
            "wmoUnit:percent", [(10, "2024-05-10T04:00:00+00:00", "PT2H")]
        )

        dataset = assemble(payload)

        for quantity in Quantity:
            if quantity is Quantity.SKY_COVER:
                continue
            assert all(v == 0 for v in dataset.series(quantity))

    def test_slots_before_first_start_stay_zero(self) -> None:
        """Test zero fill before a layer's resolved start."""
        payload = empty_payload()
        payload["properties"]["probabilityOfPrecipitation"] = make_layer(
            "wmoUnit:percent", [(30, "2024-05-10T18:00:00+00:00", "PT3H")]
        )

        pop = assemble(payload).series(Quantity.PROBABILITY_OF_PRECIPITATION)

        # 14:00 EDT is dataset index 14
        assert pop[:14] == [0.0] * 14
        assert pop[14:17] == [30.0, 30.0, 30.0]
        assert pop[17] == 0.0

    def test_yesterday_values_are_trimmed(self) -> None:
        """Test that values falling entirely in yesterday are dropped."""
        payload = empty_payload()
        payload["properties"]["windSpeed"] = make_layer(
            None,
            [
                (5, "2024-05-09T04:00:00+00:00", "PT23H"),
                (7, "2024-05-10T03:00:00+00:00", "PT2H"),
            ],
        )

        wind = assemble(payload).series(Quantity.WIND_SPEED)

        # second pair starts at slot 23: one hour yesterday, one hour today
        assert wind[0] == 7
        assert wind[1] == 0

    def test_day_periods(self) -> None:
        """Test that day-based durations fill 24 slots per day."""
        payload = empty_payload()
        payload["properties"]["snowfallAmount"] = make_layer(
            None, [(1, "2024-05-10T04:00:00+00:00", "P1DT2H")]
        )

        snow = assemble(payload).series(Quantity.SNOWFALL_AMOUNT)

        assert snow[:26] == [1.0] * 26
        assert snow[26] == 0.0

    def test_truncates_at_window_end(self) -> None:
        """Test that overrunning the window stops silently at the last slot."""
        payload = empty_payload()
        payload["properties"]["dewpoint"] = make_layer(
            None,
            [
                (1, "2024-05-10T04:00:00+00:00", "P5DT1H"),
                (2, "2024-05-15T05:00:00+00:00", "P2D"),
                (3, "2024-05-17T05:00:00+00:00", "not-a-duration"),
            ],
        )

        dew = assemble(payload).series(Quantity.DEWPOINT)

        assert dew[:121] == [1.0] * 121

    def test_units_converted_once(self) -> None:
        """Test that each value is converted before filling its slots."""
        payload = empty_payload()
        payload["properties"]["temperature"] = make_layer(
            "wmoUnit:degC", [(20, "2024-05-10T04:00:00+00:00", "PT3H")]
        )

        temps = assemble(payload).series(Quantity.TEMPERATURE)

        assert temps[:3] == pytest.approx([68.0, 68.0, 68.0])

    def test_string_values_parsed(self) -> None:
        """Test that numeric strings are accepted."""
        payload = empty_payload()
        payload["properties"]["skyCover"] = make_layer(
            None, [("12.5", "2024-05-10T04:00:00+00:00", "PT1H")]
        )

        assert assemble(payload).series(Quantity.SKY_COVER)[0] == 12.5

    def test_each_element_aligns_independently(
        self, gridpoint_payload: dict[str, Any]
    ) -> None:
        """Test that layers with different starts land on their own slots."""
        dataset = assemble(gridpoint_payload)

        sky = dataset.series(Quantity.SKY_COVER)
        assert sky[:6] == [0.0] * 6
        assert sky[6:] == [50.0] * 115

        assert dataset.series(Quantity.TEMPERATURE) == pytest.approx([50.0] * 121)
        assert dataset.series(Quantity.DEWPOINT) == pytest.approx([32.0] * 121)
        assert dataset.series(Quantity.WIND_SPEED) == pytest.approx([10.0] * 121)
        assert dataset.series(Quantity.QUANTITATIVE_PRECIPITATION) == pytest.approx(
            [0.1] * 121, abs=1e-6
        )
        assert dataset.series(Quantity.PROBABILITY_OF_PRECIPITATION) == [40.0] * 121


class TestDatasetShape:
    """Tests for the trimmed result."""

    def test_always_121_points(self, gridpoint_payload: dict[str, Any]) -> None:
        """Test the trim invariant for full and empty coverage."""
        assert len(assemble(gridpoint_payload)) == DATASET_SLOTS
        assert len(assemble(empty_payload())) == DATASET_SLOTS

    def test_metadata(self) -> None:
        """Test timezone and local start time on the result."""
        dataset = assemble(empty_payload())

        assert dataset.timezone == TZ
        assert dataset.start_time.isoformat() == "2024-05-10T00:00:00-04:00"

    def test_idempotent(self, gridpoint_payload: dict[str, Any]) -> None:
        """Test that identical inputs give identical datasets."""
        first = assemble(gridpoint_payload)
        second = assemble(gridpoint_payload)

        assert first == second

    def test_points_are_independent(self) -> None:
        """Test that each slot is a distinct DataPoint."""
        dataset = assemble(empty_payload())

        assert len({id(p) for p in dataset.data_points}) == DATASET_SLOTS
        assert dataset.data_points[0] == DataPoint()

    def test_points_are_frozen(self) -> None:
        """Test that a returned dataset cannot be changed through its points."""
        dataset = assemble(empty_payload())

        with pytest.raises(FrozenInstanceError):
            dataset.data_points[0].temperature = 99.0  # type: ignore[misc]

        updated = dataset.data_points[0].with_value(Quantity.TEMPERATURE, 99.0)
        assert updated.temperature == 99.0
        assert dataset.data_points[0].temperature == 0.0


class TestFailures:
    """Tests for whole-build failures."""

    def test_missing_wind_speed(self) -> None:
        """Test that a payload without windSpeed yields no dataset."""
        payload = empty_payload()
        del payload["properties"]["windSpeed"]

        with pytest.raises(MissingQuantityError) as exc_info:
            assemble(payload)

        assert exc_info.value.quantity == "windSpeed"

    def test_non_numeric_value(self) -> None:
        """Test that an unparseable value aborts the build."""
        payload = empty_payload()
        payload["properties"]["temperature"] = make_layer(
            "wmoUnit:degC", [("warm", "2024-05-10T04:00:00+00:00", "PT1H")]
        )

        with pytest.raises(ValueDecodeError, match="temperature"):
            assemble(payload)

    @pytest.mark.parametrize("raw", ["NaN", "nan", "inf", "-Infinity", float("nan")])
    def test_non_finite_value(self, raw: Any) -> None:
        """Test that NaN and infinity are rejected rather than written to slots."""
        payload = empty_payload()
        payload["properties"]["quantitativePrecipitation"] = make_layer(
            "wmoUnit:mm", [(raw, "2024-05-10T04:00:00+00:00", "PT6H")]
        )

        with pytest.raises(ValueDecodeError, match="quantitativePrecipitation"):
            assemble(payload)

    def test_null_value(self) -> None:
        """Test that a null value aborts the build."""
        payload = empty_payload()
        payload["properties"]["skyCover"] = make_layer(
            None, [(None, "2024-05-10T04:00:00+00:00", "PT1H")]
        )

        with pytest.raises(ValueDecodeError):
            assemble(payload)

    def test_bad_duration(self) -> None:
        """Test that an undecodable duration aborts the build."""
        payload = empty_payload()
        payload["properties"]["dewpoint"] = make_layer(
            None, [(1, "2024-05-10T04:00:00+00:00", "1H")]
        )

        with pytest.raises(PeriodDecodeError):
            assemble(payload)

    def test_zero_duration(self) -> None:
        """Test that a zero-hour period is rejected."""
        payload = empty_payload()
        payload["properties"]["dewpoint"] = make_layer(
            None, [(1, "2024-05-10T04:00:00+00:00", "PT0H")]
        )

        with pytest.raises(PeriodDecodeError, match="non-positive"):
            assemble(payload)

    def test_start_after_today(self) -> None:
        """Test that a layer starting tomorrow aborts the build (documented open case)."""
        payload = empty_payload()
        payload["properties"]["temperature"] = make_layer(
            None, [(1, "2024-05-11T10:00:00+00:00", "PT1H")]
        )

        with pytest.raises(AlignmentError):
            assemble(payload)

    def test_unknown_timezone(self) -> None:
        """Test that an unresolvable timezone aborts the build."""
        payload = empty_payload()
        payload["properties"]["temperature"] = make_layer(
            None, [(1, "2024-05-10T04:00:00+00:00", "PT1H")]
        )

        with pytest.raises(AlignmentError):
            assemble_dataset(parse_gridpoint_payload(payload), "Nowhere/Land", NOW)


class TestToFrame:
    """Tests for the tabular export."""

    def test_frame_shape(self, gridpoint_payload: dict[str, Any]) -> None:
        """Test index, columns and length of the export."""
        df = assemble(gridpoint_payload).to_frame()

        assert len(df) == DATASET_SLOTS
        assert df.index.name == "time"
        assert df.index[0] == pd.Timestamp("2024-05-10 00:00", tz=TZ)
        assert df.index[-1] == pd.Timestamp("2024-05-15 00:00", tz=TZ)
        assert list(df.columns) == [
            "temperature",
            "dewpoint",
            "sky_cover",
            "probability_of_precipitation",
            "wind_speed",
            "quantitative_precipitation",
            "snowfall_amount",
        ]
        assert df["sky_cover"].iloc[6] == 50.0

    def test_frame_hours(self, gridpoint_payload: dict[str, Any]) -> None:
        """Test trimming to the leading hours."""
        df = assemble(gridpoint_payload).to_frame(hours=49)

        assert len(df) == 49
        assert df.index[-1] == pd.Timestamp("2024-05-12 00:00", tz=TZ)
