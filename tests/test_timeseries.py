"""Tests for TimeSeriesProcessor — field sources, eligibility, entries."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from gridmap.deserializing import StrategyRegistry
from gridmap.exceptions import ProcessingFailure, ProcessorRegistrationFailure
from gridmap.models import (
    GeoPoint,
    IndividualTimeSeries,
    IrradiationValue,
    PValue,
    SValue,
    TemperatureValue,
    TimeBasedValue,
    Value,
    WeatherValue,
    WindValue,
)
from gridmap.processing import FieldSource, ProcessorProvider, TimeSeriesProcessor
from gridmap.processing import timeseries as timeseries_module
from gridmap.units import Quantity

T0 = datetime(2020, 4, 28, 15, tzinfo=timezone.utc)
SERIES_UUID = UUID("a4bbcb77-b9d0-4b88-92be-b9a14a3e332b")


class CustomValue(Value):
    reading: float


class ClashingValue(Value):
    time: float


@pytest.fixture
def p_series() -> IndividualTimeSeries:
    entries = tuple(
        TimeBasedValue[PValue](
            uuid=UUID(int=i + 1),
            time=T0 + timedelta(hours=i),
            value=PValue(p=Quantity.of(1.25 * (i + 1), "kW")),
        )
        for i in range(3)
    )
    return IndividualTimeSeries(uuid=SERIES_UUID, entries=entries)


@pytest.fixture
def weather_entry() -> TimeBasedValue:
    return TimeBasedValue[WeatherValue](
        uuid=UUID("9d2f8b84-9d3c-4f2e-8c11-0e3e8b4b3f6a"),
        time=T0,
        value=WeatherValue(
            coordinate=GeoPoint(lon=7.4, lat=51.5),
            irradiation=IrradiationValue(
                direct_irradiance=Quantity.of(286.0, "W/m2"),
                diffuse_irradiance=Quantity.of(0.25, "kW/m2"),
            ),
            temperature=TemperatureValue(temperature=Quantity.of(20.5, "degC")),
            wind=WindValue(
                direction=Quantity.of(45.0, "deg"),
                velocity=Quantity.of(18.0, "km/h"),
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Field sources
# ---------------------------------------------------------------------------


class TestFieldSources:
    def test_p_value_sources(self) -> None:
        processor = TimeSeriesProcessor(PValue)
        keys = {s: [a.key for a in acc] for s, acc in processor.sources.items()}
        assert keys[FieldSource.SERIES] == ["timeseries"]
        assert sorted(keys[FieldSource.ENTRY]) == ["time", "uuid"]
        assert keys[FieldSource.VALUE] == ["p"]
        assert keys[FieldSource.SUB_VALUE] == []

    def test_weather_sub_values(self) -> None:
        processor = TimeSeriesProcessor(WeatherValue)
        assert [a.key for a in processor.sources[FieldSource.VALUE]] == ["coordinate"]
        assert sorted(a.key for a in processor.sources[FieldSource.SUB_VALUE]) == [
            "diffuseirradiance",
            "directirradiance",
            "temperature",
            "winddirection",
            "windvelocity",
        ]

    def test_header(self) -> None:
        assert TimeSeriesProcessor(SValue).header_elements == (
            "uuid",
            "p",
            "q",
            "time",
            "timeseries",
        )

    def test_ineligible_value_class(self) -> None:
        with pytest.raises(ProcessorRegistrationFailure, match="eligible"):
            TimeSeriesProcessor(CustomValue)

    def test_overlapping_sources(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            timeseries_module,
            "TIME_SERIES_VALUE_CLASSES",
            (*timeseries_module.TIME_SERIES_VALUE_CLASSES, ClashingValue),
        )
        with pytest.raises(ProcessorRegistrationFailure, match="'time'"):
            TimeSeriesProcessor(ClashingValue)


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


class TestHandleTimeSeries:
    def test_one_record_per_entry(self, p_series: IndividualTimeSeries) -> None:
        records = TimeSeriesProcessor(PValue).handle_time_series(p_series)
        assert len(records) == 3
        assert records[0] == {
            "uuid": "00000000-0000-0000-0000-000000000001",
            "p": "1.25",
            "time": "2020-04-28T15:00:00+00:00",
            "timeseries": str(SERIES_UUID),
        }
        assert [r["p"] for r in records] == ["1.25", "2.5", "3.75"]

    def test_units_normalised_per_value_class(self) -> None:
        entry = TimeBasedValue[SValue](
            uuid=UUID("0b8a6a3e-7d4f-4f7d-9a57-2b5ad4b1a3c9"),
            time=T0,
            value=SValue(p=Quantity.of(2000.0, "W"), q=Quantity.of(0.5, "kvar")),
        )
        series = IndividualTimeSeries(uuid=SERIES_UUID, entries=(entry,))
        (record,) = TimeSeriesProcessor(SValue).handle_time_series(series)
        assert record["p"] == "2.0"
        assert record["q"] == "0.5"

    def test_weather_entry(self, weather_entry: TimeBasedValue) -> None:
        series = IndividualTimeSeries(uuid=SERIES_UUID, entries=(weather_entry,))
        (record,) = TimeSeriesProcessor(WeatherValue).handle_time_series(series)
        assert list(record) == [
            "uuid",
            "coordinate",
            "diffuseirradiance",
            "directirradiance",
            "temperature",
            "time",
            "timeseries",
            "winddirection",
            "windvelocity",
        ]
        assert record["coordinate"] == '{"type":"Point","coordinates":[7.4,51.5]}'
        assert record["diffuseirradiance"] == "250.0"
        assert record["directirradiance"] == "286.0"
        assert record["temperature"] == "20.5"
        assert record["windvelocity"] == "5.0"

    def test_missing_value_written_empty(self) -> None:
        entry = TimeBasedValue[PValue](uuid=UUID(int=7), time=T0, value=PValue())
        series = IndividualTimeSeries(uuid=SERIES_UUID, entries=(entry,))
        (record,) = TimeSeriesProcessor(PValue).handle_time_series(series)
        assert record["p"] == ""

    def test_wrong_value_class(self, p_series: IndividualTimeSeries) -> None:
        with pytest.raises(ProcessingFailure, match="cannot handle PValue"):
            TimeSeriesProcessor(SValue).handle_time_series(p_series)


# ---------------------------------------------------------------------------
# Provider and decoding
# ---------------------------------------------------------------------------


class TestTimeSeriesProvider:
    def test_process_time_series(self, p_series: IndividualTimeSeries) -> None:
        records = ProcessorProvider().process_time_series(p_series)
        assert len(records) == 3

    def test_empty_series(self) -> None:
        series = IndividualTimeSeries(uuid=SERIES_UUID)
        assert ProcessorProvider().process_time_series(series) == []

    def test_unregistered_value_class(self, p_series: IndividualTimeSeries) -> None:
        provider = ProcessorProvider(entity_classes=[], value_classes=[SValue])
        with pytest.raises(ProcessingFailure, match="No processor registered for PValue"):
            provider.process_time_series(p_series)

    def test_entries_decode_back(
        self, registry: StrategyRegistry, weather_entry: TimeBasedValue
    ) -> None:
        series = IndividualTimeSeries(uuid=SERIES_UUID, entries=(weather_entry,))
        (record,) = TimeSeriesProcessor(WeatherValue).handle_time_series(series)
        decoded = registry.decode(TimeBasedValue[WeatherValue], record)
        assert decoded.uuid == weather_entry.uuid
        assert decoded.time == weather_entry.time
        assert decoded.value.irradiation.diffuse_irradiance == Quantity.of(250.0, "W/m2")
        assert decoded.value.wind.velocity == Quantity.of(5.0, "m/s")
