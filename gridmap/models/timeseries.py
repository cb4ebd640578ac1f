"""Time-series models: values, time-based entries and individual series.

An :class:`IndividualTimeSeries` holds :class:`TimeBasedValue` entries, each
wrapping one :class:`Value`.  Composite readings such as
:class:`WeatherValue` embed further values (irradiation, temperature, wind).
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from gridmap.models.base import GeoPoint, GridEntity, mapped
from gridmap.units import Quantity


class Value(BaseModel):
    """Base of everything a time series can carry."""

    model_config = ConfigDict(frozen=True)


class PValue(Value):
    p: Quantity | None = mapped(None, unit="kW")


class SValue(PValue):
    q: Quantity | None = mapped(None, unit="kvar")


class HeatDemandValue(Value):
    heat_demand: Quantity | None = mapped(None, unit="kW")


class HeatAndPValue(PValue):
    heat_demand: Quantity | None = mapped(None, unit="kW")


class HeatAndSValue(SValue):
    heat_demand: Quantity | None = mapped(None, unit="kW")


class EnergyPriceValue(Value):
    price: Quantity | None = mapped(None, unit="EUR/MWh")


class TemperatureValue(Value):
    temperature: Quantity | None = mapped(None, unit="degC")


class WindValue(Value):
    direction: Quantity | None = mapped(None, field="winddirection", unit="deg")
    velocity: Quantity | None = mapped(None, field="windvelocity", unit="m/s")


class IrradiationValue(Value):
    direct_irradiance: Quantity | None = mapped(None, unit="W/m2")
    diffuse_irradiance: Quantity | None = mapped(None, unit="W/m2")


class WeatherValue(Value):
    """Weather reading at one coordinate."""

    coordinate: GeoPoint
    irradiation: IrradiationValue
    temperature: TemperatureValue
    wind: WindValue


V = TypeVar("V", bound=Value)


class TimeBasedValue(GridEntity, Generic[V]):
    """One time-stamped entry of a time series."""

    time: datetime
    value: V


class IndividualTimeSeries(GridEntity):
    """Series of explicitly time-stamped values of one value class."""

    entries: tuple[TimeBasedValue, ...] = ()

    @property
    def value_class(self) -> type[Value] | None:
        if not self.entries:
            return None
        return type(self.entries[0].value)
