"""Physical units and quantities used by the grid models.

A deliberately small, closed unit system: every unit belongs to one family
and converts to the family's base unit via ``base = magnitude * factor +
offset``.  Conversion across families is an error.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator


@dataclass(frozen=True)
class Unit:
    """One unit of measurement within a family."""

    symbol: str
    family: str
    factor: float = 1.0
    offset: float = 0.0

    def __str__(self) -> str:
        return self.symbol


_UNITS: dict[str, Unit] = {}
_ALIASES: dict[str, str] = {}


def _define(symbol: str, family: str, factor: float = 1.0, offset: float = 0.0,
            aliases: tuple[str, ...] = ()) -> Unit:
    u = Unit(symbol, family, factor, offset)
    _UNITS[symbol] = u
    for alias in aliases:
        _ALIASES[alias] = symbol
    return u


# ---------------------------------------------------------------------------
# Unit table
# ---------------------------------------------------------------------------

WATT = _define("W", "power")
KILOWATT = _define("kW", "power", 1e3)
MEGAWATT = _define("MW", "power", 1e6)

VOLTAMPERE = _define("VA", "apparent_power")
KILOVOLTAMPERE = _define("kVA", "apparent_power", 1e3)
MEGAVOLTAMPERE = _define("MVA", "apparent_power", 1e6)

VAR = _define("var", "reactive_power")
KILOVAR = _define("kvar", "reactive_power", 1e3)
MEGAVAR = _define("Mvar", "reactive_power", 1e6)

WATTHOUR = _define("Wh", "energy")
KILOWATTHOUR = _define("kWh", "energy", 1e3)
MEGAWATTHOUR = _define("MWh", "energy", 1e6)

VOLT = _define("V", "voltage")
KILOVOLT = _define("kV", "voltage", 1e3)

AMPERE = _define("A", "current")
KILOAMPERE = _define("kA", "current", 1e3)

PU = _define("pu", "dimensionless", aliases=("p.u.",))
PERCENT = _define("%", "dimensionless", 1e-2)

DEGREE_GEOM = _define("deg", "angle", aliases=("°",))
RADIAN = _define("rad", "angle", 180.0 / math.pi)

OHM = _define("Ohm", "impedance", aliases=("Ω", "ohm"))
OHM_PER_KILOMETRE = _define("Ohm/km", "impedance_per_length", aliases=("Ω/km",))

MICRO_SIEMENS_PER_KILOMETRE = _define(
    "uS/km", "admittance_per_length", 1e-6, aliases=("µS/km", "μS/km")
)
SIEMENS_PER_KILOMETRE = _define("S/km", "admittance_per_length")

METRE = _define("m", "length")
KILOMETRE = _define("km", "length", 1e3)

KELVIN = _define("K", "temperature")
CELSIUS = _define("degC", "temperature", 1.0, 273.15, aliases=("°C",))

METRE_PER_SECOND = _define("m/s", "speed")
KILOMETRE_PER_HOUR = _define("km/h", "speed", 1.0 / 3.6)

WATT_PER_SQUAREMETRE = _define("W/m2", "irradiance", aliases=("W/m²",))
KILOWATT_PER_SQUAREMETRE = _define("kW/m2", "irradiance", 1e3, aliases=("kW/m²",))

EURO = _define("EUR", "currency", aliases=("€",))
EURO_PER_MEGAWATTHOUR = _define("EUR/MWh", "energy_price", aliases=("€/MWh",))
EURO_PER_KILOWATTHOUR = _define("EUR/kWh", "energy_price", 1e3, aliases=("€/kWh",))

CUBIC_METRE = _define("m3", "volume", aliases=("m³",))
LITRE = _define("l", "volume", 1e-3)

KILOWATT_PER_KELVIN = _define("kW/K", "thermal_conductance", 1e3)
WATT_PER_KELVIN = _define("W/K", "thermal_conductance")

KILOWATTHOUR_PER_KELVIN = _define("kWh/K", "heat_capacity")


class StandardUnits:
    """Units that fit the input and result models by convention."""

    S_RATED = KILOVOLTAMPERE
    ACTIVE_POWER_IN = KILOWATT
    REACTIVE_POWER_IN = KILOVAR
    ACTIVE_POWER_RESULT = MEGAWATT
    REACTIVE_POWER_RESULT = MEGAVAR
    Q_DOT_RESULT = MEGAWATT
    ENERGY_IN = KILOWATTHOUR
    RATED_VOLTAGE_MAGNITUDE = KILOVOLT
    ELECTRIC_CURRENT_MAGNITUDE = AMPERE
    ELECTRIC_CURRENT_ANGLE = DEGREE_GEOM
    IMPEDANCE = OHM
    IMPEDANCE_PER_LENGTH = OHM_PER_KILOMETRE
    ADMITTANCE_PER_LENGTH = MICRO_SIEMENS_PER_KILOMETRE
    TARGET_VOLTAGE_MAGNITUDE = PU
    VOLTAGE_MAGNITUDE = PU
    VOLTAGE_ANGLE = DEGREE_GEOM
    DV_TAP = PERCENT
    EFFICIENCY = PERCENT
    VOLUME = CUBIC_METRE
    TEMPERATURE = CELSIUS
    HEAT_DEMAND_PROFILE = KILOWATT
    HEAT_CAPACITY = KILOWATTHOUR_PER_KELVIN
    THERMAL_TRANSMISSION = KILOWATT_PER_KELVIN
    AZIMUTH = DEGREE_GEOM
    SOLAR_HEIGHT = DEGREE_GEOM
    WIND_DIRECTION = DEGREE_GEOM
    WIND_VELOCITY = METRE_PER_SECOND
    SOLAR_IRRADIANCE = WATT_PER_SQUAREMETRE
    ENERGY_PRICE = EURO_PER_MEGAWATTHOUR
    CAPEX = EURO
    LINE_LENGTH = KILOMETRE


def unit(symbol: str | Unit) -> Unit:
    """Look up a unit by symbol or alias."""
    if isinstance(symbol, Unit):
        return symbol
    key = _ALIASES.get(symbol.strip(), symbol.strip())
    try:
        return _UNITS[key]
    except KeyError:
        raise ValueError(f"Unknown unit symbol {symbol!r}") from None


def convert(magnitude: float, source: Unit, target: Unit) -> float:
    """Convert *magnitude* from *source* to *target* within one family."""
    if source == target:
        return magnitude
    if source.family != target.family:
        raise ValueError(
            f"Cannot convert {source.symbol} ({source.family}) "
            f"to {target.symbol} ({target.family})"
        )
    base = magnitude * source.factor + source.offset
    return (base - target.offset) / target.factor


class Quantity(BaseModel):
    """A magnitude together with its unit symbol."""

    model_config = ConfigDict(frozen=True)

    magnitude: float
    unit: str

    @field_validator("unit")
    @classmethod
    def _known_unit(cls, v: str) -> str:
        return unit(v).symbol

    @classmethod
    def of(cls, magnitude: float, target: str | Unit) -> Quantity:
        return cls(magnitude=magnitude, unit=unit(target).symbol)

    @property
    def unit_obj(self) -> Unit:
        return unit(self.unit)

    def to(self, target: str | Unit) -> Quantity:
        """Return this quantity expressed in *target*."""
        target_unit = unit(target)
        if target_unit.symbol == self.unit:
            return self
        return Quantity(
            magnitude=convert(self.magnitude, self.unit_obj, target_unit),
            unit=target_unit.symbol,
        )

    def __str__(self) -> str:
        return f"{self.magnitude} {self.unit}"


# Matches "110", "-1.5e3", ".5 kV", "0.4kV"
_QUANTITY_RE = re.compile(
    r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)\s*(\S.*?)?\s*$"
)


def parse_quantity(text: str, target: str | Unit) -> Quantity:
    """Parse ``"<magnitude> [unit]"`` into a quantity expressed in *target*.

    Without a unit symbol the magnitude is taken to be in *target* already.
    A symbol from another family raises :class:`ValueError`.
    """
    target_unit = unit(target)
    match = _QUANTITY_RE.match(text)
    if match is None:
        raise ValueError(f"not a magnitude with optional unit: {text!r}")
    magnitude = float(match.group(1))
    symbol = match.group(2)
    if symbol is None:
        return Quantity(magnitude=magnitude, unit=target_unit.symbol)
    return Quantity(magnitude=magnitude, unit=unit(symbol).symbol).to(target_unit)
