"""Unit normalisation and fixed-point formatting of flattened values.

:data:`QUANTITY_FIELD_UNITS` is closed: a quantity is only written when its
(owner class, field) pair is listed, converted into the listed unit.  The
same field name may target different units depending on the owner (``p`` is
kW on time-series values, MW on results).
"""

from __future__ import annotations

import math
from decimal import Decimal

from gridmap.exceptions import UnrecognizedQuantityFieldFailure
from gridmap.units import StandardUnits as SU
from gridmap.units import Quantity, Unit

QUANTITY_FIELD_UNITS: dict[tuple[str, str], Unit] = {
    # Grid topology
    ("NodeInput", "vtarget"): SU.TARGET_VOLTAGE_MAGNITUDE,
    ("NodeInput", "vrated"): SU.RATED_VOLTAGE_MAGNITUDE,
    ("LineInput", "length"): SU.LINE_LENGTH,
    ("LineTypeInput", "b"): SU.ADMITTANCE_PER_LENGTH,
    ("LineTypeInput", "g"): SU.ADMITTANCE_PER_LENGTH,
    ("LineTypeInput", "r"): SU.IMPEDANCE_PER_LENGTH,
    ("LineTypeInput", "x"): SU.IMPEDANCE_PER_LENGTH,
    ("LineTypeInput", "imax"): SU.ELECTRIC_CURRENT_MAGNITUDE,
    ("LineTypeInput", "vrated"): SU.RATED_VOLTAGE_MAGNITUDE,
    ("Transformer2WTypeInput", "rsc"): SU.IMPEDANCE,
    ("Transformer2WTypeInput", "xsc"): SU.IMPEDANCE,
    ("Transformer2WTypeInput", "srated"): SU.S_RATED,
    ("Transformer2WTypeInput", "vrateda"): SU.RATED_VOLTAGE_MAGNITUDE,
    ("Transformer2WTypeInput", "vratedb"): SU.RATED_VOLTAGE_MAGNITUDE,
    ("Transformer2WTypeInput", "dv"): SU.DV_TAP,
    # Thermal units
    ("ThermalHouseInput", "ethlosses"): SU.THERMAL_TRANSMISSION,
    ("ThermalHouseInput", "ethcapa"): SU.HEAT_CAPACITY,
    ("ThermalHouseInput", "targettemperature"): SU.TEMPERATURE,
    ("CylindricalStorageInput", "storagevolumelvl"): SU.VOLUME,
    ("CylindricalStorageInput", "inlettemp"): SU.TEMPERATURE,
    ("CylindricalStorageInput", "returntemp"): SU.TEMPERATURE,
    ("CylindricalStorageInput", "pthermalmax"): SU.ACTIVE_POWER_IN,
    # System participants and their types
    ("LoadInput", "econsannual"): SU.ENERGY_IN,
    ("LoadInput", "srated"): SU.S_RATED,
    ("PvInput", "azimuth"): SU.AZIMUTH,
    ("PvInput", "elevationangle"): SU.SOLAR_HEIGHT,
    ("PvInput", "etaconv"): SU.EFFICIENCY,
    ("PvInput", "srated"): SU.S_RATED,
    ("HpTypeInput", "capex"): SU.CAPEX,
    ("HpTypeInput", "opex"): SU.ENERGY_PRICE,
    ("HpTypeInput", "srated"): SU.S_RATED,
    ("HpTypeInput", "pthermal"): SU.ACTIVE_POWER_IN,
    ("ChpTypeInput", "capex"): SU.CAPEX,
    ("ChpTypeInput", "opex"): SU.ENERGY_PRICE,
    ("ChpTypeInput", "etael"): SU.EFFICIENCY,
    ("ChpTypeInput", "etathermal"): SU.EFFICIENCY,
    ("ChpTypeInput", "srated"): SU.S_RATED,
    ("ChpTypeInput", "pthermal"): SU.ACTIVE_POWER_IN,
    ("ChpTypeInput", "pown"): SU.ACTIVE_POWER_IN,
    # Results
    ("NodeResult", "vmag"): SU.VOLTAGE_MAGNITUDE,
    ("NodeResult", "vang"): SU.VOLTAGE_ANGLE,
    ("LineResult", "iamag"): SU.ELECTRIC_CURRENT_MAGNITUDE,
    ("LineResult", "iaang"): SU.ELECTRIC_CURRENT_ANGLE,
    ("LineResult", "ibmag"): SU.ELECTRIC_CURRENT_MAGNITUDE,
    ("LineResult", "ibang"): SU.ELECTRIC_CURRENT_ANGLE,
    ("LoadResult", "p"): SU.ACTIVE_POWER_RESULT,
    ("LoadResult", "q"): SU.REACTIVE_POWER_RESULT,
    ("PvResult", "p"): SU.ACTIVE_POWER_RESULT,
    ("PvResult", "q"): SU.REACTIVE_POWER_RESULT,
    ("HpResult", "p"): SU.ACTIVE_POWER_RESULT,
    ("HpResult", "q"): SU.REACTIVE_POWER_RESULT,
    ("HpResult", "qdot"): SU.Q_DOT_RESULT,
    ("ThermalHouseResult", "qdot"): SU.Q_DOT_RESULT,
    ("ThermalHouseResult", "indoortemperature"): SU.TEMPERATURE,
    # Time-series values
    ("PValue", "p"): SU.ACTIVE_POWER_IN,
    ("SValue", "p"): SU.ACTIVE_POWER_IN,
    ("SValue", "q"): SU.REACTIVE_POWER_IN,
    ("HeatDemandValue", "heatdemand"): SU.HEAT_DEMAND_PROFILE,
    ("HeatAndPValue", "p"): SU.ACTIVE_POWER_IN,
    ("HeatAndPValue", "heatdemand"): SU.HEAT_DEMAND_PROFILE,
    ("HeatAndSValue", "p"): SU.ACTIVE_POWER_IN,
    ("HeatAndSValue", "q"): SU.REACTIVE_POWER_IN,
    ("HeatAndSValue", "heatdemand"): SU.HEAT_DEMAND_PROFILE,
    ("EnergyPriceValue", "price"): SU.ENERGY_PRICE,
    ("TemperatureValue", "temperature"): SU.TEMPERATURE,
    ("WindValue", "winddirection"): SU.WIND_DIRECTION,
    ("WindValue", "windvelocity"): SU.WIND_VELOCITY,
    ("IrradiationValue", "directirradiance"): SU.SOLAR_IRRADIANCE,
    ("IrradiationValue", "diffuseirradiance"): SU.SOLAR_IRRADIANCE,
}


def format_decimal(value: float) -> str:
    """Fixed-point text without exponent or grouping separators.

    Raises :class:`ValueError` for NaN and infinities.
    """
    if not math.isfinite(value):
        raise ValueError(f"{value!r} has no fixed-point representation")
    return format(Decimal(repr(float(value))), "f")


def normalize_quantity(owner: str, field: str, quantity: Quantity) -> str:
    """Convert *quantity* into the unit declared for (*owner*, *field*)."""
    target = QUANTITY_FIELD_UNITS.get((owner, field))
    if target is None:
        raise UnrecognizedQuantityFieldFailure(owner, field, quantity)
    return format_decimal(quantity.to(target).magnitude)
