"""Power-grid domain models mapped by gridmap."""

from gridmap.models.base import (
    NO_OPERATOR_ASSIGNED,
    AssetInput,
    GeoPoint,
    GridEntity,
    OperationTime,
    OperatorInput,
    RelationKind,
    VoltageLevel,
    is_no_operator,
    mapped,
)
from gridmap.models.input import (
    ChpInput,
    ChpTypeInput,
    ConnectorInput,
    CylindricalStorageInput,
    EmInput,
    HpInput,
    HpTypeInput,
    LineGraphicInput,
    LineInput,
    LineTypeInput,
    LoadInput,
    MeasurementUnitInput,
    NodeGraphicInput,
    NodeInput,
    PvInput,
    SwitchInput,
    SystemParticipantInput,
    ThermalBusInput,
    ThermalHouseInput,
    Transformer2WInput,
    Transformer2WTypeInput,
)
from gridmap.models.result import (
    HpResult,
    LineResult,
    LoadResult,
    NodeResult,
    PvResult,
    ResultEntity,
    ThermalHouseResult,
)
from gridmap.models.timeseries import (
    EnergyPriceValue,
    HeatAndPValue,
    HeatAndSValue,
    HeatDemandValue,
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

# Concrete entity classes with a flat record representation
ENTITY_CLASSES: tuple[type[GridEntity], ...] = (
    OperatorInput,
    NodeInput,
    LineTypeInput,
    LineInput,
    Transformer2WTypeInput,
    Transformer2WInput,
    SwitchInput,
    MeasurementUnitInput,
    ThermalBusInput,
    ThermalHouseInput,
    CylindricalStorageInput,
    EmInput,
    LoadInput,
    PvInput,
    HpTypeInput,
    HpInput,
    ChpTypeInput,
    ChpInput,
    NodeGraphicInput,
    LineGraphicInput,
    NodeResult,
    LineResult,
    LoadResult,
    PvResult,
    HpResult,
    ThermalHouseResult,
)

# Value classes an individual time series may carry
TIME_SERIES_VALUE_CLASSES: tuple[type[Value], ...] = (
    PValue,
    SValue,
    HeatDemandValue,
    HeatAndPValue,
    HeatAndSValue,
    EnergyPriceValue,
    TemperatureValue,
    WindValue,
    IrradiationValue,
    WeatherValue,
)

__all__ = [
    "ENTITY_CLASSES",
    "NO_OPERATOR_ASSIGNED",
    "TIME_SERIES_VALUE_CLASSES",
    "AssetInput",
    "ChpInput",
    "ChpTypeInput",
    "ConnectorInput",
    "CylindricalStorageInput",
    "EmInput",
    "EnergyPriceValue",
    "GeoPoint",
    "GridEntity",
    "HeatAndPValue",
    "HeatAndSValue",
    "HeatDemandValue",
    "HpInput",
    "HpResult",
    "HpTypeInput",
    "IndividualTimeSeries",
    "IrradiationValue",
    "LineGraphicInput",
    "LineInput",
    "LineResult",
    "LineTypeInput",
    "LoadInput",
    "LoadResult",
    "MeasurementUnitInput",
    "NodeGraphicInput",
    "NodeInput",
    "NodeResult",
    "OperationTime",
    "OperatorInput",
    "PValue",
    "PvInput",
    "PvResult",
    "RelationKind",
    "ResultEntity",
    "SValue",
    "SwitchInput",
    "SystemParticipantInput",
    "TemperatureValue",
    "ThermalBusInput",
    "ThermalHouseInput",
    "ThermalHouseResult",
    "TimeBasedValue",
    "Transformer2WInput",
    "Transformer2WTypeInput",
    "Value",
    "VoltageLevel",
    "WeatherValue",
    "WindValue",
    "is_no_operator",
    "mapped",
]
