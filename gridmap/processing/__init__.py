"""Entity to record flattening: processors, time series and unit normalisation."""

from gridmap.processing.processor import EntityProcessor, format_value
from gridmap.processing.provider import ProcessorProvider
from gridmap.processing.quantities import QUANTITY_FIELD_UNITS, normalize_quantity
from gridmap.processing.timeseries import FieldSource, TimeSeriesProcessor

__all__ = [
    "QUANTITY_FIELD_UNITS",
    "EntityProcessor",
    "FieldSource",
    "ProcessorProvider",
    "TimeSeriesProcessor",
    "format_value",
    "normalize_quantity",
]
