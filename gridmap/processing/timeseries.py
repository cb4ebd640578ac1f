"""Flatten individual time series into one record per entry.

Every output field is supplied by exactly one source object:

``SERIES``
    the series itself (``timeseries``: the series uuid);
``ENTRY``
    the time-based entry (``uuid``, ``time``);
``VALUE``
    the entry's value (its direct fields);
``SUB_VALUE``
    values embedded in the value, e.g. a weather value's irradiation,
    temperature and wind.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from gridmap.catalog import ParamKind, catalog_for
from gridmap.config import TIME_SERIES_FIELD
from gridmap.exceptions import (
    MissingStrategyFailure,
    ProcessingFailure,
    ProcessorRegistrationFailure,
)
from gridmap.models import TIME_SERIES_VALUE_CLASSES
from gridmap.models.timeseries import IndividualTimeSeries, TimeBasedValue, Value
from gridmap.processing.processor import FieldAccessor, order_keys, param_accessors

logger = logging.getLogger(__name__)


class FieldSource(str, enum.Enum):
    SERIES = "series"
    ENTRY = "entry"
    VALUE = "value"
    SUB_VALUE = "sub_value"


class TimeSeriesProcessor:
    """Flattens individual time series carrying one value class.

    Raises
    ------
    ProcessorRegistrationFailure
        When *value_class* is not an eligible time-series value or two
        sources claim the same field.
    """

    def __init__(self, value_class: type[Value]) -> None:
        if value_class not in TIME_SERIES_VALUE_CLASSES:
            raise ProcessorRegistrationFailure(
                f"IndividualTimeSeries of TimeBasedValue[{value_class.__name__}] "
                "is not an eligible time-series combination"
            )
        self.value_class = value_class
        try:
            self.sources = self._build_sources(value_class)
        except MissingStrategyFailure as exc:
            raise ProcessorRegistrationFailure(
                f"Cannot partition fields of {value_class.__name__} series: {exc}"
            ) from exc

        claimed: dict[str, FieldSource] = {}
        for source, accessors in self.sources.items():
            for accessor in accessors:
                if accessor.key in claimed:
                    raise ProcessorRegistrationFailure(
                        f"Field '{accessor.key}' of {value_class.__name__} series "
                        f"is claimed by {claimed[accessor.key].value} and {source.value}"
                    )
                claimed[accessor.key] = source
        self._header = order_keys(list(claimed))
        logger.debug(
            "Built time-series processor for %s: %s",
            value_class.__name__,
            ", ".join(self._header),
        )

    @staticmethod
    def _build_sources(
        value_class: type[Value],
    ) -> dict[FieldSource, list[FieldAccessor]]:
        entry_class = TimeBasedValue[value_class]
        entry_owner = entry_class.__name__
        owner = value_class.__name__

        sources: dict[FieldSource, list[FieldAccessor]] = {
            FieldSource.SERIES: [
                FieldAccessor(TIME_SERIES_FIELD, "IndividualTimeSeries", lambda s: s.uuid)
            ],
            FieldSource.ENTRY: [
                a
                for p in catalog_for(entry_class).params
                if p.name != "value"
                for a in param_accessors(p, entry_owner)
            ],
            FieldSource.VALUE: [],
            FieldSource.SUB_VALUE: [],
        }
        for param in catalog_for(value_class).params:
            if param.kind is ParamKind.DIRECT:
                sources[FieldSource.VALUE].extend(param_accessors(param, owner))
            elif param.kind is ParamKind.NESTED:
                sources[FieldSource.SUB_VALUE].extend(param_accessors(param, owner))
            else:
                raise ProcessorRegistrationFailure(
                    f"{owner} references entity '{param.name}'; values must be "
                    "self-contained"
                )
        return sources

    @property
    def header_elements(self) -> tuple[str, ...]:
        return self._header

    def handle_entry(
        self, series: IndividualTimeSeries, entry: TimeBasedValue
    ) -> dict[str, str]:
        """Flatten one entry of *series*."""
        if type(entry.value) is not self.value_class:
            raise ProcessingFailure(
                "IndividualTimeSeries",
                "value",
                entry.value,
                f"Processor for {self.value_class.__name__} series cannot handle "
                f"{type(entry.value).__name__}",
            )
        objects: dict[FieldSource, Any] = {
            FieldSource.SERIES: series,
            FieldSource.ENTRY: entry,
            FieldSource.VALUE: entry.value,
            FieldSource.SUB_VALUE: entry.value,
        }
        entity_type = f"TimeBasedValue[{self.value_class.__name__}]"
        fields: dict[str, str] = {}
        for source, accessors in self.sources.items():
            for accessor in accessors:
                fields[accessor.key] = accessor.read(objects[source], entity_type)
        return {k: fields[k] for k in self._header}

    def handle_time_series(self, series: IndividualTimeSeries) -> list[dict[str, str]]:
        """Flatten *series* into one record per entry."""
        return [self.handle_entry(series, entry) for entry in series.entries]
