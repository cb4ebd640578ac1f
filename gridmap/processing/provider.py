"""ProcessorProvider — one processor per entity class and time-series value."""

from __future__ import annotations

import logging
from typing import Iterable

from gridmap.exceptions import ProcessingFailure
from gridmap.models import ENTITY_CLASSES, TIME_SERIES_VALUE_CLASSES
from gridmap.models.base import GridEntity
from gridmap.models.timeseries import IndividualTimeSeries, Value
from gridmap.processing.processor import EntityProcessor
from gridmap.processing.timeseries import TimeSeriesProcessor

logger = logging.getLogger(__name__)


class ProcessorProvider:
    """Registry of entity and time-series processors.

    Parameters
    ----------
    entity_classes:
        Entity classes to build processors for; all bundled entity classes
        by default.
    value_classes:
        Time-series value classes to build processors for; all eligible
        ones by default.
    """

    def __init__(
        self,
        entity_classes: Iterable[type[GridEntity]] | None = None,
        value_classes: Iterable[type[Value]] | None = None,
    ) -> None:
        if entity_classes is None:
            entity_classes = ENTITY_CLASSES
        if value_classes is None:
            value_classes = TIME_SERIES_VALUE_CLASSES
        self._entity_processors: dict[type, EntityProcessor] = {
            cls: EntityProcessor(cls) for cls in entity_classes
        }
        self._time_series_processors: dict[type, TimeSeriesProcessor] = {
            cls: TimeSeriesProcessor(cls) for cls in value_classes
        }
        logger.info(
            "Registered %d entity processors and %d time-series processors",
            len(self._entity_processors),
            len(self._time_series_processors),
        )

    @property
    def registered_classes(self) -> list[type]:
        return [*self._entity_processors, *self._time_series_processors]

    def process_entity(self, entity: GridEntity) -> dict[str, str]:
        processor = self._entity_processors.get(type(entity))
        if processor is None:
            raise _unregistered(type(entity))
        return processor.handle_entity(entity)

    def process_time_series(self, series: IndividualTimeSeries) -> list[dict[str, str]]:
        value_class = series.value_class
        if value_class is None:
            return []
        processor = self._time_series_processors.get(value_class)
        if processor is None:
            raise _unregistered(value_class)
        return processor.handle_time_series(series)

    def header_elements(self, cls: type) -> tuple[str, ...]:
        """Header of records produced for *cls* (entity or time-series value class)."""
        processor = self._entity_processors.get(cls) or self._time_series_processors.get(cls)
        if processor is None:
            raise _unregistered(cls)
        return processor.header_elements


def _unregistered(cls: type) -> ProcessingFailure:
    return ProcessingFailure(
        cls.__name__, "", None, f"No processor registered for {cls.__name__}"
    )
