"""Write-back collection: entities plus dependents, flattened and grouped by class."""

from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from gridmap.exceptions import MappingError
from gridmap.extraction.extractor import Extractor
from gridmap.models.base import GridEntity
from gridmap.models.timeseries import IndividualTimeSeries, TimeBasedValue
from gridmap.processing.provider import ProcessorProvider

logger = logging.getLogger(__name__)


def collect_records(
    entities: Iterable[GridEntity],
    *,
    provider: ProcessorProvider | None = None,
    extractor: Extractor | None = None,
) -> dict[type, list[dict[str, str]]]:
    """Flatten *entities* and everything they depend on.

    Every entity is written once even when several others depend on it.
    Individual time series are written one record per entry, grouped under
    ``TimeBasedValue[<value class>]``.
    An entity whose dependents cannot be extracted is still written itself;
    entities that fail to flatten are logged and skipped.

    Returns
    -------
    dict
        Records per entity class, in order of first appearance.
    """
    provider = provider or ProcessorProvider()
    extractor = extractor or Extractor()

    pending: dict[tuple[type, UUID], GridEntity] = {}
    for entity in entities:
        pending.setdefault((type(entity), entity.uuid), entity)
        if not type(entity).relations:
            continue
        try:
            dependents = extractor.extract(entity)
        except MappingError:
            logger.warning(
                "Skipping dependents of %s %s",
                type(entity).__name__,
                entity.uuid,
                exc_info=True,
            )
            continue
        ordered = sorted(dependents, key=lambda e: (type(e).__name__, str(e.uuid)))
        for dependent in ordered:
            pending.setdefault((type(dependent), dependent.uuid), dependent)

    records: dict[type, list[dict[str, str]]] = {}
    skipped = 0
    for (cls, uuid), entity in pending.items():
        try:
            if isinstance(entity, IndividualTimeSeries):
                rows = provider.process_time_series(entity)
                if rows:
                    key = TimeBasedValue[entity.value_class]
                    records.setdefault(key, []).extend(rows)
                continue
            record = provider.process_entity(entity)
        except MappingError:
            skipped += 1
            logger.warning("Skipping %s %s", cls.__name__, uuid, exc_info=True)
            continue
        records.setdefault(cls, []).append(record)

    logger.info(
        "Collected %d records of %d classes, skipped %d entities",
        sum(len(r) for r in records.values()),
        len(records),
        skipped,
    )
    return records
