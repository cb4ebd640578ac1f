"""Extractor — collect the entities an entity depends on for persistence."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from uuid import UUID

from gridmap.config import extraction_workers
from gridmap.exceptions import ExtractionConfigurationFailure
from gridmap.extraction.relations import RELATION_ACCESSORS
from gridmap.models.base import GridEntity, RelationKind

logger = logging.getLogger(__name__)


def direct_relations(entity: GridEntity) -> list[GridEntity]:
    """Entities reachable from *entity* through its declared relation kinds.

    Raises
    ------
    ExtractionConfigurationFailure
        When the entity declares no relation kinds, an accessor does not fit
        the entity, or the result is empty although the entity declares more
        than the operator relation.
    """
    entity_type = type(entity)
    kinds = tuple(entity_type.relations)
    if not kinds:
        raise ExtractionConfigurationFailure(entity_type, "declares no relation kinds")

    found: list[GridEntity] = []
    for kind in kinds:
        try:
            found.extend(RELATION_ACCESSORS[kind](entity))
        except AttributeError as exc:
            raise ExtractionConfigurationFailure(
                entity_type, f"declares relation '{kind.value}' without exposing it"
            ) from exc

    if not found and kinds != (RelationKind.OPERATOR,):
        raise ExtractionConfigurationFailure(
            entity_type,
            "relations "
            f"{', '.join(k.value for k in kinds)} yielded no entities",
        )
    return found


def _key(entity: GridEntity) -> tuple[type, UUID]:
    return type(entity), entity.uuid


class Extractor:
    """Computes the transitive closure of an entity's relations.

    Each directly discovered entity is walked in its own pool task.  A
    failing branch is logged and left out, while the directly discovered
    entities themselves always belong to the result.

    Parameters
    ----------
    max_workers:
        Thread pool size; read from ``GRIDMAP_EXTRACTION_WORKERS`` when not
        given.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        config: dict[str, str] | None = None,
    ) -> None:
        self.max_workers = max_workers or extraction_workers(config)

    def extract(self, entity: GridEntity) -> set[GridEntity]:
        """Return every entity *entity* depends on, deduplicated by class and uuid."""
        direct = direct_relations(entity)
        collected: dict[tuple[type, UUID], GridEntity] = {}
        for child in direct:
            collected.setdefault(_key(child), child)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [(child, pool.submit(self._walk, child)) for child in direct]
            for child, future in futures:
                try:
                    branch = future.result()
                except Exception:
                    logger.warning(
                        "Skipping extraction branch %s %s of %s",
                        type(child).__name__,
                        child.uuid,
                        type(entity).__name__,
                        exc_info=True,
                    )
                    continue
                for found in branch:
                    collected.setdefault(_key(found), found)

        logger.debug(
            "Extracted %d entities from %s %s",
            len(collected),
            type(entity).__name__,
            entity.uuid,
        )
        return set(collected.values())

    def _walk(self, entity: GridEntity) -> list[GridEntity]:
        if not type(entity).relations:
            return []
        found: list[GridEntity] = []
        for child in direct_relations(entity):
            found.append(child)
            found.extend(self._walk(child))
        return found


def extract(entity: GridEntity, max_workers: int | None = None) -> set[GridEntity]:
    """Shortcut for ``Extractor(max_workers).extract(entity)``."""
    return Extractor(max_workers).extract(entity)
