"""Flatten entities into field records.

An :class:`EntityProcessor` turns every parameter in a class's catalog into
one or more field accessors.  Nested parameters compose the outer and inner
accessors; external references are written as the referenced entity's uuid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable
from uuid import UUID

from gridmap.catalog import FieldCatalog, Param, ParamKind, Variant, catalog_for
from gridmap.config import NIL_UUID, UUID_FIELD
from gridmap.exceptions import ProcessingFailure, ProcessorRegistrationFailure
from gridmap.models.base import GeoPoint, GridEntity, is_no_operator
from gridmap.models.timeseries import Value
from gridmap.processing.quantities import format_decimal, normalize_quantity
from gridmap.units import Quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldAccessor:
    """Reads one output field from a source object."""

    key: str
    owner: str
    getter: Callable[[Any], Any]

    def read(self, source: Any, entity_type: str) -> str:
        try:
            value = self.getter(source)
        except Exception as exc:
            raise ProcessingFailure(entity_type, self.key, source) from exc
        return format_value(value, self.owner, self.key, entity_type)


def format_value(value: Any, owner: str, key: str, entity_type: str | None = None) -> str:
    """Render one field value as text.

    Parameters
    ----------
    owner:
        Class the field belongs to, used to look up quantity units.
    entity_type:
        Name of the entity being flattened, for failure reports.  Defaults
        to *owner*.
    """
    entity_type = entity_type or owner
    if value is None:
        return ""
    if isinstance(value, GridEntity):
        if is_no_operator(value) or value.uuid == NIL_UUID:
            return ""
        return str(value.uuid)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Quantity):
        try:
            return normalize_quantity(owner, key, value)
        except ValueError as exc:
            raise ProcessingFailure(entity_type, key, value) from exc
    if isinstance(value, float):
        try:
            return format_decimal(value)
        except ValueError as exc:
            raise ProcessingFailure(entity_type, key, value) from exc
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, UUID):
        return "" if value == NIL_UUID else str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, GeoPoint):
        return value.to_geojson()
    raise ProcessingFailure(
        entity_type,
        key,
        value,
        f"Cannot format field '{key}' of {entity_type}: "
        f"unsupported value type {type(value).__name__}",
    )


def param_accessors(param: Param, owner: str) -> list[FieldAccessor]:
    """Accessors for every field *param* contributes.

    Nested time-series values own their fields; other nested structures
    (voltage level, operation time) belong to the enclosing *owner*.
    """
    name = param.name
    if param.kind is not ParamKind.NESTED:
        return [FieldAccessor(param.field, owner, lambda obj, n=name: getattr(obj, n))]

    inner_owner = param.target.__name__ if issubclass(param.target, Value) else owner
    accessors = []
    for inner in catalog_accessors(catalog_for(param.target), inner_owner):
        accessors.append(
            FieldAccessor(
                inner.key,
                inner.owner,
                lambda obj, n=name, g=inner.getter: _compose(obj, n, g),
            )
        )
    return accessors


def catalog_accessors(catalog: FieldCatalog, owner: str) -> list[FieldAccessor]:
    return [a for p in catalog.params for a in param_accessors(p, owner)]


def _compose(obj: Any, name: str, getter: Callable[[Any], Any]) -> Any:
    inner = getattr(obj, name)
    return None if inner is None else getter(inner)


def order_keys(keys: set[str] | list[str]) -> tuple[str, ...]:
    """``uuid`` first, the remainder lexicographic."""
    rest = sorted(k for k in keys if k != UUID_FIELD)
    return (UUID_FIELD, *rest) if UUID_FIELD in keys else tuple(rest)


class EntityProcessor:
    """Flattens instances of one entity class.

    Each constructor variant has its own field set; an entity is written with
    the fields of the first variant whose excluded parameters and nested
    fields are all at their defaults.
    """

    def __init__(self, entity_class: type[GridEntity]) -> None:
        self.entity_class = entity_class
        catalog = catalog_for(entity_class)
        self._variants: list[tuple[Variant, list[FieldAccessor]]] = []
        owner = entity_class.__name__
        for variant in catalog.variants:
            accessors = [
                a
                for p in variant.params
                for a in param_accessors(p, owner)
                if a.key not in variant.omitted_keys
            ]
            by_key = {a.key: a for a in accessors}
            self._variants.append(
                (variant, [by_key[k] for k in order_keys(list(by_key))])
            )
        if not any(UUID_FIELD == a.key for _, acc in self._variants for a in acc):
            raise ProcessorRegistrationFailure(
                f"{entity_class.__name__} has no '{UUID_FIELD}' field"
            )
        self._header = order_keys(
            {a.key for _, accessors in self._variants for a in accessors}
        )
        logger.debug("Built processor for %s: %s", owner, ", ".join(self._header))

    @property
    def header_elements(self) -> tuple[str, ...]:
        return self._header

    def handle_entity(self, entity: GridEntity) -> dict[str, str]:
        """Flatten *entity* into an ordered field record."""
        name = self.entity_class.__name__
        if type(entity) is not self.entity_class:
            raise ProcessingFailure(
                name,
                "",
                entity,
                f"Processor for {name} cannot handle {type(entity).__name__}",
            )
        accessors = self._accessors_for(entity)
        return {a.key: a.read(entity, name) for a in accessors}

    def _accessors_for(self, entity: GridEntity) -> list[FieldAccessor]:
        catalog = catalog_for(self.entity_class)
        for variant, accessors in self._variants:
            if all(catalog.at_default(entity, name) for name in variant.excluded):
                return accessors
        raise ProcessingFailure(
            self.entity_class.__name__,
            "",
            entity,
            f"{self.entity_class.__name__} matches none of its variants",
        )
