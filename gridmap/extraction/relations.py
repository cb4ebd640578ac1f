"""Accessors behind each relation kind an entity may declare."""

from __future__ import annotations

from typing import Callable

from gridmap.models.base import GridEntity, RelationKind, is_no_operator


def _nodes(entity: GridEntity) -> list[GridEntity]:
    return list(entity.all_nodes())


def _type(entity: GridEntity) -> list[GridEntity]:
    return [entity.type]


def _operator(entity: GridEntity) -> list[GridEntity]:
    operator = entity.operator
    return [] if is_no_operator(operator) else [operator]


def _thermal_bus(entity: GridEntity) -> list[GridEntity]:
    return [entity.thermal_bus]


def _thermal_storage(entity: GridEntity) -> list[GridEntity]:
    return [entity.thermal_storage]


def _line(entity: GridEntity) -> list[GridEntity]:
    return [entity.line]


def _em(entity: GridEntity) -> list[GridEntity]:
    em = entity.em
    return [] if em is None else [em]


RELATION_ACCESSORS: dict[RelationKind, Callable[[GridEntity], list[GridEntity]]] = {
    RelationKind.NODES: _nodes,
    RelationKind.TYPE: _type,
    RelationKind.OPERATOR: _operator,
    RelationKind.THERMAL_BUS: _thermal_bus,
    RelationKind.THERMAL_STORAGE: _thermal_storage,
    RelationKind.LINE: _line,
    RelationKind.EM: _em,
}
