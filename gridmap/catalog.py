"""Field catalogs: how a model's constructor parameters map onto record fields.

A catalog is derived once per model class from its pydantic field metadata
and cached for the lifetime of the process.  Each constructor parameter is
classified as

``DIRECT``
    one record field decoded by a leaf strategy (strings, numbers, UUIDs,
    timestamps, geo points, quantities with a declared unit);
``NESTED``
    a plain sub-model (voltage level, operation time, time-series values)
    built from its own group of record fields;
``EXTERNAL``
    a reference to another :class:`~gridmap.models.base.GridEntity`, which is
    never decoded from text and must be supplied by the caller's context.
"""

from __future__ import annotations

import enum
import logging
import threading
import types
import typing
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from gridmap.exceptions import MissingStrategyFailure
from gridmap.models.base import GeoPoint, GridEntity
from gridmap.units import Quantity, Unit, unit

logger = logging.getLogger(__name__)

# Leaf types decoded from a single field
LEAF_TYPES: tuple[type, ...] = (str, bool, int, float, UUID, datetime, GeoPoint)


class ParamKind(str, enum.Enum):
    DIRECT = "direct"
    NESTED = "nested"
    EXTERNAL = "external"


@dataclass(frozen=True)
class Param:
    """One constructor parameter of a model."""

    name: str
    kind: ParamKind
    target: Any
    field: str | None = None
    fields: tuple[str, ...] = ()
    required: bool = True
    default: Any = None

    @property
    def keys(self) -> tuple[str, ...]:
        """Record field keys this parameter consumes."""
        if self.kind is ParamKind.NESTED:
            return self.fields
        return (self.field,) if self.field else ()


@dataclass(frozen=True)
class Variant:
    """A named constructor variant.

    *excluded* names parameters, or single fields of nested parameters, the
    variant leaves out.  Excluded parameters are dropped from *params*;
    excluded nested fields are listed in *omitted_keys*.
    """

    name: str
    excluded: tuple[str, ...]
    params: tuple[Param, ...]
    omitted_keys: frozenset[str] = frozenset()

    @property
    def keys(self) -> frozenset[str]:
        return frozenset(
            k for p in self.params for k in p.keys if k not in self.omitted_keys
        )


@dataclass(frozen=True)
class FieldCatalog:
    """Ordered parameters and constructor variants of one model class."""

    model: type
    params: tuple[Param, ...]
    variants: tuple[Variant, ...]

    def param(self, name: str) -> Param:
        for p in self.params:
            if p.name == name:
                return p
        raise KeyError(name)

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(k for p in self.params for k in p.keys)

    @property
    def discriminating_keys(self) -> frozenset[str]:
        """Keys present in some but not all variants."""
        if len(self.variants) < 2:
            return frozenset()
        key_sets = [v.keys for v in self.variants]
        return frozenset.union(*key_sets) - frozenset.intersection(*key_sets)

    def expand_keys(self, names: typing.Iterable[str]) -> set[str]:
        """Translate parameter names and field keys into field keys."""
        by_name = {p.name: p for p in self.params}
        expanded: set[str] = set()
        for name in names:
            param = by_name.get(name)
            if param is not None:
                expanded.update(param.keys)
            else:
                expanded.add(name)
        return expanded

    def at_default(self, instance: Any, name: str) -> bool:
        """Whether parameter or field key *name* of *instance* holds its default.

        A nested field counts as defaulted when its enclosing structure is
        absent.
        """
        for p in self.params:
            if p.name == name or (p.kind is not ParamKind.NESTED and p.field == name):
                return getattr(instance, p.name) == p.default
            if p.kind is ParamKind.NESTED and name in p.fields:
                inner = getattr(instance, p.name)
                return inner is None or catalog_for(p.target).at_default(inner, name)
        raise KeyError(name)


_CATALOGS: dict[type, FieldCatalog] = {}
_LOCK = threading.RLock()


def default_field_name(param_name: str) -> str:
    """``v_target`` -> ``vtarget``."""
    return param_name.replace("_", "").lower()


def _is_class(target: Any) -> bool:
    # Parametrised builtins such as list[str] pass isinstance(x, type) on 3.10
    return isinstance(target, type) and typing.get_origin(target) is None


def is_model_class(target: Any) -> bool:
    return (
        _is_class(target)
        and issubclass(target, BaseModel)
        and target not in (Quantity, GeoPoint)
    )


def catalog_for(model: type) -> FieldCatalog:
    """Return the cached catalog of *model*, deriving it on first use.

    Raises
    ------
    MissingStrategyFailure
        When a parameter has no supported type or the declared variants are
        inconsistent with the parameters.
    """
    cached = _CATALOGS.get(model)
    if cached is not None:
        return cached
    with _LOCK:
        cached = _CATALOGS.get(model)
        if cached is None:
            cached = _derive(model)
            _CATALOGS[model] = cached
            logger.debug(
                "Derived catalog for %s: %d params, %d variants",
                model.__name__,
                len(cached.params),
                len(cached.variants),
            )
    return cached


def _derive(model: type) -> FieldCatalog:
    if not is_model_class(model):
        raise MissingStrategyFailure(model, "not a model class")

    params = tuple(
        _classify(model, name, info) for name, info in model.model_fields.items()
    )

    seen: dict[str, str] = {}
    for p in params:
        for key in p.keys:
            if key in seen:
                raise MissingStrategyFailure(
                    model,
                    f"field key '{key}' claimed by both '{seen[key]}' and '{p.name}'",
                )
            seen[key] = p.name

    declared = getattr(model, "variants", None) or {"default": ()}
    by_name = {p.name: p for p in params}
    nested_owner = {
        k: p for p in params if p.kind is ParamKind.NESTED for k in p.fields
    }
    variants = []
    for variant_name, excluded in declared.items():
        dropped: set[str] = set()
        omitted: set[str] = set()
        for name in excluded:
            if name in by_name:
                if by_name[name].required:
                    raise MissingStrategyFailure(
                        model,
                        f"variant '{variant_name}' excludes required parameter '{name}'",
                    )
                dropped.add(name)
            elif name in nested_owner:
                if _field_required(nested_owner[name], name):
                    raise MissingStrategyFailure(
                        model,
                        f"variant '{variant_name}' excludes required field '{name}'",
                    )
                omitted.add(name)
            else:
                raise MissingStrategyFailure(
                    model, f"variant '{variant_name}' excludes unknown parameter '{name}'"
                )
        variants.append(
            Variant(
                name=variant_name,
                excluded=tuple(excluded),
                params=tuple(p for p in params if p.name not in dropped),
                omitted_keys=frozenset(omitted),
            )
        )

    return FieldCatalog(model=model, params=params, variants=tuple(variants))


def _field_required(owner: Param, key: str) -> bool:
    for inner in catalog_for(owner.target).params:
        if key in inner.keys:
            return inner.required
    return False


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _classify(model: type, name: str, info: Any) -> Param:
    annotation = _unwrap_optional(info.annotation)
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    field = extra.get("field") or default_field_name(name)
    required = info.is_required()
    default = None if required else info.get_default(call_default_factory=True)
    if default is PydanticUndefined:
        default = None

    common = {"name": name, "required": required, "default": default}

    if annotation is Quantity:
        symbol = extra.get("unit")
        if symbol is None:
            raise MissingStrategyFailure(
                model, f"quantity parameter '{name}' declares no unit"
            )
        try:
            target: Unit = unit(symbol)
        except ValueError as exc:
            raise MissingStrategyFailure(model, str(exc)) from exc
        return Param(kind=ParamKind.DIRECT, target=target, field=field, **common)

    if annotation in LEAF_TYPES:
        return Param(kind=ParamKind.DIRECT, target=annotation, field=field, **common)

    if _is_class(annotation) and issubclass(annotation, GridEntity):
        return Param(kind=ParamKind.EXTERNAL, target=annotation, field=field, **common)

    if is_model_class(annotation):
        nested = catalog_for(annotation)
        return Param(
            kind=ParamKind.NESTED, target=annotation, fields=nested.keys, **common
        )

    raise MissingStrategyFailure(
        model, f"parameter '{name}' has unsupported type {annotation!r}"
    )
