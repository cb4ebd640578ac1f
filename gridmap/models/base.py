"""Base building blocks of the grid data model.

Every persistable object is a :class:`GridEntity` identified by its ``uuid``.
Entities are frozen pydantic models; their fields carry the mapping metadata
(field name, quantity unit) through :func:`mapped`, and two class variables
describe them to the mapping engine:

``variants``
    Named constructor variants, each listing the parameters (or nested
    fields) it leaves out.
``relations``
    The :class:`RelationKind` contracts the extractor may follow.
"""

from __future__ import annotations

import enum
import json
from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gridmap.config import NIL_UUID, NO_OPERATOR_ID
from gridmap.units import Quantity


def mapped(
    default: Any = ...,
    *,
    field: str | None = None,
    unit: str | None = None,
    **kwargs: Any,
) -> Any:
    """Declare a model field together with its record mapping.

    Parameters
    ----------
    field:
        Record field name; defaults to the attribute name lower-cased with
        underscores removed (``v_target`` -> ``vtarget``).
    unit:
        Unit symbol a quantity field decodes into.
    """
    extra: dict[str, Any] = {}
    if field is not None:
        extra["field"] = field
    if unit is not None:
        extra["unit"] = unit
    return Field(default, json_schema_extra=extra or None, **kwargs)


class RelationKind(str, enum.Enum):
    """Relations an entity may expose to the dependency extractor."""

    NODES = "nodes"
    TYPE = "type"
    OPERATOR = "operator"
    THERMAL_BUS = "thermal_bus"
    THERMAL_STORAGE = "thermal_storage"
    LINE = "line"
    EM = "em"


class GeoPoint(BaseModel):
    """WGS84 point, (de)serialised as a GeoJSON ``Point``."""

    model_config = ConfigDict(frozen=True)

    lon: float
    lat: float

    def to_geojson(self) -> str:
        return json.dumps(
            {"type": "Point", "coordinates": [self.lon, self.lat]},
            separators=(",", ":"),
        )

    @classmethod
    def from_geojson(cls, text: str) -> GeoPoint:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid GeoJSON: {exc.msg}") from exc
        if not isinstance(data, dict) or data.get("type") != "Point":
            raise ValueError("GeoJSON object is not a Point")
        coords = data.get("coordinates")
        if (
            not isinstance(coords, list)
            or len(coords) != 2
            or not all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in coords)
        ):
            raise ValueError("Point coordinates must be [lon, lat]")
        return cls(lon=float(coords[0]), lat=float(coords[1]))


class GridEntity(BaseModel):
    """Anything with a stable identifier that gets persisted on its own."""

    model_config = ConfigDict(frozen=True)

    relations: ClassVar[tuple[RelationKind, ...]] = ()
    variants: ClassVar[dict[str, tuple[str, ...]]] = {"default": ()}

    uuid: UUID


class OperatorInput(GridEntity):
    """Party operating one or more assets."""

    id: str


NO_OPERATOR_ASSIGNED = OperatorInput(uuid=NIL_UUID, id=NO_OPERATOR_ID)


def is_no_operator(operator: Any) -> bool:
    return isinstance(operator, OperatorInput) and operator.uuid == NIL_UUID


class OperationTime(BaseModel):
    """Period in which an asset is in operation; open ends are unlimited."""

    model_config = ConfigDict(frozen=True)

    start: datetime | None = mapped(None, field="operatesfrom")
    end: datetime | None = mapped(None, field="operatesuntil")

    @model_validator(mode="after")
    def _ordered(self) -> OperationTime:
        if self.start and self.end and self.start > self.end:
            raise ValueError("operation time ends before it starts")
        return self


class VoltageLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = mapped(field="voltlvl")
    nominal_voltage: Quantity = mapped(field="vrated", unit="kV")


class AssetInput(GridEntity):
    """An operable grid asset.

    Variants follow the operation-time columns a record carries: neither
    date, only ``operatesfrom``, only ``operatesuntil`` or both.  The
    operator is a reference and never decides the variant; it comes from
    the resolved context or falls back to :data:`NO_OPERATOR_ASSIGNED`.
    """

    relations: ClassVar[tuple[RelationKind, ...]] = (RelationKind.OPERATOR,)
    variants: ClassVar[dict[str, tuple[str, ...]]] = {
        "unlimited": ("operatesfrom", "operatesuntil"),
        "from": ("operatesuntil",),
        "until": ("operatesfrom",),
        "bounded": (),
    }

    id: str
    operator: OperatorInput = NO_OPERATOR_ASSIGNED
    operation_time: OperationTime = Field(default_factory=OperationTime)

    @field_validator("operator", mode="before")
    @classmethod
    def _default_operator(cls, v: Any) -> Any:
        return NO_OPERATOR_ASSIGNED if v is None else v

    @field_validator("operation_time", mode="before")
    @classmethod
    def _default_operation_time(cls, v: Any) -> Any:
        return OperationTime() if v is None else v
