"""Simulation result models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from gridmap.models.base import GridEntity, mapped
from gridmap.units import Quantity


class ResultEntity(GridEntity):
    """Result of one input model at one point in time."""

    time: datetime
    input_model: UUID


class NodeResult(ResultEntity):
    v_mag: Quantity = mapped(unit="pu")
    v_ang: Quantity = mapped(unit="deg")


class LineResult(ResultEntity):
    i_a_mag: Quantity = mapped(unit="A")
    i_a_ang: Quantity = mapped(unit="deg")
    i_b_mag: Quantity = mapped(unit="A")
    i_b_ang: Quantity = mapped(unit="deg")


class SystemParticipantResult(ResultEntity):
    p: Quantity = mapped(unit="MW")
    q: Quantity = mapped(unit="Mvar")


class LoadResult(SystemParticipantResult):
    pass


class PvResult(SystemParticipantResult):
    pass


class HpResult(SystemParticipantResult):
    q_dot: Quantity = mapped(unit="MW")


class ThermalHouseResult(ResultEntity):
    q_dot: Quantity = mapped(unit="MW")
    indoor_temperature: Quantity = mapped(unit="degC")
