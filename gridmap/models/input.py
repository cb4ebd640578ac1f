"""Input models: grid topology, asset types, thermal units and participants."""

from __future__ import annotations

from typing import ClassVar

from pydantic import model_validator

from gridmap.models.base import (
    AssetInput,
    GeoPoint,
    GridEntity,
    RelationKind,
    VoltageLevel,
    mapped,
)
from gridmap.units import Quantity

_R = RelationKind


# ---------------------------------------------------------------------------
# Nodes and connectors
# ---------------------------------------------------------------------------


class NodeInput(AssetInput):
    """Electrical node of the grid."""

    v_target: Quantity = mapped(unit="pu")
    slack: bool
    geo_position: GeoPoint | None = None
    volt_lvl: VoltageLevel
    subnet: int


class LineTypeInput(GridEntity):
    """Electrical parameters shared by lines of one kind."""

    id: str
    b: Quantity = mapped(unit="uS/km")
    g: Quantity = mapped(unit="uS/km")
    r: Quantity = mapped(unit="Ohm/km")
    x: Quantity = mapped(unit="Ohm/km")
    i_max: Quantity = mapped(unit="A")
    v_rated: Quantity = mapped(unit="kV")


class Transformer2WTypeInput(GridEntity):
    id: str
    r_sc: Quantity = mapped(unit="Ohm")
    x_sc: Quantity = mapped(unit="Ohm")
    s_rated: Quantity = mapped(unit="kVA")
    v_rated_a: Quantity = mapped(unit="kV")
    v_rated_b: Quantity = mapped(unit="kV")
    d_v: Quantity = mapped(unit="%")
    tap_max: int
    tap_min: int
    tap_neutr: int

    @model_validator(mode="after")
    def _tap_range(self) -> Transformer2WTypeInput:
        if not self.tap_min <= self.tap_neutr <= self.tap_max:
            raise ValueError("neutral tap position outside [tap_min, tap_max]")
        return self


class ConnectorInput(AssetInput):
    """Asset connecting two nodes."""

    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.NODES)

    node_a: NodeInput
    node_b: NodeInput
    parallel_devices: int = 1

    def all_nodes(self) -> list[NodeInput]:
        return [self.node_a, self.node_b]


class LineInput(ConnectorInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.NODES, _R.TYPE)

    type: LineTypeInput
    length: Quantity = mapped(unit="km")
    olm_characteristic: str = "olm:{(0.0,1.0)}"


class Transformer2WInput(ConnectorInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.NODES, _R.TYPE)

    type: Transformer2WTypeInput
    tap_pos: int
    auto_tap: bool


class SwitchInput(ConnectorInput):
    closed: bool


class MeasurementUnitInput(AssetInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.NODES)

    node: NodeInput
    v_mag: bool
    v_ang: bool
    p: bool
    q: bool

    def all_nodes(self) -> list[NodeInput]:
        return [self.node]


# ---------------------------------------------------------------------------
# Thermal units
# ---------------------------------------------------------------------------


class ThermalBusInput(AssetInput):
    """Connection point of thermal units."""


class ThermalHouseInput(AssetInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.THERMAL_BUS)

    thermal_bus: ThermalBusInput = mapped(field="thermalbus")
    eth_losses: Quantity = mapped(unit="kW/K")
    eth_capa: Quantity = mapped(unit="kWh/K")
    target_temperature: Quantity = mapped(unit="degC")


class CylindricalStorageInput(AssetInput):
    """Thermal storage shaped as a cylinder."""

    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.THERMAL_BUS)

    thermal_bus: ThermalBusInput
    storage_volume_lvl: Quantity = mapped(unit="m3")
    inlet_temp: Quantity = mapped(unit="degC")
    return_temp: Quantity = mapped(unit="degC")
    p_thermal_max: Quantity = mapped(unit="kW")


# ---------------------------------------------------------------------------
# System participants
# ---------------------------------------------------------------------------


class EmInput(AssetInput):
    """Energy management unit; may itself be controlled by a parent unit."""

    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.EM)

    control_strategy: str
    parent_em: EmInput | None = None

    @property
    def em(self) -> EmInput | None:
        return self.parent_em


class SystemParticipantInput(AssetInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.OPERATOR, _R.NODES, _R.EM)

    node: NodeInput
    q_characteristics: str = "cosPhiFixed:{(0.0,1.0)}"
    em: EmInput | None = None

    def all_nodes(self) -> list[NodeInput]:
        return [self.node]


class LoadInput(SystemParticipantInput):
    load_profile: str
    e_cons_annual: Quantity = mapped(unit="kWh")
    s_rated: Quantity = mapped(unit="kVA")
    cos_phi_rated: float


class PvInput(SystemParticipantInput):
    azimuth: Quantity = mapped(unit="deg")
    elevation_angle: Quantity = mapped(unit="deg")
    eta_conv: Quantity = mapped(unit="%")
    s_rated: Quantity = mapped(unit="kVA")
    cos_phi_rated: float


class HpTypeInput(GridEntity):
    id: str
    capex: Quantity = mapped(unit="EUR")
    opex: Quantity = mapped(unit="EUR/MWh")
    s_rated: Quantity = mapped(unit="kVA")
    cos_phi_rated: float
    p_thermal: Quantity = mapped(unit="kW")


class HpInput(SystemParticipantInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (
        _R.OPERATOR, _R.NODES, _R.EM, _R.TYPE, _R.THERMAL_BUS,
    )

    type: HpTypeInput
    thermal_bus: ThermalBusInput


class ChpTypeInput(GridEntity):
    id: str
    capex: Quantity = mapped(unit="EUR")
    opex: Quantity = mapped(unit="EUR/MWh")
    eta_el: Quantity = mapped(unit="%")
    eta_thermal: Quantity = mapped(unit="%")
    s_rated: Quantity = mapped(unit="kVA")
    cos_phi_rated: float
    p_thermal: Quantity = mapped(unit="kW")
    p_own: Quantity = mapped(unit="kW")


class ChpInput(SystemParticipantInput):
    relations: ClassVar[tuple[RelationKind, ...]] = (
        _R.OPERATOR, _R.NODES, _R.EM, _R.TYPE, _R.THERMAL_BUS, _R.THERMAL_STORAGE,
    )

    type: ChpTypeInput
    thermal_bus: ThermalBusInput
    thermal_storage: CylindricalStorageInput
    market_reaction: bool


# ---------------------------------------------------------------------------
# Graphics
# ---------------------------------------------------------------------------


class NodeGraphicInput(GridEntity):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.NODES,)

    graphic_layer: str
    point: GeoPoint | None = None
    node: NodeInput

    def all_nodes(self) -> list[NodeInput]:
        return [self.node]


class LineGraphicInput(GridEntity):
    relations: ClassVar[tuple[RelationKind, ...]] = (_R.LINE,)

    graphic_layer: str
    line: LineInput
