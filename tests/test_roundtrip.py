"""Flatten entities and decode the records back into equal entities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import pytest

from gridmap.catalog import ParamKind, catalog_for
from gridmap.deserializing import StrategyRegistry
from gridmap.models import (
    ChpInput,
    ChpTypeInput,
    CylindricalStorageInput,
    EmInput,
    GridEntity,
    LineInput,
    LoadInput,
    NodeInput,
    NodeResult,
    OperationTime,
    OperatorInput,
    PvInput,
    PvResult,
    ThermalBusInput,
    ThermalHouseResult,
    TimeBasedValue,
    Transformer2WInput,
    Transformer2WTypeInput,
)
from gridmap.models.base import is_no_operator
from gridmap.models.timeseries import HeatAndSValue, IndividualTimeSeries
from gridmap.processing import ProcessorProvider
from gridmap.units import Quantity

T0 = datetime(2021, 6, 1, 12, 15, tzinfo=timezone.utc)


def _context(entity: GridEntity) -> dict[str, Any]:
    """Referenced entities of *entity*, keyed by parameter name."""
    context = {}
    for param in catalog_for(type(entity)).params:
        if param.kind is not ParamKind.EXTERNAL:
            continue
        value = getattr(entity, param.name)
        if value is not None and not is_no_operator(value):
            context[param.name] = value
    return context


def _roundtrip(
    provider: ProcessorProvider, registry: StrategyRegistry, entity: GridEntity
) -> GridEntity:
    record = provider.process_entity(entity)
    return registry.decode(type(entity), record, _context(entity))


@pytest.fixture(scope="module")
def provider() -> ProcessorProvider:
    return ProcessorProvider()


@pytest.fixture
def thermal_bus(operator: OperatorInput) -> ThermalBusInput:
    return ThermalBusInput(
        uuid=UUID("0d95d7f2-49fb-4d49-8636-383a5220384e"),
        id="Thermal bus",
        operator=operator,
        operation_time=OperationTime(start=T0),
    )


@pytest.fixture
def em(operator: OperatorInput) -> EmInput:
    parent = EmInput(
        uuid=UUID("6c1d3a8e-2f4b-4d8a-b1e0-5a7c9e3f2d14"),
        id="EM parent",
        operator=operator,
        control_strategy="prioritized",
    )
    return EmInput(
        uuid=UUID("3a7b0a07-bc5e-4b2f-9d1f-1c5c2a9f7a10"),
        id="EM household",
        control_strategy="self_optimization",
        parent_em=parent,
    )


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class TestInputRoundtrip:
    def test_node_operating_from_date(
        self, provider: ProcessorProvider, registry: StrategyRegistry, node_a: NodeInput
    ) -> None:
        assert _roundtrip(provider, registry, node_a) == node_a

    def test_unlimited_node_without_operator(
        self, provider: ProcessorProvider, registry: StrategyRegistry, node_b: NodeInput
    ) -> None:
        assert _roundtrip(provider, registry, node_b) == node_b

    def test_bounded_node_without_operator(
        self, provider: ProcessorProvider, registry: StrategyRegistry, node_b: NodeInput
    ) -> None:
        period = OperationTime(start=T0, end=datetime(2041, 1, 1, tzinfo=timezone.utc))
        node = node_b.model_copy(update={"operation_time": period})
        assert _roundtrip(provider, registry, node) == node

    def test_line(
        self, provider: ProcessorProvider, registry: StrategyRegistry, line: LineInput
    ) -> None:
        assert _roundtrip(provider, registry, line) == line

    def test_transformer(
        self,
        provider: ProcessorProvider,
        registry: StrategyRegistry,
        node_a: NodeInput,
        node_b: NodeInput,
    ) -> None:
        transformer_type = Transformer2WTypeInput(
            uuid=UUID("97e2e5a7-2c3d-4c5b-a0c1-1e1a44a8a1a5"),
            id="HV-MV",
            r_sc=Quantity.of(45.375, "Ohm"),
            x_sc=Quantity.of(102.759, "Ohm"),
            s_rated=Quantity.of(20000.0, "kVA"),
            v_rated_a=Quantity.of(110.0, "kV"),
            v_rated_b=Quantity.of(20.0, "kV"),
            d_v=Quantity.of(1.5, "%"),
            tap_max=10,
            tap_min=-10,
            tap_neutr=0,
        )
        transformer = Transformer2WInput(
            uuid=UUID("58247de7-e297-4d9b-a5e4-b662c058c655"),
            id="Transformer",
            node_a=node_a,
            node_b=node_b,
            type=transformer_type,
            tap_pos=2,
            auto_tap=True,
        )
        assert _roundtrip(provider, registry, transformer_type) == transformer_type
        assert _roundtrip(provider, registry, transformer) == transformer

    def test_load_with_em(
        self,
        provider: ProcessorProvider,
        registry: StrategyRegistry,
        node_b: NodeInput,
        em: EmInput,
    ) -> None:
        load = LoadInput(
            uuid=UUID("eaf77f7e-9001-479f-94ca-7fb657766f5f"),
            id="Load",
            node=node_b,
            em=em,
            load_profile="h0",
            e_cons_annual=Quantity.of(4000.0, "kWh"),
            s_rated=Quantity.of(25.0, "kVA"),
            cos_phi_rated=0.95,
        )
        assert _roundtrip(provider, registry, load) == load
        assert _roundtrip(provider, registry, em) == em

    def test_pv_without_em(
        self, provider: ProcessorProvider, registry: StrategyRegistry, node_a: NodeInput
    ) -> None:
        pv = PvInput(
            uuid=UUID("d56f15b7-8293-4b98-b5bd-58f6273ce229"),
            id="PV",
            node=node_a,
            azimuth=Quantity.of(-8.926613807678223, "deg"),
            elevation_angle=Quantity.of(41.01871871948242, "deg"),
            eta_conv=Quantity.of(95.0, "%"),
            s_rated=Quantity.of(10.0, "kVA"),
            cos_phi_rated=0.9,
        )
        record = provider.process_entity(pv)
        assert record["em"] == ""
        assert _roundtrip(provider, registry, pv) == pv

    def test_chp(
        self,
        provider: ProcessorProvider,
        registry: StrategyRegistry,
        node_a: NodeInput,
        thermal_bus: ThermalBusInput,
    ) -> None:
        storage = CylindricalStorageInput(
            uuid=UUID("8851813b-3a7d-4fee-874b-4df9d724e4b3"),
            id="Storage",
            thermal_bus=thermal_bus,
            storage_volume_lvl=Quantity.of(1.039, "m3"),
            inlet_temp=Quantity.of(110.0, "degC"),
            return_temp=Quantity.of(80.0, "degC"),
            p_thermal_max=Quantity.of(20.0, "kW"),
        )
        chp_type = ChpTypeInput(
            uuid=UUID("5ebd8f7e-dedb-4017-bb86-6373c4b68eb8"),
            id="CHP type",
            capex=Quantity.of(100000.0, "EUR"),
            opex=Quantity.of(40.0, "EUR/MWh"),
            eta_el=Quantity.of(19.0, "%"),
            eta_thermal=Quantity.of(76.0, "%"),
            s_rated=Quantity.of(100.0, "kVA"),
            cos_phi_rated=0.95,
            p_thermal=Quantity.of(144.0, "kW"),
            p_own=Quantity.of(0.0, "kW"),
        )
        chp = ChpInput(
            uuid=UUID("9981b4d7-5a8e-4909-9602-e2e7ef4fca5c"),
            id="CHP",
            node=node_a,
            type=chp_type,
            thermal_bus=thermal_bus,
            thermal_storage=storage,
            market_reaction=False,
        )
        for entity in (thermal_bus, storage, chp_type, chp):
            assert _roundtrip(provider, registry, entity) == entity


# ---------------------------------------------------------------------------
# Results and time series
# ---------------------------------------------------------------------------


class TestResultRoundtrip:
    def test_node_result(
        self, provider: ProcessorProvider, registry: StrategyRegistry, node_a: NodeInput
    ) -> None:
        result = NodeResult(
            uuid=UUID("c3b6b6d4-0a8e-4d3c-9f6e-3a8b1f2e4d5c"),
            time=T0,
            input_model=node_a.uuid,
            v_mag=Quantity.of(0.98, "pu"),
            v_ang=Quantity.of(-1.25, "deg"),
        )
        assert _roundtrip(provider, registry, result) == result

    def test_units_in_result_records(
        self, provider: ProcessorProvider, registry: StrategyRegistry
    ) -> None:
        result = PvResult(
            uuid=UUID("5d8a3f1e-7b2c-4e9d-a6f0-1c4b8e2d3a7f"),
            time=T0,
            input_model=UUID("d56f15b7-8293-4b98-b5bd-58f6273ce229"),
            p=Quantity.of(-7.5, "kW"),
            q=Quantity.of(0.0, "kvar"),
        )
        record = provider.process_entity(result)
        assert record["p"] == "-0.0075"
        decoded = registry.decode(PvResult, record)
        assert decoded.p == Quantity.of(-0.0075, "MW")

    def test_thermal_house_result(
        self, provider: ProcessorProvider, registry: StrategyRegistry
    ) -> None:
        result = ThermalHouseResult(
            uuid=UUID("0f1e2d3c-4b5a-4968-8776-a5b4c3d2e1f0"),
            time=T0,
            input_model=UUID("1a2b3c4d-5e6f-4a7b-8c9d-0e1f2a3b4c5d"),
            q_dot=Quantity.of(0.0012, "MW"),
            indoor_temperature=Quantity.of(21.5, "degC"),
        )
        assert _roundtrip(provider, registry, result) == result

    def test_time_series_entries(
        self, provider: ProcessorProvider, registry: StrategyRegistry
    ) -> None:
        entries = tuple(
            TimeBasedValue[HeatAndSValue](
                uuid=UUID(int=i + 1),
                time=T0,
                value=HeatAndSValue(
                    p=Quantity.of(1.5 * i, "kW"),
                    q=Quantity.of(0.25, "kvar"),
                    heat_demand=Quantity.of(3.0, "kW") if i else None,
                ),
            )
            for i in range(2)
        )
        series = IndividualTimeSeries(
            uuid=UUID("a4bbcb77-b9d0-4b88-92be-b9a14a3e332b"), entries=entries
        )
        records = provider.process_time_series(series)
        decoded = [
            registry.decode(TimeBasedValue[HeatAndSValue], record) for record in records
        ]
        assert decoded == list(entries)
        assert all(r["timeseries"] == str(series.uuid) for r in records)
