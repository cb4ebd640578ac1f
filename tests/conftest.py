"""Shared fixtures: a small sample grid."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import pytest

from gridmap.deserializing import StrategyRegistry
from gridmap.models import (
    GeoPoint,
    LineInput,
    LineTypeInput,
    NodeInput,
    OperationTime,
    OperatorInput,
    VoltageLevel,
)
from gridmap.units import Quantity

NODE_RECORD = {
    "uuid": "3e6be3ac-2b51-4080-b815-391313612fc7",
    "id": "Node 1",
    "vtarget": "1.0",
    "vrated": "110.0",
    "slack": "true",
    "subnet": "3",
    "voltlvl": "hv",
}

START = datetime(2020, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GRIDMAP_EXTRACTION_WORKERS", raising=False)
    monkeypatch.delenv("GRIDMAP_LENIENT_BOOLEANS", raising=False)


@pytest.fixture
def registry() -> StrategyRegistry:
    """Fresh registry, independent of the process-wide default."""
    return StrategyRegistry(lenient_booleans=False)


@pytest.fixture
def node_record() -> dict[str, str]:
    return dict(NODE_RECORD)


@pytest.fixture
def operator() -> OperatorInput:
    return OperatorInput(uuid=UUID("8f9682df-0744-4b58-a122-f0dc730f6510"), id="TSO")


@pytest.fixture
def hv() -> VoltageLevel:
    return VoltageLevel(id="hv", nominal_voltage=Quantity.of(110.0, "kV"))


@pytest.fixture
def node_a(operator: OperatorInput, hv: VoltageLevel) -> NodeInput:
    """Operated slack node."""
    return NodeInput(
        uuid=UUID("4ca90220-74c2-4369-9afa-a18bf068840d"),
        id="Node A",
        operator=operator,
        operation_time=OperationTime(start=START),
        v_target=Quantity.of(1.0, "pu"),
        slack=True,
        geo_position=GeoPoint(lon=7.411944, lat=51.492528),
        volt_lvl=hv,
        subnet=1,
    )


@pytest.fixture
def node_b(hv: VoltageLevel) -> NodeInput:
    """Node without an operator."""
    return NodeInput(
        uuid=UUID("47d29df0-ba2d-4d23-8e75-c82229c5c758"),
        id="Node B",
        v_target=Quantity.of(1.0, "pu"),
        slack=False,
        volt_lvl=hv,
        subnet=1,
    )


@pytest.fixture
def line_type() -> LineTypeInput:
    return LineTypeInput(
        uuid=UUID("3bed3eb3-9790-4874-89b5-a5434d408088"),
        id="NA2XS2Y 1x400",
        b=Quantity.of(191.636993408203, "uS/km"),
        g=Quantity.of(0.0, "uS/km"),
        r=Quantity.of(0.0780000016093254, "Ohm/km"),
        x=Quantity.of(0.128999993205071, "Ohm/km"),
        i_max=Quantity.of(550.0, "A"),
        v_rated=Quantity.of(110.0, "kV"),
    )


@pytest.fixture
def line(node_a: NodeInput, node_b: NodeInput, line_type: LineTypeInput) -> LineInput:
    return LineInput(
        uuid=UUID("91ec3bcf-1777-4d38-af67-0bf7c9fa73c7"),
        id="Line A-B",
        node_a=node_a,
        node_b=node_b,
        parallel_devices=2,
        type=line_type,
        length=Quantity.of(1.5, "km"),
    )
