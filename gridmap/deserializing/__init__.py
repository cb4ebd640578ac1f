"""Record to entity decoding: leaf strategies, composites and their registry."""

from gridmap.deserializing.composite import CompositeStrategy
from gridmap.deserializing.registry import (
    StrategyRegistry,
    decode,
    decode_all,
    default_registry,
    resolve,
)
from gridmap.deserializing.strategies import LeafStrategy, QuantityStrategy, Strategy

__all__ = [
    "CompositeStrategy",
    "LeafStrategy",
    "QuantityStrategy",
    "Strategy",
    "StrategyRegistry",
    "decode",
    "decode_all",
    "default_registry",
    "resolve",
]
