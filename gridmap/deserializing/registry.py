"""StrategyRegistry — resolve, cache and apply deserializing strategies."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Mapping

from gridmap.catalog import catalog_for, is_model_class
from gridmap.config import VALUE_KEY, lenient_booleans, load_config
from gridmap.deserializing.composite import CompositeStrategy
from gridmap.deserializing.strategies import (
    QuantityStrategy,
    Strategy,
    builtin_strategies,
)
from gridmap.exceptions import MissingStrategyFailure, RecordError
from gridmap.units import Quantity, Unit

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Process-wide cache from type tag to strategy.

    Tags are the leaf types (``str``, ``bool``, ``int``, ``float``, ``UUID``,
    ``datetime``, :class:`~gridmap.models.base.GeoPoint`), :class:`Unit`
    objects for quantities, and model classes.  Leaf strategies are installed
    at construction; quantity and composite strategies are derived on first
    use and registered exactly once.  Entries are never removed.

    Parameters
    ----------
    lenient_booleans:
        Decode unparseable boolean text as ``False``.  Read from the
        configuration when not given.
    """

    def __init__(
        self,
        *,
        lenient_booleans: bool | None = None,
        config: dict[str, str] | None = None,
    ) -> None:
        if lenient_booleans is None:
            lenient_booleans = _lenient(config)
        self._lock = threading.RLock()
        self._strategies: dict[Any, Strategy] = {
            s.target: s for s in builtin_strategies(lenient_booleans)
        }

    def __contains__(self, target: Any) -> bool:
        return target in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def resolve(self, target: Any) -> Strategy:
        """Return the strategy for *target*, deriving it on first use.

        Raises
        ------
        MissingStrategyFailure
            When no leaf or composite strategy can be derived.  This is a
            configuration error; do not retry it per record.
        """
        strategy = self._strategies.get(target)
        if strategy is not None:
            return strategy
        with self._lock:
            strategy = self._strategies.get(target)
            if strategy is None:
                strategy = self._derive(target)
                self._strategies[target] = strategy
                logger.info("Registered strategy for %s", _tag_name(target))
        return strategy

    def register(self, strategy: Strategy) -> Strategy:
        """Register *strategy* unless one exists for its target already.

        Returns the strategy that ends up registered.
        """
        with self._lock:
            return self._strategies.setdefault(strategy.target, strategy)

    def decode(
        self,
        target: Any,
        record: Mapping[str, str],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Decode *record* into *target*.

        A context value that already is a *target* instance, stored under one
        of the record's keys or under ``value``, is returned as is.
        """
        context = context or {}
        supplied = _from_context(target, record, context)
        if supplied is not None:
            return supplied
        return self.resolve(target).decode(record, context)

    def decode_all(
        self,
        target: Any,
        records: Iterable[Mapping[str, str]],
        context: Mapping[str, Any] | None = None,
    ) -> list[Any]:
        """Decode every record, logging and skipping the ones that fail.

        The strategy is resolved up front, so configuration errors propagate
        instead of being reported once per record.  Context instances of
        *target* short-cut decoding as in :meth:`decode`.
        """
        context = context or {}
        strategy = self.resolve(target)
        decoded: list[Any] = []
        skipped = 0
        for index, record in enumerate(records):
            try:
                supplied = _from_context(target, record, context)
                decoded.append(
                    supplied if supplied is not None else strategy.decode(record, context)
                )
            except RecordError:
                skipped += 1
                logger.warning(
                    "Skipping record %d of %s", index, _tag_name(target), exc_info=True
                )
        if skipped:
            logger.info(
                "Decoded %d %s records, skipped %d",
                len(decoded),
                _tag_name(target),
                skipped,
            )
        return decoded

    def _derive(self, target: Any) -> Strategy:
        if isinstance(target, Unit):
            return QuantityStrategy(target)
        if target is Quantity:
            raise MissingStrategyFailure(target, "quantities are resolved by unit")
        if is_model_class(target):
            return CompositeStrategy(catalog_for(target), self)
        raise MissingStrategyFailure(target)


def _lenient(config: dict[str, str] | None) -> bool:
    return lenient_booleans(config or load_config())


def _tag_name(target: Any) -> str:
    if isinstance(target, Unit):
        return f"quantity [{target.symbol}]"
    return getattr(target, "__name__", repr(target))


def _is_instance(value: Any, target: Any) -> bool:
    if isinstance(target, Unit):
        return isinstance(value, Quantity) and value.unit == target.symbol
    return isinstance(target, type) and isinstance(value, target)


def _from_context(
    target: Any, record: Mapping[str, str], context: Mapping[str, Any]
) -> Any:
    """A *target* instance stored in *context* under a record key or ``value``."""
    for key in (*record, VALUE_KEY):
        candidate = context.get(key.lower())
        if candidate is not None and _is_instance(candidate, target):
            return candidate
    return None


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------

_default: StrategyRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> StrategyRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = StrategyRegistry()
    return _default


def resolve(target: Any) -> Strategy:
    return default_registry().resolve(target)


def decode(
    target: Any,
    record: Mapping[str, str],
    context: Mapping[str, Any] | None = None,
) -> Any:
    return default_registry().decode(target, record, context)


def decode_all(
    target: Any,
    records: Iterable[Mapping[str, str]],
    context: Mapping[str, Any] | None = None,
) -> list[Any]:
    return default_registry().decode_all(target, records, context)
