"""Leaf strategies: decode one textual field into a typed value.

Every strategy exposes two entry points:

* :meth:`LeafStrategy.parse` decodes a single text value;
* :meth:`Strategy.decode` accepts a whole field record and picks the one
  relevant field (the canonical ``value`` key, else the first field), after
  dropping keys already satisfied by the resolved-value context.
"""

from __future__ import annotations

import abc
import math
import re
from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from gridmap.config import VALUE_KEY
from gridmap.exceptions import ParsingFailure
from gridmap.models.base import GeoPoint
from gridmap.units import Quantity, Unit, parse_quantity

# Trailing zone id as written by some serialisers, e.g. "...+01:00[Europe/Berlin]"
_ZONE_ID_RE = re.compile(r"\[[^\]]*\]$")


class Strategy(abc.ABC):
    """Decodes a field record into a value of :attr:`target`."""

    @property
    @abc.abstractmethod
    def target(self) -> Any:
        """Type tag this strategy is registered under."""

    @abc.abstractmethod
    def decode(
        self,
        record: Mapping[str, str],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Decode *record*, preferring values supplied in *context*."""


class LeafStrategy(Strategy):
    """Strategy for a value carried by one field."""

    kind: str = "value"

    @abc.abstractmethod
    def _parse(self, text: str) -> Any:
        """Parse *text*; raise :class:`ValueError` when malformed."""

    def parse(self, text: str) -> Any:
        try:
            return self._parse(text)
        except ParsingFailure:
            raise
        except (ValueError, TypeError) as exc:
            raise ParsingFailure(self.kind, text, str(exc)) from exc

    def decode(
        self,
        record: Mapping[str, str],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        context = context or {}
        remaining = {k: v for k, v in record.items() if k not in context}
        if not remaining:
            return None
        if VALUE_KEY in remaining:
            return self.parse(remaining[VALUE_KEY])
        return self.parse(next(iter(remaining.values())))


class StringStrategy(LeafStrategy):
    kind = "string"
    target = str

    def _parse(self, text: str) -> str:
        return text


class BooleanStrategy(LeafStrategy):
    """Case-insensitive ``true`` / ``false``.

    With *lenient* set, any other text decodes to ``False`` instead of
    raising.
    """

    kind = "boolean"
    target = bool

    def __init__(self, lenient: bool = False) -> None:
        self.lenient = lenient

    def _parse(self, text: str) -> bool:
        normalized = text.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false" or self.lenient:
            return False
        raise ValueError("expected 'true' or 'false'")


class IntegerStrategy(LeafStrategy):
    kind = "integer"
    target = int

    def _parse(self, text: str) -> int:
        return int(text.strip())


class FloatStrategy(LeafStrategy):
    kind = "float"
    target = float

    def _parse(self, text: str) -> float:
        value = float(text.strip())
        if not math.isfinite(value):
            raise ValueError("value is not finite")
        return value


class UuidStrategy(LeafStrategy):
    """Canonical 8-4-4-4-12 hexadecimal form only."""

    kind = "uuid"
    target = UUID

    def _parse(self, text: str) -> UUID:
        candidate = text.strip()
        value = UUID(candidate)
        if str(value) != candidate.lower():
            raise ValueError("not in canonical 8-4-4-4-12 form")
        return value


class TimestampStrategy(LeafStrategy):
    """ISO-8601 timestamps with an offset; empty text decodes to ``None``."""

    kind = "timestamp"
    target = datetime

    def _parse(self, text: str) -> datetime | None:
        candidate = _ZONE_ID_RE.sub("", text.strip())
        if not candidate:
            return None
        if candidate.endswith(("Z", "z")):
            candidate = candidate[:-1] + "+00:00"
        value = datetime.fromisoformat(candidate)
        if value.tzinfo is None:
            raise ValueError("timestamp carries no offset")
        return value


class GeoPointStrategy(LeafStrategy):
    """GeoJSON ``Point`` blob; empty text means "no point"."""

    kind = "geo point"
    target = GeoPoint

    def _parse(self, text: str) -> GeoPoint | None:
        if not text.strip():
            return None
        return GeoPoint.from_geojson(text)


class QuantityStrategy(LeafStrategy):
    """Magnitude with an optional unit symbol, converted into :attr:`unit`."""

    kind = "quantity"

    def __init__(self, target_unit: Unit) -> None:
        self.unit = target_unit

    @property
    def target(self) -> Unit:
        return self.unit

    def _parse(self, text: str) -> Quantity | None:
        if not text.strip():
            return None
        return parse_quantity(text, self.unit)


def builtin_strategies(lenient_booleans: bool = False) -> list[LeafStrategy]:
    """Leaf strategies available in every registry."""
    return [
        StringStrategy(),
        BooleanStrategy(lenient=lenient_booleans),
        IntegerStrategy(),
        FloatStrategy(),
        UuidStrategy(),
        TimestampStrategy(),
        GeoPointStrategy(),
    ]
