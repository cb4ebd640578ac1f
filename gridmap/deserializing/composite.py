"""Generic composite strategy: build one model instance from a field record."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from gridmap.catalog import FieldCatalog, ParamKind, Variant
from gridmap.deserializing.strategies import Strategy
from gridmap.exceptions import ConstructionFailure, SignatureMismatchFailure

if TYPE_CHECKING:
    from gridmap.deserializing.registry import StrategyRegistry

logger = logging.getLogger(__name__)


class CompositeStrategy(Strategy):
    """Decode records into instances of one model class.

    Parameters
    ----------
    catalog:
        Field catalog of the target model.
    registry:
        Registry the strategies of direct and nested parameters are resolved
        from.  They are bound eagerly so configuration problems surface when
        the strategy is derived, not on the first row.
    """

    def __init__(self, catalog: FieldCatalog, registry: StrategyRegistry) -> None:
        self.catalog = catalog
        self._strategies: dict[str, Strategy] = {
            p.name: registry.resolve(p.target)
            for p in catalog.params
            if p.kind is not ParamKind.EXTERNAL
        }

    @property
    def target(self) -> type:
        return self.catalog.model

    def decode(
        self,
        record: Mapping[str, str],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        record = {k.lower(): v for k, v in record.items()}
        context = context or {}
        variant = self.select_variant(record, context)

        arguments: dict[str, Any] = {}
        for param in variant.params:
            if param.name in context:
                arguments[param.name] = context[param.name]
            elif param.field is not None and param.field in context:
                arguments[param.name] = context[param.field]
            elif param.kind is ParamKind.DIRECT:
                text = record.get(param.field)
                arguments[param.name] = (
                    None if text is None else self._strategies[param.name].parse(text)
                )
            elif param.kind is ParamKind.NESTED:
                nested = self._strategies[param.name]
                sub_record = {k: record[k] for k in param.fields if k in record}
                sub_context = _context_for(nested, context)
                if not sub_record and not sub_context:
                    arguments[param.name] = None
                    continue
                arguments[param.name] = nested.decode(sub_record, sub_context)
            else:
                # External references are only ever taken from the context
                arguments[param.name] = None

        return self._construct(arguments)

    def select_variant(
        self,
        record: Mapping[str, str],
        context: Mapping[str, Any],
    ) -> Variant:
        """Pick the constructor variant matching the supplied keys.

        Only keys that tell the variants apart are compared; the supplied set
        (record keys plus context keys) restricted to them must equal exactly
        one variant's.
        """
        variants = self.catalog.variants
        if len(variants) == 1:
            return variants[0]

        discriminating = self.catalog.discriminating_keys
        supplied = set(record) | self.catalog.expand_keys(context)
        relevant = supplied & discriminating
        matches = [v for v in variants if v.keys & discriminating == relevant]
        if len(matches) == 1:
            return matches[0]

        raise SignatureMismatchFailure(
            self.target,
            sorted(supplied),
            {v.name: sorted(v.keys) for v in variants},
            [v.name for v in matches],
        )

    def _construct(self, arguments: dict[str, Any]) -> Any:
        model = self.target
        ordered = {
            p.name: arguments[p.name] for p in self.catalog.params if p.name in arguments
        }
        try:
            return model(**ordered)
        except Exception as exc:
            logger.debug("Construction of %s failed", model.__name__, exc_info=True)
            raise ConstructionFailure(
                model,
                ordered,
                f"Cannot construct {model.__name__} from arguments {ordered!r}: {exc}",
            ) from exc


def _context_for(strategy: Strategy, context: Mapping[str, Any]) -> dict[str, Any]:
    """Context entries that belong to the nested target of *strategy*."""
    if not isinstance(strategy, CompositeStrategy) or not context:
        return {}
    keys = set(strategy.catalog.keys)
    return {k: v for k, v in context.items() if k in keys}
