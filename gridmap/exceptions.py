"""Failure taxonomy for decoding, flattening and extraction.

Two families:

* :class:`ConfigurationError` — a type, catalog or processor is unusable.
  Raised up front; batch helpers do not catch it.
* :class:`RecordError` — one row or entity could not be handled.  Batch
  helpers log it and continue with the rest.

Every class carries a stable ``code`` so callers can tell failures apart
without matching on messages.
"""

from __future__ import annotations

from typing import Any


class MappingError(Exception):
    """Base class of all gridmap failures."""

    code = "mapping"


class ConfigurationError(MappingError):
    """A type or processor is misconfigured; retrying with other rows won't help."""

    code = "configuration"


class RecordError(MappingError):
    """A single record or entity failed; sibling rows are unaffected."""

    code = "record"


class MissingStrategyFailure(ConfigurationError):
    """No leaf or composite strategy can be derived for a target."""

    code = "missing_strategy"

    def __init__(self, target: Any, reason: str = "") -> None:
        self.target = target
        self.reason = reason
        name = getattr(target, "__name__", repr(target))
        message = f"No deserializing strategy for {name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ExtractionConfigurationFailure(ConfigurationError):
    """An entity's declared relations yield nothing although they should."""

    code = "extraction_configuration"

    def __init__(self, entity_type: type, message: str) -> None:
        self.entity_type = entity_type
        super().__init__(f"{entity_type.__name__}: {message}")


class ProcessorRegistrationFailure(ConfigurationError):
    """A processor cannot be built for the requested class or combination."""

    code = "processor_registration"


class ParsingFailure(RecordError):
    """Leaf text could not be parsed into its target kind."""

    code = "parsing"

    def __init__(self, kind: str, text: str, reason: str = "") -> None:
        self.kind = kind
        self.text = text
        message = f"Cannot parse {text!r} as {kind}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ConstructionFailure(RecordError):
    """The target constructor rejected the assembled arguments."""

    code = "construction"

    def __init__(
        self,
        entity_type: type,
        arguments: dict[str, Any],
        message: str = "",
    ) -> None:
        self.entity_type = entity_type
        self.arguments = arguments
        super().__init__(
            message
            or f"Cannot construct {entity_type.__name__} from arguments {arguments!r}"
        )


class SignatureMismatchFailure(ConstructionFailure):
    """Supplied keys match zero or several constructor variants."""

    code = "signature_mismatch"

    def __init__(
        self,
        entity_type: type,
        supplied: list[str],
        candidates: dict[str, list[str]],
        matches: list[str],
    ) -> None:
        self.supplied = supplied
        self.candidates = candidates
        self.matches = matches
        outcome = "no constructor variant" if not matches else (
            f"ambiguous constructor variants {matches}"
        )
        listing = "; ".join(f"{name}: {keys}" for name, keys in candidates.items())
        super().__init__(
            entity_type,
            {},
            f"Cannot construct {entity_type.__name__}: {outcome} matches supplied "
            f"keys {supplied}. Candidates: {listing}",
        )


class ProcessingFailure(RecordError):
    """An entity field could not be read or formatted while flattening."""

    code = "processing"

    def __init__(
        self,
        entity_type: str,
        field_name: str,
        value: Any,
        message: str = "",
    ) -> None:
        self.entity_type = entity_type
        self.field_name = field_name
        self.value = value
        super().__init__(
            message
            or f"Cannot process field '{field_name}' of {entity_type} (value {value!r})"
        )


class UnrecognizedQuantityFieldFailure(ProcessingFailure):
    """No target unit is declared for this (owner type, field) pair."""

    code = "unrecognized_quantity_field"

    def __init__(self, entity_type: str, field_name: str, value: Any) -> None:
        super().__init__(
            entity_type,
            field_name,
            value,
            f"No unit declared for quantity field '{field_name}' of {entity_type} "
            f"(value {value!r})",
        )
