"""gridmap — record to entity mapping for power-grid data models.

Decodes flat field records into typed grid entities, flattens entities back
into unit-normalised records and extracts the entities a grid element
depends on.
"""

from gridmap.deserializing import StrategyRegistry, decode, decode_all, resolve
from gridmap.exceptions import (
    ConfigurationError,
    ConstructionFailure,
    ExtractionConfigurationFailure,
    MappingError,
    MissingStrategyFailure,
    ParsingFailure,
    ProcessingFailure,
    ProcessorRegistrationFailure,
    RecordError,
    SignatureMismatchFailure,
    UnrecognizedQuantityFieldFailure,
)
from gridmap.extraction import Extractor, extract
from gridmap.processing import EntityProcessor, ProcessorProvider, TimeSeriesProcessor
from gridmap.writeback import collect_records

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConstructionFailure",
    "EntityProcessor",
    "ExtractionConfigurationFailure",
    "Extractor",
    "MappingError",
    "MissingStrategyFailure",
    "ParsingFailure",
    "ProcessingFailure",
    "ProcessorProvider",
    "ProcessorRegistrationFailure",
    "RecordError",
    "SignatureMismatchFailure",
    "StrategyRegistry",
    "TimeSeriesProcessor",
    "UnrecognizedQuantityFieldFailure",
    "collect_records",
    "decode",
    "decode_all",
    "extract",
    "resolve",
]
