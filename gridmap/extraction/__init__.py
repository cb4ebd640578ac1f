"""Dependency extraction over declared relation kinds."""

from gridmap.extraction.extractor import Extractor, direct_relations, extract
from gridmap.extraction.relations import RELATION_ACCESSORS

__all__ = ["RELATION_ACCESSORS", "Extractor", "direct_relations", "extract"]
