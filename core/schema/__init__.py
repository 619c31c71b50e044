"""Schema mapping and relationship inference.

This package decodes column types, normalizes columns, detects junction tables
and wires associations between tables.
"""

from core.schema.associations import build_associations
from core.schema.columns import find_uniqueness, normalize_column, normalize_columns, resolve_reference
from core.schema.junction import (
    DEFAULT_JUNCTION_RULES,
    JunctionClassifier,
    JunctionRule,
    resolve_junction_rules,
)
from core.schema.mapper import MetadataSource, SchemaMapper, StaticMetadataSource
from core.schema.type_mapping import TYPE_HINTS, TypeDecoder, TypeRule, decode_type

__all__ = [
    # Type decoding
    "TYPE_HINTS",
    "TypeDecoder",
    "TypeRule",
    "decode_type",
    # Columns
    "find_uniqueness",
    "normalize_column",
    "normalize_columns",
    "resolve_reference",
    # Junction tables
    "DEFAULT_JUNCTION_RULES",
    "JunctionClassifier",
    "JunctionRule",
    "resolve_junction_rules",
    # Associations
    "build_associations",
    # Orchestration
    "MetadataSource",
    "SchemaMapper",
    "StaticMetadataSource",
]
