"""Schema mapping engine

This package turns database schema metadata into table descriptors with
normalized column types and inferred associations.
"""

from core.exceptions import MetadataFetchError, SchemaMapperError, TypeRuleError
from core.models import SchemaMap, TableDescriptor
from core.schema import SchemaMapper, decode_type

__all__ = [
    "MetadataFetchError",
    "SchemaMap",
    "SchemaMapper",
    "SchemaMapperError",
    "TableDescriptor",
    "TypeRuleError",
    "decode_type",
]
