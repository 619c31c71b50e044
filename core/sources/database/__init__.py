"""Database introspection and schema mapping.

This package inspects databases through SQLAlchemy and maps their tables with
the schema mapper.
"""

from core.sources.database.engine import (
    SUPPORTED_DATABASE_TYPES,
    create_database_engine,
    sanitize_connection_string,
    validate_database_type,
)
from core.sources.database.introspection import SqlAlchemyMetadataSource, filter_tables
from core.sources.database.mapping import map_database_schema, map_database_schema_async

__all__ = [
    # Engine
    "SUPPORTED_DATABASE_TYPES",
    "create_database_engine",
    "sanitize_connection_string",
    "validate_database_type",
    # Introspection
    "SqlAlchemyMetadataSource",
    "filter_tables",
    # Mapping
    "map_database_schema",
    "map_database_schema_async",
]
