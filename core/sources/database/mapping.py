"""Database schema mapping entry points."""

import asyncio
import logging
from typing import Any

from core.models import SchemaMap
from core.schema.mapper import SchemaMapper
from core.sources.database.engine import sanitize_connection_string
from core.sources.database.introspection import SqlAlchemyMetadataSource, filter_tables

logger = logging.getLogger(__name__)


async def map_database_schema_async(
    connection_string: str,
    database_type: str,
    schema: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    junction_rules: Any = None,
) -> SchemaMap:
    """Introspect a database and map its tables.

    Args:
        connection_string: Database connection string
        database_type: Database type (postgresql, mysql, sqlite)
        schema: Database schema name (optional)
        include: Only map these tables (None = all tables)
        exclude: Tables to leave out
        junction_rules: Junction rule configuration (None = default rule)

    Returns:
        SchemaMap with every selected table

    Raises:
        ValueError: If database_type or the junction rules are invalid
        MetadataFetchError: If any table cannot be inspected
    """
    source = SqlAlchemyMetadataSource(connection_string, database_type, schema)
    try:
        mapper = SchemaMapper(source, junction_rules=junction_rules)
        all_tables = await asyncio.to_thread(source.list_tables)
        tables = filter_tables(all_tables, include, exclude)
        logger.info(
            f"Mapping {len(tables)}/{len(all_tables)} tables from {sanitize_connection_string(connection_string)}"
        )
        return await mapper.map_schema(tables)
    finally:
        source.dispose()


def map_database_schema(
    connection_string: str,
    database_type: str,
    schema: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    junction_rules: Any = None,
) -> SchemaMap:
    """Synchronous wrapper around map_database_schema_async"""
    return asyncio.run(
        map_database_schema_async(
            connection_string,
            database_type,
            schema=schema,
            include=include,
            exclude=exclude,
            junction_rules=junction_rules,
        )
    )
