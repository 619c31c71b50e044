"""Schema mapping handlers"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from core.exceptions import SchemaMapperError
from core.models import TableMetadata
from core.schema.mapper import SchemaMapper, StaticMetadataSource
from core.schema.type_mapping import decode_type
from core.sources.database import map_database_schema_async, sanitize_connection_string

logger = logging.getLogger(__name__)


class SchemaHandler:
    """Handles all schema mapping operations"""

    async def map_database_schema(
        self,
        connection_string: str,
        database_type: str,
        schema: str | None = None,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        junction_rules: bool | list[str] | None = None,
    ) -> str:
        """Introspect a database and map its tables

        Args:
            connection_string: Database connection string
            database_type: Database type (postgresql, mysql, sqlite)
            schema: Database schema name (optional)
            include: Only map these tables (None = all tables)
            exclude: Tables to leave out
            junction_rules: Junction rule names, or False to disable detection

        Returns:
            JSON string of the schema map
        """
        try:
            schema_map = await map_database_schema_async(
                connection_string=connection_string,
                database_type=database_type,
                schema=schema,
                include=include,
                exclude=exclude,
                junction_rules=junction_rules,
            )
            return schema_map.model_dump_json(indent=2)
        except (SchemaMapperError, ValueError) as e:
            logger.warning(f"Mapping {sanitize_connection_string(connection_string)} failed: {e}")
            return json.dumps({"error": f"Failed to map database schema: {e!s}"}, indent=2)

    async def map_table_metadata(
        self,
        tables: dict[str, dict[str, Any]],
        junction_rules: bool | list[str] | None = None,
    ) -> str:
        """Map already collected table metadata

        Args:
            tables: TableMetadata documents keyed by table name
            junction_rules: Junction rule names, or False to disable detection

        Returns:
            JSON string of the schema map
        """
        try:
            source = StaticMetadataSource({name: TableMetadata.model_validate(data) for name, data in tables.items()})
            schema_map = await SchemaMapper(source, junction_rules=junction_rules).map_schema(source.list_tables())
            return schema_map.model_dump_json(indent=2)
        except ValidationError as e:
            return json.dumps({"error": f"Invalid table metadata: {e!s}"}, indent=2)
        except (SchemaMapperError, ValueError) as e:
            return json.dumps({"error": f"Failed to map table metadata: {e!s}"}, indent=2)

    async def decode_column_type(self, raw_type: str) -> str:
        """Decode a raw column type

        Args:
            raw_type: Column type as reported by the database

        Returns:
            JSON string of the type descriptor
        """
        return decode_type(raw_type).model_dump_json(indent=2)
