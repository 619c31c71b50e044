"""Database schema introspection with the SQLAlchemy inspector."""

import asyncio
import logging
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import CompileError, SQLAlchemyError
from sqlalchemy.types import TypeEngine

from core.exceptions import MetadataFetchError
from core.models import ForeignKeyFact, IndexFact, IndexField, RawColumn, TableMetadata
from core.sources.database.engine import create_database_engine

logger = logging.getLogger(__name__)


def filter_tables(
    all_tables: list[str],
    include: list[str] | None = None,
    exclude: list[str] | None = None,
) -> list[str]:
    """Select the tables to map.

    Args:
        all_tables: Every table in the database
        include: Only keep these tables (None = keep all)
        exclude: Drop these tables

    Returns:
        Selected table names, in the order of all_tables
    """
    selected = [name for name in all_tables if include is None or name in include]
    if exclude:
        selected = [name for name in selected if name not in exclude]
    return selected


def _index_fields(column_names: list[str | None]) -> list[IndexField]:
    # Expression indexes report None for their computed columns
    return [IndexField(attribute=name) for name in column_names if name is not None]


class SqlAlchemyMetadataSource:
    """Fetches table metadata through a SQLAlchemy engine"""

    def __init__(self, connection_string: str, database_type: str, schema: str | None = None) -> None:
        """Create a metadata source.

        Args:
            connection_string: Database connection string
            database_type: Database type (postgresql, mysql, sqlite)
            schema: Database schema name (optional, defaults to 'public' for PostgreSQL)

        Raises:
            ValueError: If database_type is not supported
        """
        self.engine = create_database_engine(connection_string, database_type)
        self.database_type = database_type

        # For PostgreSQL, default to 'public' schema if not specified
        if database_type == "postgresql" and schema is None:
            schema = "public"
        self.schema = schema

    def list_tables(self) -> list[str]:
        """List table names in the schema, sorted"""
        return sorted(inspect(self.engine).get_table_names(schema=self.schema))

    async def fetch_table_metadata(self, table_name: str) -> TableMetadata:
        """Fetch metadata for one table without blocking the event loop"""
        return await asyncio.to_thread(self.inspect_table, table_name)

    def inspect_table(self, table_name: str) -> TableMetadata:
        """Fetch columns, indexes and foreign keys for one table.

        Raises:
            MetadataFetchError: If the table does not exist or cannot be inspected
        """
        inspector = inspect(self.engine)

        try:
            if not inspector.has_table(table_name, schema=self.schema):
                raise MetadataFetchError(table_name, f"table not found in schema '{self.schema}' or database")

            columns = inspector.get_columns(table_name, schema=self.schema)
            pk_constraint = inspector.get_pk_constraint(table_name, schema=self.schema)
            indexes = inspector.get_indexes(table_name, schema=self.schema)
            try:
                unique_constraints = inspector.get_unique_constraints(table_name, schema=self.schema)
            except NotImplementedError:
                logger.debug(f"Unique constraint inspection not supported for {self.database_type}")
                unique_constraints = []
            foreign_keys = inspector.get_foreign_keys(table_name, schema=self.schema)
        except SQLAlchemyError as e:
            raise MetadataFetchError(table_name, str(e)) from e

        primary_keys = pk_constraint.get("constrained_columns") or []

        return TableMetadata(
            raw_columns={col["name"]: self._raw_column(col, primary_keys) for col in columns},
            indexes=self._index_facts(table_name, primary_keys, pk_constraint, indexes, unique_constraints),
            foreign_keys=self._foreign_key_facts(table_name, foreign_keys),
        )

    def dispose(self) -> None:
        self.engine.dispose()

    def _type_string(self, column_type: Any) -> str:
        """Render a reflected type the way the database spells it, e.g. ENUM('a','b') or INTEGER(10) UNSIGNED"""
        if not isinstance(column_type, TypeEngine):
            return str(column_type)
        try:
            return str(column_type.compile(dialect=self.engine.dialect))
        except CompileError:
            logger.debug(f"{self.database_type} cannot render {column_type!r}, using the generic type name")
        try:
            return str(column_type)
        except CompileError:
            return type(column_type).__name__.upper()

    def _raw_column(self, col: dict[str, Any], primary_keys: list[str]) -> RawColumn:
        autoincrement = col.get("autoincrement")
        return RawColumn(
            type=self._type_string(col["type"]),
            nullable=col.get("nullable", True),
            primary_key=col["name"] in primary_keys,
            default=col.get("default"),
            auto_increment=autoincrement if isinstance(autoincrement, bool) else None,
            comment=col.get("comment"),
        )

    @staticmethod
    def _index_facts(
        table_name: str,
        primary_keys: list[str],
        pk_constraint: dict[str, Any],
        indexes: list[dict[str, Any]],
        unique_constraints: list[dict[str, Any]],
    ) -> list[IndexFact]:
        facts: list[IndexFact] = []

        if primary_keys:
            facts.append(
                IndexFact(
                    name=pk_constraint.get("name") or "PRIMARY",
                    unique=True,
                    primary=True,
                    fields=_index_fields(primary_keys),
                )
            )

        unique_column_sets: set[tuple[str, ...]] = set()
        for index in indexes:
            fields = _index_fields(index.get("column_names", []))
            unique = bool(index.get("unique"))
            facts.append(
                IndexFact(
                    name=index.get("name") or f"{table_name}_{'_'.join(f.attribute for f in fields)}_idx",
                    unique=unique,
                    fields=fields,
                )
            )
            if unique:
                unique_column_sets.add(tuple(f.attribute for f in fields))

        # Unique constraints are usually backed by an index already reported above
        for constraint in unique_constraints:
            column_names = [name for name in constraint.get("column_names", []) if name is not None]
            if tuple(column_names) in unique_column_sets:
                continue
            facts.append(
                IndexFact(
                    name=constraint.get("name") or f"{table_name}_{'_'.join(column_names)}_unique",
                    unique=True,
                    fields=_index_fields(column_names),
                )
            )
            unique_column_sets.add(tuple(column_names))

        return facts

    @staticmethod
    def _foreign_key_facts(table_name: str, foreign_keys: list[dict[str, Any]]) -> list[ForeignKeyFact]:
        facts = []
        for fk in foreign_keys:
            constrained = fk.get("constrained_columns") or []
            referred = fk.get("referred_columns") or []
            if len(constrained) != 1 or len(referred) != 1:
                logger.debug(f"Skipping multi-column foreign key {fk.get('name')!r} on '{table_name}'")
                continue

            options = fk.get("options") or {}
            facts.append(
                ForeignKeyFact(
                    column_name=constrained[0],
                    referenced_table_name=fk["referred_table"],
                    referenced_column_name=referred[0],
                    constraint_name=fk.get("name"),
                    on_delete=options.get("ondelete"),
                    on_update=options.get("onupdate"),
                )
            )
        return facts
