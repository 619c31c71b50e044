"""Schema mapping orchestration.

Mapping runs in two stages. Every table is fetched, normalized and classified
concurrently; each task returns its own descriptor. Once all tasks have completed,
the descriptors are assembled in table name order and associations are wired across
the complete set.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, Protocol

from core.exceptions import MetadataFetchError
from core.models import ForeignKeyFact, SchemaMap, TableDescriptor, TableMetadata
from core.schema.associations import build_associations
from core.schema.columns import normalize_columns
from core.schema.junction import JunctionCallback, JunctionClassifier, resolve_junction_rules
from core.schema.type_mapping import TypeDecoder, default_decoder

logger = logging.getLogger(__name__)


class MetadataSource(Protocol):
    """Supplies raw metadata for one table at a time"""

    async def fetch_table_metadata(self, table_name: str) -> TableMetadata: ...


class StaticMetadataSource:
    """Serves metadata that has already been collected"""

    def __init__(self, tables: dict[str, TableMetadata | dict[str, Any]]) -> None:
        self.tables = {
            name: metadata if isinstance(metadata, TableMetadata) else TableMetadata.model_validate(metadata)
            for name, metadata in tables.items()
        }

    def list_tables(self) -> list[str]:
        return sorted(self.tables)

    async def fetch_table_metadata(self, table_name: str) -> TableMetadata:
        if table_name not in self.tables:
            raise MetadataFetchError(table_name, "table not found")
        return self.tables[table_name]


class SchemaMapper:
    """Maps raw table metadata to table descriptors with associations"""

    def __init__(
        self,
        source: MetadataSource,
        junction_rules: Any = None,
        junction_callback: JunctionCallback | None = None,
        decoder: TypeDecoder = default_decoder,
    ) -> None:
        """Create a mapper.

        Args:
            source: Introspection collaborator
            junction_rules: Junction rule configuration (see resolve_junction_rules)
            junction_callback: Predicate used by the callback rule
            decoder: Type decoder for column types
        """
        rules, callback = resolve_junction_rules(junction_rules)
        self.source = source
        self.classifier = JunctionClassifier(rules, junction_callback or callback)
        self.decoder = decoder

    async def map_schema(self, table_names: Iterable[str]) -> SchemaMap:
        """Map the given tables.

        Raises:
            MetadataFetchError: If metadata for any table cannot be fetched
        """
        names = list(dict.fromkeys(table_names))
        logger.debug(f"Mapping {len(names)} tables")

        # All tasks settle before the first failure is raised
        outcomes = await asyncio.gather(*(self._map_table(name) for name in names), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        results = [outcome for outcome in outcomes if not isinstance(outcome, BaseException)]

        tables: dict[str, TableDescriptor] = {}
        foreign_keys_by_table: dict[str, list[ForeignKeyFact]] = {}
        for table, foreign_keys in sorted(results, key=lambda result: result[0].name):
            tables[table.name] = table
            foreign_keys_by_table[table.name] = foreign_keys

        edges = build_associations(tables, foreign_keys_by_table)
        tables = {
            name: table.model_copy(update={"associations": tuple(edges[name])}) for name, table in tables.items()
        }

        junction_count = sum(1 for table in tables.values() if table.is_junction_table)
        logger.info(f"Mapped {len(tables)} tables ({junction_count} junction tables)")

        return SchemaMap(tables=tables, junction_rules=[rule.value for rule in self.classifier.rules])

    async def _map_table(self, table_name: str) -> tuple[TableDescriptor, list[ForeignKeyFact]]:
        try:
            metadata = await self.source.fetch_table_metadata(table_name)
        except MetadataFetchError as e:
            logger.error(str(e))
            raise
        except Exception as e:
            logger.error(f"Unexpected error fetching metadata for '{table_name}': {e}", exc_info=True)
            raise MetadataFetchError(table_name, str(e)) from e

        columns = normalize_columns(metadata, self.decoder)
        is_junction_table = await self.classifier.classify(columns, metadata.foreign_keys)
        logger.debug(f"Normalized '{table_name}': {len(columns)} columns, junction={is_junction_table}")

        table = TableDescriptor(name=table_name, columns=columns, is_junction_table=is_junction_table)
        return table, list(metadata.foreign_keys)
