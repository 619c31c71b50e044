"""Association wiring across all mapped tables."""

import logging

from core.models import Association, AssociationType, ForeignKeyFact, TableDescriptor

logger = logging.getLogger(__name__)


def _other_foreign_key(fk: ForeignKeyFact, foreign_keys: list[ForeignKeyFact]) -> ForeignKeyFact | None:
    return next((other for other in foreign_keys if other.column_name != fk.column_name), None)


def build_associations(
    tables: dict[str, TableDescriptor],
    foreign_keys_by_table: dict[str, list[ForeignKeyFact]],
) -> dict[str, list[Association]]:
    """Derive the association edges of every table.

    Each foreign key from a source table S to a target table T yields a belongsTo edge
    on S and one opposite edge: belongsToMany on T if S is a junction table, otherwise
    hasOne or hasMany on T depending on whether the key column is unique. Keys pointing
    outside the mapped tables yield no edges.

    Args:
        tables: Table descriptors by name, with columns and junction flags already set
        foreign_keys_by_table: Foreign key facts by owning table name

    Returns:
        Edges by table name, with an entry (possibly empty) for every table
    """
    edges: dict[str, list[Association]] = {name: [] for name in tables}

    for source_name in sorted(tables):
        source = tables[source_name]
        foreign_keys = foreign_keys_by_table.get(source_name, [])

        for fk in foreign_keys:
            target = tables.get(fk.referenced_table_name)
            if target is None:
                logger.debug(
                    f"Skipping foreign key '{source_name}.{fk.column_name}': "
                    f"table '{fk.referenced_table_name}' is not mapped"
                )
                continue

            edges[source_name].append(
                Association(
                    association_type=AssociationType.BELONGS_TO,
                    source=source_name,
                    target=target.name,
                    foreign_key=fk.column_name,
                    target_key=fk.referenced_column_name,
                    on_delete=fk.on_delete,
                    on_update=fk.on_update,
                )
            )

            if source.is_junction_table:
                other_fk = _other_foreign_key(fk, foreign_keys)
                if other_fk is None:
                    logger.debug(f"Junction table '{source_name}' has no second foreign key, skipping belongsToMany")
                    continue
                if other_fk.referenced_table_name not in tables:
                    logger.debug(
                        f"Skipping belongsToMany through '{source_name}': "
                        f"table '{other_fk.referenced_table_name}' is not mapped"
                    )
                    continue
                edges[target.name].append(
                    Association(
                        association_type=AssociationType.BELONGS_TO_MANY,
                        source=target.name,
                        target=other_fk.referenced_table_name,
                        foreign_key=fk.column_name,
                        through=source_name,
                        other_key=other_fk.column_name,
                    )
                )
                continue

            column = source.columns.get(fk.column_name)
            unique = column is not None and column.unique is True
            edges[target.name].append(
                Association(
                    association_type=AssociationType.HAS_ONE if unique else AssociationType.HAS_MANY,
                    source=target.name,
                    target=source_name,
                    foreign_key=fk.column_name,
                    on_delete=fk.on_delete,
                    on_update=fk.on_update,
                )
            )

    return edges
