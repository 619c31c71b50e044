"""Column normalization: merges raw column metadata with decoded type, uniqueness and reference facts."""

from core.models import (
    ColumnDescriptor,
    ColumnReference,
    ForeignKeyFact,
    IndexFact,
    RawColumn,
    TableMetadata,
    TypeDescriptor,
)
from core.schema.type_mapping import TypeDecoder, default_decoder


def find_uniqueness(column_name: str, indexes: list[IndexFact]) -> bool | str | None:
    """Classify how a column takes part in the table's unique indexes.

    The primary key index is ignored.

    Args:
        column_name: Column to look up
        indexes: Index facts of the table

    Returns:
        True if some unique index covers only this column, the name of the first
        composite unique index containing it otherwise, None if it is in no unique index
    """
    composite_name: str | None = None

    for index in indexes:
        if not index.unique or index.primary:
            continue
        attributes = [index_field.attribute for index_field in index.fields]
        if column_name not in attributes:
            continue
        if len(attributes) == 1:
            return True
        if composite_name is None:
            composite_name = index.name

    return composite_name


def resolve_reference(column_name: str, foreign_keys: list[ForeignKeyFact]) -> ColumnReference | None:
    """Return the target of the first foreign key on this column, if any"""
    for fk in foreign_keys:
        if fk.column_name == column_name:
            return ColumnReference(table_name=fk.referenced_table_name, key=fk.referenced_column_name)
    return None


def normalize_column(
    name: str,
    raw_column: RawColumn,
    type_descriptor: TypeDescriptor,
    unique: bool | str | None = None,
    reference: ColumnReference | None = None,
) -> ColumnDescriptor:
    """Combine raw column metadata and the facts computed about it into one descriptor"""
    return ColumnDescriptor(
        name=name,
        raw_type=raw_column.type,
        normalized_kind=type_descriptor.kind,
        language_type=type_descriptor.language_type,
        orm_type=type_descriptor.orm_type,
        length=type_descriptor.length,
        precision=type_descriptor.precision,
        scale=type_descriptor.scale,
        decimals=type_descriptor.decimals,
        enum_entries=type_descriptor.enum_entries,
        unsigned=type_descriptor.unsigned,
        nullable=raw_column.nullable,
        primary_key=raw_column.primary_key,
        default=raw_column.default,
        auto_increment=raw_column.auto_increment,
        comment=raw_column.comment,
        unique=unique,
        reference=reference,
    )


def normalize_columns(metadata: TableMetadata, decoder: TypeDecoder = default_decoder) -> dict[str, ColumnDescriptor]:
    """Normalize every column of a table, keeping database column order"""
    return {
        name: normalize_column(
            name,
            raw_column,
            decoder.decode(raw_column.type),
            unique=find_uniqueness(name, metadata.indexes),
            reference=resolve_reference(name, metadata.foreign_keys),
        )
        for name, raw_column in metadata.raw_columns.items()
    }
