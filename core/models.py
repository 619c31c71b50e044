"""Pydantic models for schema mapping"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Introspection Input Models
# ============================================================================


class RawColumn(BaseModel):
    """Column metadata as reported by the database"""

    type: str = Field(description="Column type as reported by the database (e.g., 'decimal(10,2)')")
    nullable: bool = Field(default=True, description="Whether the column accepts NULL")
    primary_key: bool = Field(default=False, description="Whether the column is part of the primary key")
    default: Any = Field(default=None, description="Column default value, opaque to the mapper")
    auto_increment: bool | None = Field(default=None, description="Whether the column auto-increments")
    comment: str | None = Field(default=None, description="Column comment")


class IndexField(BaseModel):
    """A single field of an index"""

    attribute: str = Field(description="Column name")
    length: int | None = Field(default=None, description="Prefix length, if any")
    order: str | None = Field(default=None, description="Sort order (ASC/DESC)")


class IndexFact(BaseModel):
    """Index metadata for a table"""

    name: str = Field(description="Index name")
    unique: bool = Field(default=False, description="Whether the index is unique")
    primary: bool = Field(default=False, description="Whether the index backs the primary key")
    fields: list[IndexField] = Field(default_factory=list, description="Indexed fields in order")


class ForeignKeyFact(BaseModel):
    """A single-column foreign key"""

    column_name: str = Field(description="Constrained column on the owning table")
    referenced_table_name: str = Field(description="Table the key points to")
    referenced_column_name: str = Field(description="Column the key points to")
    constraint_name: str | None = Field(default=None, description="Constraint name")
    on_delete: str | None = Field(default=None, description="Referential action on delete")
    on_update: str | None = Field(default=None, description="Referential action on update")


class TableMetadata(BaseModel):
    """Everything the mapper needs to know about one table"""

    raw_columns: dict[str, RawColumn] = Field(description="Columns by name, in database order")
    indexes: list[IndexFact] = Field(default_factory=list, description="Indexes of the table")
    foreign_keys: list[ForeignKeyFact] = Field(default_factory=list, description="Single-column foreign keys")


# ============================================================================
# Column Models
# ============================================================================


class TypeDescriptor(BaseModel):
    """Normalized description of a raw column type"""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(description="Dialect-neutral kind (e.g., 'varchar', 'bigint')")
    length: int | float | str | None = Field(default=None, description="Length or textual size token")
    precision: int | float | str | None = Field(default=None, description="Numeric precision")
    scale: int | float | str | None = Field(default=None, description="Numeric scale")
    decimals: int | float | str | None = Field(default=None, description="Number of decimals")
    unsigned: bool | None = Field(default=None, description="True when declared unsigned, never False")
    enum_entries: list[str] | None = Field(default=None, description="Literal values of enum/set kinds")
    language_type: str | None = Field(default=None, description="Language type hint (e.g., 'number')")
    orm_type: str | None = Field(default=None, description="ORM type hint (e.g., 'BIGINT')")


class ColumnReference(BaseModel):
    """Target of a single-column foreign key"""

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(description="Referenced table")
    key: str = Field(description="Referenced column")


class ColumnDescriptor(BaseModel):
    """Normalized column, ready for code generation"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Column name")
    raw_type: str = Field(description="Type string as reported by the database")
    normalized_kind: str = Field(description="Dialect-neutral kind")
    language_type: str | None = Field(default=None, description="Language type hint")
    orm_type: str | None = Field(default=None, description="ORM type hint")
    length: int | float | str | None = Field(default=None, description="Length or textual size token")
    precision: int | float | str | None = Field(default=None, description="Numeric precision")
    scale: int | float | str | None = Field(default=None, description="Numeric scale")
    decimals: int | float | str | None = Field(default=None, description="Number of decimals")
    enum_entries: list[str] | None = Field(default=None, description="Literal values of enum/set kinds")
    unsigned: bool | None = Field(default=None, description="True when declared unsigned")
    nullable: bool = Field(default=True, description="Whether the column accepts NULL")
    primary_key: bool = Field(default=False, description="Whether the column is part of the primary key")
    default: Any = Field(default=None, description="Column default value")
    auto_increment: bool | None = Field(default=None, description="Whether the column auto-increments")
    comment: str | None = Field(default=None, description="Column comment")
    unique: bool | str | None = Field(
        default=None,
        description="True if solely unique, the index name if part of a composite unique index, else None",
    )
    reference: ColumnReference | None = Field(default=None, description="Foreign key target, if any")


# ============================================================================
# Table and Association Models
# ============================================================================


class AssociationType(str, Enum):
    """Cardinality and ownership direction of an association"""

    BELONGS_TO = "belongsTo"
    BELONGS_TO_MANY = "belongsToMany"
    HAS_ONE = "hasOne"
    HAS_MANY = "hasMany"


class Association(BaseModel):
    """Directed relationship between two tables"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    association_type: AssociationType = Field(description="Kind of association")
    source: str = Field(description="Table owning the association")
    target: str = Field(description="Related table")
    foreign_key: str = Field(description="Column driving the relation")
    target_key: str | None = Field(default=None, description="Referenced column (belongsTo only)")
    through: str | None = Field(default=None, description="Junction table (belongsToMany only)")
    other_key: str | None = Field(default=None, description="Junction table's other key (belongsToMany only)")
    on_delete: str | None = Field(default=None, description="Referential action on delete")
    on_update: str | None = Field(default=None, description="Referential action on update")


class TableDescriptor(BaseModel):
    """Normalized table with its columns and associations"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Table name")
    columns: dict[str, ColumnDescriptor] = Field(default_factory=dict, description="Columns in database order")
    is_junction_table: bool = Field(default=False, description="Whether the table joins two others (many-to-many)")
    associations: tuple[Association, ...] = Field(default=(), description="Associations in discovery order")


class SchemaMap(BaseModel):
    """Complete mapping result handed to code generation"""

    model_config = ConfigDict(frozen=True)

    tables: dict[str, TableDescriptor] = Field(default_factory=dict, description="Tables by name, sorted")
    junction_rules: list[str] = Field(default_factory=list, description="Junction rules applied")
