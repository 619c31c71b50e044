"""Exceptions raised by the schema mapper"""


class SchemaMapperError(Exception):
    """Base class for schema mapper errors"""


class MetadataFetchError(SchemaMapperError):
    """Raised when metadata for a table could not be fetched"""

    def __init__(self, table_name: str, reason: str) -> None:
        super().__init__(f"Failed to fetch metadata for table '{table_name}': {reason}")
        self.table_name = table_name
        self.reason = reason


class TypeRuleError(SchemaMapperError, ValueError):
    """Raised when a type rule uses an unsupported capture role"""
