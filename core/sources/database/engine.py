"""Database connection and engine management."""

import logging
import re
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SUPPORTED_DATABASE_TYPES = ("postgresql", "mysql", "sqlite")


def validate_database_type(database_type: str) -> None:
    """Raise ValueError unless the database type is supported"""
    if database_type not in SUPPORTED_DATABASE_TYPES:
        raise ValueError(f"Unsupported database_type: {database_type}. Must be 'postgresql', 'mysql', or 'sqlite'")


def sanitize_connection_string(connection_string: str) -> str:
    """Replace the password of a connection string with *** for logging.

    Args:
        connection_string: The database connection string

    Returns:
        Connection string without its password
    """
    try:
        parsed = urlparse(connection_string)
        if parsed.password:
            return connection_string.replace(parsed.password, "***")
    except ValueError:
        # Malformed ports and the like; the regex below still applies
        pass

    return re.sub(r"://([^:/]+):([^@/]+)@", r"://\1:***@", connection_string)


def create_database_engine(connection_string: str, database_type: str) -> Engine:
    """Create a SQLAlchemy engine for schema introspection.

    Args:
        connection_string: The database connection string
        database_type: The database type (postgresql, mysql, sqlite)

    Returns:
        SQLAlchemy Engine instance
    """
    validate_database_type(database_type)

    connect_args: dict[str, Any] = {}
    if database_type == "sqlite":
        # Tables are inspected from worker threads
        connect_args = {"check_same_thread": False}

    logger.debug(f"Creating {database_type} engine for {sanitize_connection_string(connection_string)}")
    return create_engine(connection_string, connect_args=connect_args, echo=False)
