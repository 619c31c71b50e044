"""Configuration file handling for the CLI.

The config file is YAML and lives at ~/.schema-mapper.yaml unless the
SCHEMA_MAPPER_CONFIG environment variable points elsewhere.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from core.schema.junction import resolve_junction_rules
from core.sources.database.engine import SUPPORTED_DATABASE_TYPES

CONFIG_ENV_VAR = "SCHEMA_MAPPER_CONFIG"


class OutputDefaults(BaseModel):
    """Defaults for writing schema maps"""

    format: str = Field(default="json", description="Output format: json or yaml")
    pretty: bool = Field(default=False, description="Pretty-print JSON output")


class MappingDefaults(BaseModel):
    """Defaults for schema mapping runs"""

    database_type: str | None = Field(default=None, description="Database type (postgresql, mysql, sqlite)")
    db_schema: str | None = Field(default=None, description="Database schema name", alias="schema")
    include: list[str] | None = Field(default=None, description="Only map these tables")
    exclude: list[str] = Field(default_factory=list, description="Tables to leave out")
    junction_rules: bool | list[str | dict[str, str]] | None = Field(
        default=None, description="Junction rule configuration"
    )

    model_config = {"populate_by_name": True}


class Defaults(BaseModel):
    """Default values for CLI commands"""

    output: OutputDefaults = Field(default_factory=OutputDefaults)
    mapping: MappingDefaults = Field(default_factory=MappingDefaults)


class Config(BaseModel):
    """Schema mapper configuration file"""

    version: str = Field(default="1.0", description="Config file version")
    connections: dict[str, str] = Field(default_factory=dict, description="Named connection strings")
    defaults: Defaults = Field(default_factory=Defaults)


def get_config_path() -> Path:
    """Return the config file path"""
    custom_path = os.environ.get(CONFIG_ENV_VAR)
    if custom_path:
        return Path(custom_path)
    return Path.home() / ".schema-mapper.yaml"


def load_config() -> Config:
    """Load the config file, or defaults if it does not exist.

    Raises:
        ValueError: If the file is not valid YAML or does not match the config model
    """
    config_path = get_config_path()
    if not config_path.exists():
        return Config()

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e


def save_config(config: Config) -> Path:
    """Write the config file and return its path"""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, Any] = config.model_dump(by_alias=True)
    with config_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return config_path


def init_config(force: bool = False) -> Path:
    """Create a config file with default values.

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = get_config_path()
    if config_path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {config_path}")
    return save_config(Config())


def get_connection(name: str, config: Config | None = None) -> str:
    """Return a named connection string.

    Raises:
        KeyError: If the connection is not configured
    """
    config = config or load_config()
    if name not in config.connections:
        raise KeyError(f"Connection '{name}' not found in config")
    return config.connections[name]


def resolve_connection(connection: str, config: Config | None = None) -> str:
    """Resolve '@name' references to configured connection strings"""
    if connection.startswith("@"):
        return get_connection(connection[1:], config)
    return connection


def get_output_defaults(config: Config | None = None) -> OutputDefaults:
    config = config or load_config()
    return config.defaults.output


def get_mapping_defaults(config: Config | None = None) -> MappingDefaults:
    config = config or load_config()
    return config.defaults.mapping


def validate_config(config: Config) -> list[str]:
    """Check config values that the model cannot express.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if config.defaults.output.format not in ("json", "yaml"):
        errors.append("'defaults.output.format' must be 'json' or 'yaml'")

    database_type = config.defaults.mapping.database_type
    if database_type is not None and database_type not in SUPPORTED_DATABASE_TYPES:
        errors.append(f"'defaults.mapping.database_type' must be one of: {', '.join(SUPPORTED_DATABASE_TYPES)}")

    try:
        resolve_junction_rules(config.defaults.mapping.junction_rules)
    except (ValueError, ImportError) as e:
        errors.append(f"'defaults.mapping.junction_rules' is invalid: {e}")

    for name, connection_string in config.connections.items():
        if "://" not in connection_string:
            errors.append(f"Connection '{name}' is not a valid connection URL")

    return errors
