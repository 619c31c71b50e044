"""Junction (many-to-many join) table classification.

A table is a junction table if any configured rule holds for it. Rules are evaluated
in configuration order and evaluation stops at the first rule that holds.
"""

import importlib
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any

from core.models import ColumnDescriptor, ForeignKeyFact
from core.schema.type_mapping import DATE_TIME_LANGUAGE_TYPES

logger = logging.getLogger(__name__)

JunctionCallback = Callable[[dict[str, ColumnDescriptor], list[ForeignKeyFact]], bool | Awaitable[bool]]
JunctionPredicate = Callable[[dict[str, ColumnDescriptor], list[ForeignKeyFact]], bool]


class JunctionRule(str, Enum):
    """Heuristics for detecting junction tables"""

    OFF = "off"
    COMPOSITE_PRIMARY = "composite-primary"
    COMPOSITE_PRIMARY_ONLY = "composite-primary-only"
    PRIMARY_AND_TIMESTAMP_ONLY = "primary-and-timestamp-only"
    CALLBACK = "callback"


DEFAULT_JUNCTION_RULES = [JunctionRule.COMPOSITE_PRIMARY_ONLY]

_RULE_ALIASES = {
    "compositePrimary": JunctionRule.COMPOSITE_PRIMARY,
    "compositePrimaryOnly": JunctionRule.COMPOSITE_PRIMARY_ONLY,
    "primaryAndTimestampOnly": JunctionRule.PRIMARY_AND_TIMESTAMP_ONLY,
}


def _primary_key_names(columns: dict[str, ColumnDescriptor]) -> list[str]:
    return [name for name, column in columns.items() if column.primary_key]


def is_composite_primary(columns: dict[str, ColumnDescriptor], foreign_keys: list[ForeignKeyFact]) -> bool:
    """Two primary key columns, and exactly two foreign keys on primary key columns"""
    primary_keys = _primary_key_names(columns)
    if len(primary_keys) != 2:
        return False
    return sum(1 for fk in foreign_keys if fk.column_name in primary_keys) == 2


def is_composite_primary_only(columns: dict[str, ColumnDescriptor], foreign_keys: list[ForeignKeyFact]) -> bool:
    """Composite primary with no payload columns"""
    return len(columns) == 2 and is_composite_primary(columns, foreign_keys)


def is_primary_and_timestamp_only(columns: dict[str, ColumnDescriptor], foreign_keys: list[ForeignKeyFact]) -> bool:
    """A surrogate key, two foreign key columns and nothing but date/time columns besides"""
    primary_keys = _primary_key_names(columns)
    if len(primary_keys) != 1:
        return False

    fk_columns = [fk.column_name for fk in foreign_keys if fk.column_name not in primary_keys]
    if len(fk_columns) != 2:
        return False

    for name, column in columns.items():
        if column.primary_key or name in fk_columns:
            continue
        if column.language_type not in DATE_TIME_LANGUAGE_TYPES:
            return False
    return True


RULE_PREDICATES: dict[JunctionRule, JunctionPredicate] = {
    JunctionRule.COMPOSITE_PRIMARY: is_composite_primary,
    JunctionRule.COMPOSITE_PRIMARY_ONLY: is_composite_primary_only,
    JunctionRule.PRIMARY_AND_TIMESTAMP_ONLY: is_primary_and_timestamp_only,
}


def load_callback(reference: str) -> JunctionCallback:
    """Import a callback given as 'package.module:function'"""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Invalid junction callback '{reference}'. Expected 'package.module:function'")

    module = importlib.import_module(module_name)
    callback = getattr(module, attribute, None)
    if not callable(callback):
        raise ValueError(f"Junction callback '{reference}' is not callable")
    return callback  # type: ignore[no-any-return]


def _parse_rule(value: str) -> JunctionRule:
    if value in _RULE_ALIASES:
        return _RULE_ALIASES[value]
    try:
        return JunctionRule(value)
    except ValueError as e:
        valid = ", ".join(rule.value for rule in JunctionRule if rule is not JunctionRule.CALLBACK)
        raise ValueError(f"Unknown junction rule '{value}'. Must be one of: {valid}") from e


def resolve_junction_rules(raw: Any = None) -> tuple[list[JunctionRule], JunctionCallback | None]:
    """Resolve a junction rule configuration.

    Args:
        raw: None or True for the default rule, False to disable classification, or a
            list of rule names, callables and ``{"callback": "module:function"}`` entries

    Returns:
        Tuple of (ordered rules, callback or None)

    Raises:
        ValueError: If a rule is unknown or the list is empty
    """
    if raw is None or raw is True:
        return list(DEFAULT_JUNCTION_RULES), None
    if raw is False:
        return [JunctionRule.OFF], None
    if isinstance(raw, str):
        raw = [raw]

    rules: list[JunctionRule] = []
    callback: JunctionCallback | None = None

    for entry in raw:
        if isinstance(entry, JunctionRule):
            rule = entry
        elif isinstance(entry, str):
            rule = _parse_rule(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("callback"), str):
            callback = load_callback(entry["callback"])
            rule = JunctionRule.CALLBACK
        elif callable(entry):
            callback = entry
            rule = JunctionRule.CALLBACK
        else:
            raise ValueError(f"Invalid junction rule entry: {entry!r}")
        if rule not in rules:
            rules.append(rule)

    if not rules:
        raise ValueError("At least one junction rule is required")
    if JunctionRule.OFF in rules:
        return [JunctionRule.OFF], None
    return rules, callback


class JunctionClassifier:
    """Evaluates the configured junction rules as a logical OR"""

    def __init__(
        self,
        rules: Iterable[JunctionRule] | None = None,
        callback: JunctionCallback | None = None,
    ) -> None:
        resolved = list(DEFAULT_JUNCTION_RULES if rules is None else rules)
        if JunctionRule.OFF in resolved:
            resolved = [JunctionRule.OFF]
        if JunctionRule.CALLBACK in resolved and callback is None:
            raise ValueError("The callback junction rule requires a callback")

        self.rules = resolved
        self.callback = callback

    @property
    def enabled(self) -> bool:
        return JunctionRule.OFF not in self.rules

    async def classify(self, columns: dict[str, ColumnDescriptor], foreign_keys: list[ForeignKeyFact]) -> bool:
        """Return whether the table described by these columns and keys is a junction table"""
        if not self.enabled:
            return False

        for rule in self.rules:
            if rule is JunctionRule.CALLBACK:
                result = self.callback(columns, foreign_keys)  # type: ignore[misc]
                if inspect.isawaitable(result):
                    result = await result
                matched = bool(result)
            else:
                matched = RULE_PREDICATES[rule](columns, foreign_keys)

            if matched:
                logger.debug(f"Junction rule '{rule.value}' matched")
                return True

        return False
