"""Database type decoding.

Raw column type strings (e.g. ``decimal(10,2)``, ``enum('a','b')``) are decoded by an
ordered table of rules. The first rule whose pattern matches wins; later rules are never
consulted. Each rule names its capture groups after the role the captured text plays
in the resulting TypeDescriptor.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from core.exceptions import TypeRuleError
from core.models import TypeDescriptor

logger = logging.getLogger(__name__)

FALLBACK_KIND = "int"


class CaptureRole(str, Enum):
    """Semantic role of a named capture group"""

    KIND = "kind"
    LENGTH = "length"
    PRECISION = "precision"
    SCALE = "scale"
    DECIMALS = "decimals"
    UNSIGNED = "unsigned"
    ENUM_ENTRIES = "enum_entries"


class TypeHint(NamedTuple):
    language_type: str
    orm_type: str


@dataclass(frozen=True)
class TypeRule:
    """A pattern matched against the start of a lower-cased type string.

    Args:
        pattern: Regular expression whose named groups are capture roles
        kind: Fixed kind for alias rules (e.g. 'character varying' -> 'varchar');
            when unset the ``kind`` group supplies it
    """

    pattern: str
    kind: str | None = None
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        regex = re.compile(self.pattern)
        supported = {role.value for role in CaptureRole}
        for group_name in regex.groupindex:
            if group_name not in supported:
                raise TypeRuleError(f"Unsupported capture role '{group_name}' in type rule {self.pattern!r}")
        if self.kind is None and CaptureRole.KIND.value not in regex.groupindex:
            raise TypeRuleError(f"Type rule {self.pattern!r} neither captures nor fixes a kind")
        object.__setattr__(self, "regex", regex)

    def match(self, raw_type: str) -> dict[str, str] | None:
        """Return the non-empty captures by role, or None if the rule does not apply"""
        found = self.regex.match(raw_type)
        if not found:
            return None
        return {role: value for role, value in found.groupdict().items() if value is not None}


_SIZE = r"(?:\s*\(\s*(?P<length>\d+)\s*\))?"
_UNSIGNED = r"(?:\s+(?P<unsigned>unsigned))?"
_PRECISION_SCALE = r"(?:\s*\(\s*(?P<precision>\d+)\s*(?:,\s*(?P<scale>\d+)\s*)?\))?"
_LENGTH_DECIMALS = r"(?:\s*\(\s*(?P<length>\d+)\s*(?:,\s*(?P<decimals>\d+)\s*)?\))?"
_LENGTH_PRECISION = r"(?:\s*\(\s*(?P<length>\d+)\s*(?:,\s*(?P<precision>\d+)\s*)?\))?"
_ENTRIES = r"\s*\(\s*(?P<enum_entries>.*)\)"

# Longer tokens precede their prefixes: timestamp/time, datetime/date, jsonb/json, ...
DEFAULT_TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(r"(?P<kind>bigint)" + _SIZE + _UNSIGNED),
    TypeRule(r"bigserial", kind="bigint"),
    TypeRule(r"(?P<kind>tinyint)" + _SIZE + _UNSIGNED),
    TypeRule(r"(?P<kind>smallint)" + _SIZE + _UNSIGNED),
    TypeRule(r"smallserial", kind="smallint"),
    TypeRule(r"(?P<kind>mediumint)" + _SIZE + _UNSIGNED),
    TypeRule(r"(?P<kind>int)(?:eger)?" + _SIZE + _UNSIGNED),
    TypeRule(r"serial", kind="int"),
    # size prefix first, base kind second: 'long' + 'text' -> longtext
    TypeRule(r"(?P<kind>(?P<length>tiny|medium|long)(?:text|blob))"),
    TypeRule(r"(?P<kind>bool)(?:ean)?"),
    TypeRule(r"(?P<kind>bit)" + _SIZE),
    TypeRule(r"character varying" + _SIZE, kind="varchar"),
    TypeRule(r"nvarchar" + _SIZE, kind="varchar"),
    TypeRule(r"(?P<kind>varchar)" + _SIZE),
    TypeRule(r"(?P<kind>varbinary)" + _SIZE),
    TypeRule(r"character" + _SIZE, kind="char"),
    TypeRule(r"nchar" + _SIZE, kind="char"),
    TypeRule(r"(?P<kind>char)" + _SIZE),
    TypeRule(r"(?P<kind>binary)" + _SIZE),
    TypeRule(r"(?P<kind>blob)"),
    TypeRule(r"bytea", kind="blob"),
    TypeRule(r"(?P<kind>datetime)"),
    TypeRule(r"(?P<kind>date)"),
    TypeRule(r"(?P<kind>timestamp)"),
    TypeRule(r"(?P<kind>time)"),
    TypeRule(r"(?P<kind>decimal)" + _PRECISION_SCALE + _UNSIGNED),
    TypeRule(r"(?P<kind>numeric)" + _PRECISION_SCALE),
    TypeRule(r"(?P<kind>double)(?:\s+precision)?" + _LENGTH_DECIMALS + _UNSIGNED),
    TypeRule(r"(?P<kind>float)" + _LENGTH_DECIMALS + _UNSIGNED),
    TypeRule(r"(?P<kind>real)" + _LENGTH_PRECISION),
    TypeRule(r"(?P<kind>enum)" + _ENTRIES),
    TypeRule(r"(?P<kind>set)" + _ENTRIES),
    TypeRule(r"(?P<kind>geometry)"),
    TypeRule(r"(?P<kind>jsonb)"),
    TypeRule(r"(?P<kind>json)"),
    TypeRule(r"(?P<kind>ntext)"),
    TypeRule(r"(?P<kind>text)"),
    TypeRule(r"clob", kind="text"),
    TypeRule(r"(?P<kind>uniqueidentifier)"),
    TypeRule(r"(?P<kind>uuid)"),
    TypeRule(r"(?P<kind>year)"),
)

# Every kind a rule can produce must be listed here
TYPE_HINTS: dict[str, TypeHint] = {
    "bigint": TypeHint("number", "BIGINT"),
    "binary": TypeHint("json", "BLOB"),
    "bit": TypeHint("boolean", "BOOLEAN"),
    "blob": TypeHint("json", "BLOB"),
    "bool": TypeHint("boolean", "BOOLEAN"),
    "char": TypeHint("string", "CHAR"),
    "date": TypeHint("date", "DATEONLY"),
    "datetime": TypeHint("date", "DATE"),
    "decimal": TypeHint("number", "DECIMAL"),
    "double": TypeHint("number", "DOUBLE"),
    "enum": TypeHint("string-list", "ENUM"),
    "float": TypeHint("number", "FLOAT"),
    "geometry": TypeHint("string", "GEOMETRY"),
    "int": TypeHint("number", "INTEGER"),
    "json": TypeHint("json", "JSON"),
    "jsonb": TypeHint("json", "JSONB"),
    "longblob": TypeHint("json", "BLOB"),
    "longtext": TypeHint("string", "TEXT"),
    "mediumblob": TypeHint("json", "BLOB"),
    "mediumint": TypeHint("number", "MEDIUMINT"),
    "mediumtext": TypeHint("string", "TEXT"),
    "ntext": TypeHint("string", "TEXT"),
    "numeric": TypeHint("number", "NUMBER"),
    "real": TypeHint("number", "REAL"),
    "set": TypeHint("string-list", "ENUM"),
    "smallint": TypeHint("number", "SMALLINT"),
    "text": TypeHint("string", "TEXT"),
    "time": TypeHint("time", "TIME"),
    "timestamp": TypeHint("date", "DATE"),
    "tinyblob": TypeHint("json", "BLOB"),
    "tinyint": TypeHint("number", "TINYINT"),
    "tinytext": TypeHint("string", "TEXT"),
    "uniqueidentifier": TypeHint("string", "UUID"),
    "uuid": TypeHint("string", "UUID"),
    "varbinary": TypeHint("string", "BLOB"),
    "varchar": TypeHint("string", "STRING"),
    "year": TypeHint("number", "INTEGER"),
}

DATE_TIME_LANGUAGE_TYPES = frozenset({"date", "time"})

_ENUM_TOKEN = re.compile(r"""'((?:[^']|'')*)'|"((?:[^"]|"")*)"|([^,\s][^,]*)""")


def split_enum_entries(raw_entries: str) -> list[str]:
    """Split a literal list such as ``'a','b,c'`` into its unquoted values.

    Quoted values may contain commas and doubled quotes (``'it''s'``).
    Unquoted tokens are split on commas and stripped.
    """
    entries = []
    for match in _ENUM_TOKEN.finditer(raw_entries):
        single, double, bare = match.groups()
        if single is not None:
            entries.append(single.replace("''", "'"))
        elif double is not None:
            entries.append(double.replace('""', '"'))
        else:
            entries.append(bare.strip())
    return entries


def _to_number(value: str) -> int | float | str:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


class TypeDecoder:
    """Decodes raw type strings with an ordered, first-match-wins rule table"""

    def __init__(
        self,
        rules: tuple[TypeRule, ...] = DEFAULT_TYPE_RULES,
        hints: dict[str, TypeHint] | None = None,
        fallback_kind: str = FALLBACK_KIND,
    ) -> None:
        self.rules = rules
        self.hints = TYPE_HINTS if hints is None else hints
        self.fallback_kind = fallback_kind

    def decode(self, raw_type: str) -> TypeDescriptor:
        """Decode a raw column type.

        Args:
            raw_type: Type string as reported by the database (e.g., 'INT(11) UNSIGNED')

        Returns:
            TypeDescriptor; unknown types decode to the fallback kind
        """
        normalized = raw_type.lower().strip()

        for rule in self.rules:
            captures = rule.match(normalized)
            if captures is None:
                continue
            values: dict[str, object] = {"kind": rule.kind or captures.get(CaptureRole.KIND.value)}
            for role, value in captures.items():
                if role == CaptureRole.KIND.value:
                    continue
                if role == CaptureRole.UNSIGNED.value:
                    values["unsigned"] = True
                elif role == CaptureRole.ENUM_ENTRIES.value:
                    values["enum_entries"] = split_enum_entries(value)
                else:
                    values[role] = _to_number(value)
            return self._with_hints(**values)

        logger.warning(f"No type rule matches '{raw_type}', falling back to '{self.fallback_kind}'")
        return self._with_hints(kind=self.fallback_kind)

    def _with_hints(self, **values: object) -> TypeDescriptor:
        hint = self.hints.get(str(values["kind"]))
        return TypeDescriptor(
            language_type=hint.language_type if hint else None,
            orm_type=hint.orm_type if hint else None,
            **values,  # type: ignore[arg-type]
        )


default_decoder = TypeDecoder()


def decode_type(raw_type: str) -> TypeDescriptor:
    """Decode a raw column type with the built-in rule table"""
    return default_decoder.decode(raw_type)
