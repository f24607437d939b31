from __future__ import annotations

import re
from typing import Any, Callable, FrozenSet, Optional, Sequence, Tuple

from ..errors import MissingValueError
from .encoding import normalize_to_utf8
from .types import ColumnIndexMap, ColumnSpec, ColumnType, Record, Schema

DateParser = Callable[[str], Tuple[Any, Any, Any]]

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Coerce-or-zero numerics
#
# Non-numeric input yields 0 / 0.0 instead of raising. Callers that need
# strict validation must check values before importing.
# ---------------------------------------------------------------------------

def coerce_int(value: Optional[str]) -> int:
    """Parse the leading integer portion of ``value``; 0 if there is none."""
    if value is None:
        return 0
    m = _INT_PREFIX.match(value)
    return int(m.group(0)) if m else 0


def coerce_float(value: Optional[str]) -> float:
    """Parse the leading decimal portion of ``value``; 0.0 if there is none."""
    if value is None:
        return 0.0
    m = _FLOAT_PREFIX.match(value)
    return float(m.group(0)) if m else 0.0


def coerce_bool(value: Optional[str], true_values: FrozenSet[str]) -> bool:
    if value is None:
        return False
    return value.strip().upper() in true_values


def coerce_date(value: Optional[str], date_parser: DateParser) -> Optional[str]:
    """Reassemble the (year, month, day) from ``date_parser`` as YYYY-MM-DD."""
    if value is None:
        return None
    year, month, day = date_parser(value)
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def pad_and_truncate(value: str, max_length: Optional[int], filler: Optional[str]) -> str:
    """
    Apply the ``max_length`` / ``filler`` rules to a string value.

    The filler is repeated ``max_length`` times and appended before cutting,
    whatever the current length: "AB" with filler "0" and max 3 gives
    "AB000" then "AB0".
    """
    if not max_length:
        return value
    if filler:
        value = value + filler * max_length
    return value[:max_length]


def coerce_string(value: Optional[str], spec: ColumnSpec) -> Optional[str]:
    if value is None:
        return None
    value = pad_and_truncate(value, spec.max_length, spec.filler)
    return normalize_to_utf8(value)


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def _cell(row: Sequence[Any], index: int) -> Optional[str]:
    if index >= len(row):
        return None
    raw = row[index]
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def convert_value(
    name: str,
    spec: ColumnSpec,
    raw: Optional[str],
    row_number: int,
    *,
    true_values: FrozenSet[str],
    date_parser: DateParser,
) -> Any:
    """Coerce one trimmed cell according to ``spec``."""
    if spec.mandatory and raw is None:
        raise MissingValueError(name, row_number)

    if spec.type is ColumnType.INTEGER:
        return coerce_int(raw)
    if spec.type is ColumnType.FLOAT:
        return coerce_float(raw)
    if spec.type is ColumnType.DATE:
        return coerce_date(raw, date_parser)
    if spec.type is ColumnType.BOOLEAN:
        return coerce_bool(raw, true_values)
    return coerce_string(raw, spec)


def convert_row(
    schema: Schema,
    columns: ColumnIndexMap,
    row: Sequence[Any],
    row_number: int,
    *,
    date_parser: DateParser,
) -> Record:
    """
    Build one Record from a physical row.

    Only columns present in ``columns`` appear in the result. A short row
    yields None for the missing cells (subject to the mandatory check).
    """
    record: Record = {}
    for name, index in columns.items():
        record[name] = convert_value(
            name,
            schema[name],
            _cell(row, index),
            row_number,
            true_values=schema.true_values,
            date_parser=date_parser,
        )
    return record
