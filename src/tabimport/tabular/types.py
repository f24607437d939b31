from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple


class ColumnType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    BOOLEAN = "boolean"


DEFAULT_TRUE_VALUES: Tuple[str, ...] = ("1", "TRUE", "X", "V")


@dataclass(frozen=True)
class ColumnSpec:
    title: str                          # header text, matched trimmed + case-insensitive
    type: ColumnType = ColumnType.STRING
    mandatory: bool = False             # value required on every data row
    force_presence: bool = False        # header required, value may be empty
    max_length: Optional[int] = None
    filler: Optional[str] = None

    @property
    def required_header(self) -> bool:
        return self.mandatory or self.force_presence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type.value,
            "mandatory": self.mandatory,
            "force_presence": self.force_presence,
            "max_length": self.max_length,
            "filler": self.filler,
        }


@dataclass(frozen=True)
class Schema:
    """
    Normalized, read-only column schema.

    ``columns`` keeps the insertion order of the configuration; header
    resolution walks it in that order.
    """

    columns: Mapping[str, ColumnSpec]
    true_values: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_TRUE_VALUES))

    def __post_init__(self):
        if not isinstance(self.columns, MappingProxyType):
            object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, name: str) -> ColumnSpec:
        return self.columns[name]

    def items(self):
        return self.columns.items()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columns": {name: spec.to_dict() for name, spec in self.columns.items()},
            "true_values": sorted(self.true_values),
        }


# logical column name -> 0-based physical index
ColumnIndexMap = Dict[str, int]

# logical column name -> typed value
Record = Dict[str, Any]

Row = List[str]
