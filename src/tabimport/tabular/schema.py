from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import yaml

from ..errors import ConfigError
from .types import DEFAULT_TRUE_VALUES, ColumnSpec, ColumnType, Schema
from .validate import validate_schema_doc

_TYPE_ALIASES = {
    "str": ColumnType.STRING,
    "int": ColumnType.INTEGER,
    "bool": ColumnType.BOOLEAN,
}


def _column_type(raw: Any, name: str) -> ColumnType:
    if raw is None:
        return ColumnType.STRING
    if isinstance(raw, ColumnType):
        return raw
    key = str(raw).strip().lower()
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    try:
        return ColumnType(key)
    except ValueError:
        raise ConfigError("unknown type", column=name) from None


def _max_length(raw: Any, name: str) -> Optional[int]:
    if raw is None or raw is False:
        return None
    try:
        n = int(raw)
    except (TypeError, ValueError):
        raise ConfigError("invalid max_length", column=name) from None
    # negative means "no limit"; zero is treated the same way
    return n if n > 0 else None


def normalize_column(name: str, infos: Any) -> ColumnSpec:
    """Turn one config entry (title string or mapping) into a ColumnSpec."""
    if isinstance(infos, str):
        if not infos.strip():
            raise ConfigError("missing title", column=name)
        return ColumnSpec(title=infos)

    if not isinstance(infos, Mapping):
        raise ConfigError("invalid spec shape", column=name)

    title = infos.get("title")
    if title is None or not str(title).strip():
        raise ConfigError("missing title", column=name)

    filler = infos.get("filler")
    if filler is False or filler == "":
        filler = None

    return ColumnSpec(
        title=str(title),
        type=_column_type(infos.get("type"), name),
        mandatory=bool(infos.get("mandatory", False)),
        force_presence=bool(infos.get("force_presence", False)),
        max_length=_max_length(infos.get("max_length"), name),
        filler=None if filler is None else str(filler),
    )


def build_schema(
    raw: Mapping[str, Any],
    *,
    true_values: Optional[Iterable[str]] = None,
    true_token: Optional[str] = None,
) -> Schema:
    """
    Build an immutable Schema from a column configuration mapping.

    Each value is either the expected header title, or a mapping with
    ``title`` and optional ``type``, ``mandatory``, ``force_presence``,
    ``max_length`` and ``filler``.

    ``true_token`` is the localized spelling of TRUE accepted for boolean
    columns in addition to ``true_values``.
    """
    if not isinstance(raw, Mapping):
        raise ConfigError("invalid spec shape")

    columns: Dict[str, ColumnSpec] = {}
    for name, infos in raw.items():
        columns[str(name)] = normalize_column(str(name), infos)

    values = set(DEFAULT_TRUE_VALUES if true_values is None else true_values)
    values.add(true_token or "TRUE")
    return Schema(columns=columns, true_values=frozenset(v.strip().upper() for v in values))


def schema_from_doc(doc: Mapping[str, Any]) -> Schema:
    """Build a Schema from a parsed schema document (see ``load_schema``)."""
    if isinstance(doc, Mapping) and "columns" in doc:
        validate_schema_doc(doc)
        return build_schema(
            doc["columns"],
            true_values=doc.get("true_values"),
            true_token=doc.get("true_token"),
        )
    return build_schema(doc)


def load_schema(path: Path) -> Schema:
    """
    Load a schema from a YAML file.

    Accepted shapes:

      columns:
        email: Email
        age: { title: Age, type: integer }
      true_values: ["1", "TRUE", "X", "V"]
      true_token: VRAI

    or a bare mapping of columns.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(path)

    with path.open("r", encoding="utf-8") as f:
        try:
            doc = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError("invalid yaml") from e

    if doc is None:
        raise ConfigError("empty schema document")
    return schema_from_doc(doc)
