from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..errors import MissingColumnError, NoColumnsFoundError
from .encoding import normalize_to_utf8
from .types import ColumnIndexMap, Schema

logger = logging.getLogger(__name__)


def normalize_title(value: Optional[str]) -> str:
    """Header comparison key: valid text, trimmed, upper-cased."""
    if value is None:
        return ""
    return normalize_to_utf8(str(value)).strip().upper()


def resolve_columns(schema: Schema, header_row: Sequence[Optional[str]]) -> ColumnIndexMap:
    """
    Map each logical column of ``schema`` to its index in ``header_row``.

    Titles match case-insensitively after trimming; with duplicate headers the
    leftmost one wins. Raises MissingColumnError on the first mandatory or
    force-present column (in schema order) without a header, and
    NoColumnsFoundError if nothing matched at all.
    """
    keys = [normalize_title(cell) for cell in header_row]

    columns: ColumnIndexMap = {}
    for name, spec in schema.items():
        wanted = spec.title.strip().upper()
        for index, key in enumerate(keys):
            if key == wanted:
                columns[name] = index
                break

        if spec.required_header and name not in columns:
            raise MissingColumnError(spec.title)

    if not columns:
        raise NoColumnsFoundError()

    logger.debug("resolved %d/%d column(s): %s", len(columns), len(schema), columns)
    return columns
