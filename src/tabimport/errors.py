"""tab-import exception hierarchy.

Errors carry a stable ``kind`` plus ``params`` so callers can render their
own (possibly translated) messages. The English text passed to ``Exception``
is only a fallback.
"""

from __future__ import annotations

from typing import Any, Dict


class TabularImportError(Exception):
    """Base exception for all tab-import errors."""

    kind = "import_error"

    def __init__(self, message: str, **params: Any) -> None:
        self.params: Dict[str, Any] = params
        super().__init__(message)


class ConfigError(TabularImportError, ValueError):
    """Malformed column schema configuration."""

    kind = "config_error"

    def __init__(self, reason: str, column: str | None = None) -> None:
        self.reason = reason
        self.column = column
        where = f" (column '{column}')" if column else ""
        super().__init__(f"Configuration is not valid: {reason}{where}", reason=reason, column=column)


class MissingColumnError(TabularImportError):
    """A mandatory or force-present column has no matching header."""

    kind = "missing_column"

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Column {column} is missing.", column=column)


class NoColumnsFoundError(TabularImportError):
    """None of the schema columns matched the header row."""

    kind = "no_columns_found"

    def __init__(self) -> None:
        super().__init__("No corresponding column found.")


class MissingValueError(TabularImportError, ValueError):
    """A mandatory column is empty on a data row."""

    kind = "missing_value"

    def __init__(self, column: str, row_number: int) -> None:
        self.column = column
        self.row_number = row_number
        super().__init__(
            f"Column {column} is missing at line {row_number}.",
            column=column,
            row_number=row_number,
        )


class UnsupportedFileError(TabularImportError):
    """File is neither a delimited text file nor a spreadsheet."""

    kind = "unsupported_file"

    def __init__(self, mime_type: str | None) -> None:
        self.mime_type = mime_type
        super().__init__(
            f"File is neither a Excel or a CSV file (type: {mime_type}).",
            mime_type=mime_type,
        )
