from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

from ..errors import UnsupportedFileError
from .convert import DateParser, convert_row
from .dates import parse_localized_date
from .headers import resolve_columns
from .mime import OLE_STORAGE, detect_mime_type, extension_for_mime_type
from .sources import DelimitedRowSource, RowSource, SpreadsheetRowSource
from .types import ColumnIndexMap, Record, Schema

logger = logging.getLogger(__name__)

MimeDetector = Callable[[Path], Optional[str]]

TEXT_EXTENSIONS = frozenset({"csv", "txt"})
SPREADSHEET_EXTENSIONS = frozenset({"xls", "xlsx"})

# First data row; row 1 is the header.
FIRST_DATA_ROW = 2


def read_header(schema: Schema, source: RowSource) -> Optional[ColumnIndexMap]:
    """Consume the header row and resolve it; None for an empty source."""
    if not source.has_next():
        return None
    return resolve_columns(schema, source.next())


def convert_rows(
    schema: Schema,
    columns: ColumnIndexMap,
    source: RowSource,
    *,
    date_parser: Optional[DateParser] = None,
) -> Iterator[Record]:
    """Yield one Record per remaining row of ``source``, numbered from 2."""
    parse_date = date_parser or parse_localized_date
    row_number = FIRST_DATA_ROW
    while source.has_next():
        yield convert_row(schema, columns, source.next(), row_number, date_parser=parse_date)
        row_number += 1


def import_source(
    schema: Schema,
    source: RowSource,
    *,
    date_parser: Optional[DateParser] = None,
) -> Tuple[ColumnIndexMap, List[Record]]:
    """
    Import every row of ``source`` and also return the resolved columns.

    The first row is the header. An empty source gives ``({}, [])``. Any
    error aborts the whole import; no partial result is returned.
    """
    columns = read_header(schema, source)
    if columns is None:
        return {}, []

    records = list(convert_rows(schema, columns, source, date_parser=date_parser))
    logger.debug("imported %d record(s)", len(records))
    return columns, records


def import_rows(
    schema: Schema,
    source: RowSource,
    *,
    date_parser: Optional[DateParser] = None,
) -> List[Record]:
    """Import every row of ``source`` against ``schema`` (see ``import_source``)."""
    return import_source(schema, source, date_parser=date_parser)[1]


def open_row_source(
    path: Union[str, Path],
    mime_type: Optional[str] = None,
    *,
    detect: MimeDetector = detect_mime_type,
) -> Union[DelimitedRowSource, SpreadsheetRowSource]:
    """Pick the row source matching the file type of ``path``."""
    path = Path(path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(path)

    if mime_type is None:
        mime_type = detect(path)

    ext = extension_for_mime_type(mime_type)
    logger.debug("%s: type %s (%s)", path.name, mime_type, ext)

    if ext in SPREADSHEET_EXTENSIONS:
        return SpreadsheetRowSource(path)
    if ext in TEXT_EXTENSIONS:
        return DelimitedRowSource(path)
    # Some legacy Excel files are only recognized as generic OLE2 storage.
    if mime_type and mime_type.split(";", 1)[0].strip() == OLE_STORAGE:
        return SpreadsheetRowSource(path)
    raise UnsupportedFileError(mime_type)


def import_file(
    schema: Schema,
    path: Union[str, Path],
    mime_type: Optional[str] = None,
    *,
    detect: MimeDetector = detect_mime_type,
    date_parser: Optional[DateParser] = None,
) -> List[Record]:
    """Open ``path`` with the right row source and import it."""
    with open_row_source(path, mime_type, detect=detect) as source:
        return import_rows(schema, source, date_parser=date_parser)
