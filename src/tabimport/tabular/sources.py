"""
Row sources: forward-only readers producing one list of cell strings per
physical row.

Every source implements ``has_next()``, ``next()`` and ``rewind()`` and is
also iterable. ``rewind()`` only exists so the delimited reader can read the
header again after sniffing the delimiter; callers should treat sources as
consumable once.
"""

from __future__ import annotations

import csv as _csv
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

import pandas as pd

from .types import Row

logger = logging.getLogger(__name__)

DEFAULT_DELIMITERS = (";", ",")
BOM = "\ufeff"


@runtime_checkable
class RowSource(Protocol):
    def has_next(self) -> bool:
        ...

    def next(self) -> Row:
        ...

    def rewind(self) -> None:
        ...


def detect_delimiter(first_line: str, candidates: Sequence[str] = DEFAULT_DELIMITERS) -> str:
    """
    Pick the candidate occurring most often in ``first_line``.

    The first candidate is the default; a later one only replaces the current
    pick with a strictly greater count, so ties keep the earlier candidate.
    """
    if not candidates:
        raise ValueError("at least one delimiter candidate is required")
    best = candidates[0]
    best_count = first_line.count(best)
    for sep in candidates[1:]:
        n = first_line.count(sep)
        if n > best_count:
            best, best_count = sep, n
    return best


class _BufferedSource:
    """Lookahead over an iterator of rows, giving has_next()/next()."""

    def __init__(self) -> None:
        self._it: Optional[Iterator[Row]] = None
        self._peeked: Optional[Row] = None

    def _open(self) -> Iterator[Row]:
        raise NotImplementedError

    def _iter(self) -> Iterator[Row]:
        if self._it is None:
            self._it = self._open()
        return self._it

    def has_next(self) -> bool:
        if self._peeked is None:
            self._peeked = next(self._iter(), None)
        return self._peeked is not None

    def next(self) -> Row:
        if not self.has_next():
            raise StopIteration
        row, self._peeked = self._peeked, None
        return row

    def rewind(self) -> None:
        self._it = None
        self._peeked = None

    def __iter__(self) -> Iterator[Row]:
        while self.has_next():
            yield self.next()


class ListRowSource(_BufferedSource):
    """In-memory rows, mostly useful for callers that already hold the data."""

    def __init__(self, rows: Iterable[Sequence[Any]]) -> None:
        super().__init__()
        self._rows: List[Row] = [["" if c is None else str(c) for c in r] for r in rows]

    def _open(self) -> Iterator[Row]:
        return iter(self._rows)


class DelimitedRowSource(_BufferedSource):
    """
    CSV / plain-text reader with delimiter auto-detection.

    The file is decoded as UTF-8 with ``surrogateescape`` so legacy
    single-byte content reaches ``normalize_to_utf8`` intact. A leading BOM
    is dropped from the header.
    """

    def __init__(
        self,
        path: Path,
        *,
        delimiter: Optional[str] = None,
        candidates: Sequence[str] = DEFAULT_DELIMITERS,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.candidates = tuple(candidates)
        self._fh = self.path.open("r", encoding="utf-8", errors="surrogateescape", newline="")
        self.delimiter = delimiter or self._sniff_delimiter()

    def _sniff_delimiter(self) -> str:
        first_line = self._fh.readline()
        sep = detect_delimiter(first_line, self.candidates)
        logger.debug("%s: detected delimiter %r", self.path.name, sep)
        self.rewind()
        return sep

    def _open(self) -> Iterator[Row]:
        reader = _csv.reader(self._fh, delimiter=self.delimiter)
        for i, row in enumerate(reader):
            if i == 0 and row and row[0].startswith(BOM):
                row[0] = row[0][len(BOM):]
            yield row

    def rewind(self) -> None:
        self._fh.seek(0)
        super().rewind()

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> "DelimitedRowSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class SpreadsheetRowSource(_BufferedSource):
    """
    First worksheet of an Excel workbook (.xls via xlrd, .xlsx via openpyxl).

    The sheet is loaded in one go through ``pandas.read_excel``; every cell
    comes back as a string, empty cells as "".
    """

    def __init__(self, path: Path, *, sheet: Any = 0) -> None:
        super().__init__()
        self.path = Path(path)
        self.sheet = sheet
        self._rows: Optional[List[Row]] = None

    def _load(self) -> List[Row]:
        df = pd.read_excel(
            self.path,
            sheet_name=self.sheet,
            header=None,
            dtype=str,
            keep_default_na=False,
        )
        rows = [list(r) for r in df.itertuples(index=False, name=None)]
        logger.debug("%s: read %d row(s) from sheet %r", self.path.name, len(rows), self.sheet)
        return rows

    def _open(self) -> Iterator[Row]:
        if self._rows is None:
            self._rows = self._load()
        return iter(self._rows)

    def close(self) -> None:
        self._rows = None

    def __enter__(self) -> "SpreadsheetRowSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
