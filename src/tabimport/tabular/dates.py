"""Default locale-aware date collaborator, backed by pandas' date parser."""

from __future__ import annotations

import datetime
import re
from functools import partial
from typing import Callable, Tuple

import pandas as pd

# Cultures that write month before day (01/02/2024 is January 2nd).
MONTH_FIRST_CULTURES = frozenset({"en", "en_us", "en-us", "us"})

# 2024-03-07, 2024/03/07, 2024.03.07, optionally followed by a time
_YEAR_FIRST = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?:$|[ T])")
# 07/03/2024, 07.03.2024, 07-03-2024
_YEAR_LAST = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})(?:$|[ T])")


def _dayfirst(culture: str) -> bool:
    c = (culture or "").strip().lower()
    return c not in MONTH_FIRST_CULTURES


def _ymd(year: int, month: int, day: int) -> Tuple[int, int, int]:
    # datetime.date rejects month 13, February 30th, ... with ValueError
    d = datetime.date(year, month, day)
    return d.year, d.month, d.day


def parse_localized_date(value: str, culture: str = "en") -> Tuple[int, int, int]:
    """
    Parse ``value`` as written in ``culture`` and return (year, month, day).

    Year-first numeric dates parse the same in every culture. Numeric dates
    ending with the year are read day-first or month-first according to
    ``culture``, strictly: "13/03/2024" is not a date for ``en``. Other
    spellings ("7 March 2024") go through pandas. Raises ValueError when the
    value is not a date.
    """
    text = str(value).strip()
    if not text:
        raise ValueError("empty date value")

    m = _YEAR_FIRST.match(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _ymd(year, month, day)

    m = _YEAR_LAST.match(text)
    if m:
        first, second, year = (int(g) for g in m.groups())
        if _dayfirst(culture):
            return _ymd(year, second, first)
        return _ymd(year, first, second)

    ts = pd.to_datetime(text, dayfirst=_dayfirst(culture))
    if pd.isna(ts):
        raise ValueError(f"not a date: {value!r}")
    return ts.year, ts.month, ts.day


def date_parser_for(culture: str) -> Callable[[str], Tuple[int, int, int]]:
    return partial(parse_localized_date, culture=culture)
