from pathlib import Path

import pandas as pd
import pytest

from tabimport.errors import MissingColumnError, MissingValueError, UnsupportedFileError
from tabimport.tabular.importer import import_file, import_rows, import_source, open_row_source
from tabimport.tabular.schema import build_schema
from tabimport.tabular.sources import (
    DelimitedRowSource,
    ListRowSource,
    SpreadsheetRowSource,
    detect_delimiter,
)


NAME_AGE = {"n": "Name", "a": {"title": "Age", "type": "integer"}}


# ==========================================================
# IN-MEMORY IMPORTS
# ==========================================================

def test_name_age_import():
    schema = build_schema(NAME_AGE)
    source = ListRowSource([["Name", "Age"], ["Alice", "30"]])

    assert import_rows(schema, source) == [{"n": "Alice", "a": 30}]


def test_empty_source_gives_empty_result():
    schema = build_schema(NAME_AGE)

    assert import_rows(schema, ListRowSource([])) == []
    assert import_rows(schema, ListRowSource([["Name", "Age"]])) == []


def test_import_source_returns_columns():
    schema = build_schema(NAME_AGE)

    columns, records = import_source(schema, ListRowSource([["x", "Age", "Name"], ["", "5", "Eve"]]))

    assert columns == {"n": 2, "a": 1}
    assert records == [{"n": "Eve", "a": 5}]
    assert import_source(schema, ListRowSource([])) == ({}, [])


def test_rows_keep_file_order_and_positions():
    schema = build_schema(NAME_AGE)
    source = ListRowSource([
        ["Age", "Other", "name"],
        ["1", "x", "a"],
        ["2", "y", "b"],
        ["3", "z", "c"],
    ])

    records = import_rows(schema, source)

    assert [r["n"] for r in records] == ["a", "b", "c"]
    assert [r["a"] for r in records] == [1, 2, 3]


def test_missing_value_reports_file_row_number():
    schema = build_schema({"n": {"title": "Name", "mandatory": True}})
    source = ListRowSource([["Name"], ["ok"], [""], ["never"]])

    # header is row 1, so the empty cell is on row 3
    with pytest.raises(MissingValueError) as exc:
        import_rows(schema, source)

    assert (exc.value.column, exc.value.row_number) == ("n", 3)


def test_missing_column_aborts_import():
    schema = build_schema({"n": "Name", "e": {"title": "Email", "force_presence": True}})

    with pytest.raises(MissingColumnError):
        import_rows(schema, ListRowSource([["Name"], ["Alice"]]))


def test_schema_is_reusable():
    schema = build_schema(NAME_AGE)

    first = import_rows(schema, ListRowSource([["Name", "Age"], ["A", "1"]]))
    second = import_rows(schema, ListRowSource([["Age", "Name"], ["2", "B"]]))

    assert first == [{"n": "A", "a": 1}]
    assert second == [{"n": "B", "a": 2}]


def test_injected_date_parser():
    schema = build_schema({"d": {"title": "Date", "type": "date"}})
    source = ListRowSource([["Date"], ["7 mars 2024"], [""]])

    records = import_rows(schema, source, date_parser=lambda v: ("2024", "3", "7"))

    assert records == [{"d": "2024-03-07"}, {"d": None}]


# ==========================================================
# DELIMITER DETECTION
# ==========================================================

@pytest.mark.parametrize(
    "line, expected",
    [
        ("a;b,c;d;e", ";"),
        ("a,b,c;d", ","),
        ("a;b,c", ";"),
        ("abc", ";"),
        ("", ";"),
    ],
)
def test_detect_delimiter(line, expected):
    assert detect_delimiter(line) == expected


def test_detect_delimiter_custom_candidates():
    assert detect_delimiter("a\tb\tc;d", candidates=(";", ",", "\t")) == "\t"


# ==========================================================
# FILE SOURCES
# ==========================================================

def _write(tmp_path: Path, name: str, data: bytes) -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def test_delimited_source_semicolon(tmp_path):
    path = _write(tmp_path, "people.csv", b"Name;Age\nAlice;30\nBob;41\n")

    with DelimitedRowSource(path) as src:
        assert src.delimiter == ";"
        assert list(src) == [["Name", "Age"], ["Alice", "30"], ["Bob", "41"]]


def test_delimited_source_comma_and_quotes(tmp_path):
    path = _write(tmp_path, "people.csv", b'Name,City\n"Doe, John","Paris"\n')

    with DelimitedRowSource(path) as src:
        assert src.delimiter == ","
        assert src.next() == ["Name", "City"]
        assert src.next() == ["Doe, John", "Paris"]
        assert not src.has_next()


def test_delimited_source_rewind(tmp_path):
    path = _write(tmp_path, "people.csv", b"Name;Age\nAlice;30\n")

    with DelimitedRowSource(path) as src:
        src.next()
        src.rewind()
        assert src.next() == ["Name", "Age"]


def test_import_latin1_csv(tmp_path):
    path = _write(tmp_path, "people.csv", b"Pr\xe9nom;Ville\nC\xe9line;Orl\xe9ans\n")
    schema = build_schema({"first": "Prénom", "city": "Ville"})

    assert import_file(schema, path) == [{"first": "Céline", "city": "Orléans"}]


def test_import_utf8_bom_csv(tmp_path):
    path = _write(tmp_path, "people.csv", "\ufeffName,Age\nZoë,7\n".encode("utf-8"))

    assert import_file(build_schema(NAME_AGE), path) == [{"n": "Zoë", "a": 7}]


def test_import_empty_csv(tmp_path):
    path = _write(tmp_path, "empty.csv", b"")

    assert import_file(build_schema(NAME_AGE), path) == []


def test_import_xlsx(tmp_path):
    path = tmp_path / "people.xlsx"
    pd.DataFrame({"Name": ["Alice", "Bob"], "Age": [30, 41]}).to_excel(path, index=False)

    records = import_file(build_schema(NAME_AGE), path)

    assert records == [{"n": "Alice", "a": 30}, {"n": "Bob", "a": 41}]


# ==========================================================
# FILE DISPATCH
# ==========================================================

def test_dispatch_by_detected_type(tmp_path):
    csv_path = _write(tmp_path, "people.csv", b"Name\n")
    with open_row_source(csv_path) as src:
        assert isinstance(src, DelimitedRowSource)

    xls_path = _write(tmp_path, "people.xls", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")
    assert isinstance(open_row_source(xls_path), SpreadsheetRowSource)


def test_dispatch_uses_injected_detector(tmp_path):
    path = _write(tmp_path, "export.dat", b"Name,Age\nAlice,30\n")

    records = import_file(build_schema(NAME_AGE), path, detect=lambda p: "text/comma-separated-values")

    assert records == [{"n": "Alice", "a": 30}]


def test_ole_storage_is_treated_as_spreadsheet(tmp_path):
    path = _write(tmp_path, "legacy.bin", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")

    assert isinstance(open_row_source(path, "application/x-ole-storage"), SpreadsheetRowSource)


def test_unsupported_type(tmp_path):
    path = _write(tmp_path, "picture.png", b"\x89PNG")

    with pytest.raises(UnsupportedFileError) as exc:
        open_row_source(path)

    assert exc.value.mime_type == "image/png"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_row_source(tmp_path / "missing.csv")
