import pytest

from tabimport.errors import MissingColumnError, NoColumnsFoundError
from tabimport.tabular.headers import resolve_columns
from tabimport.tabular.schema import build_schema


@pytest.mark.parametrize("header", [" Email ", "EMAIL", "email", "Email"])
def test_match_ignores_case_and_whitespace(header):
    schema = build_schema({"email": "Email"})
    assert resolve_columns(schema, ["Name", header]) == {"email": 1}


def test_duplicate_headers_resolve_to_first():
    schema = build_schema({"name": "Name"})
    assert resolve_columns(schema, ["Name", "Name"]) == {"name": 0}


def test_optional_missing_column_is_left_out():
    schema = build_schema({"name": "Name", "phone": "Phone"})
    assert resolve_columns(schema, ["Age", "Name"]) == {"name": 1}


def test_mandatory_columns_always_resolved():
    schema = build_schema({
        "id": {"title": "Id", "mandatory": True},
        "name": {"title": "Name", "force_presence": True},
        "note": "Note",
    })

    columns = resolve_columns(schema, ["name", "x", "ID"])

    assert columns == {"id": 2, "name": 0}


def test_missing_mandatory_column_fails_fast():
    schema = build_schema({
        "name": "Name",
        "email": {"title": "Email", "mandatory": True},
        "age": {"title": "Age", "mandatory": True},
    })

    with pytest.raises(MissingColumnError) as exc:
        resolve_columns(schema, ["Name"])

    # first missing column in schema order, by title
    assert exc.value.column == "Email"
    assert exc.value.params == {"column": "Email"}


def test_missing_force_presence_column():
    schema = build_schema({"name": "Name", "code": {"title": "Code", "force_presence": True}})

    with pytest.raises(MissingColumnError) as exc:
        resolve_columns(schema, ["Name"])

    assert exc.value.column == "Code"


def test_no_matching_column_at_all():
    schema = build_schema({"name": "Name", "age": "Age"})

    with pytest.raises(NoColumnsFoundError):
        resolve_columns(schema, ["foo", "bar"])


def test_legacy_encoded_header_matches():
    # "Prénom" read from a Latin-1 file with surrogateescape
    raw_header = b"Pr\xe9nom".decode("utf-8", errors="surrogateescape")
    schema = build_schema({"first_name": "Prénom"})

    assert resolve_columns(schema, [raw_header]) == {"first_name": 0}


def test_none_header_cells_are_skipped():
    schema = build_schema({"name": "Name"})
    assert resolve_columns(schema, [None, "Name"]) == {"name": 1}
