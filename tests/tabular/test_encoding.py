from tabimport.tabular.encoding import is_utf8, normalize_to_utf8


def test_is_utf8():
    assert is_utf8("Céline".encode("utf-8"))
    assert is_utf8(b"plain ascii")
    assert not is_utf8(b"C\xe9line")


def test_valid_text_is_unchanged():
    assert normalize_to_utf8("Céline") == "Céline"
    assert normalize_to_utf8(None) is None


def test_bytes_are_decoded():
    assert normalize_to_utf8("Céline".encode("utf-8")) == "Céline"
    assert normalize_to_utf8(b"C\xe9line") == "Céline"


def test_surrogate_escaped_text_is_transcoded():
    raw = b"Fran\xe7ois".decode("utf-8", errors="surrogateescape")
    assert normalize_to_utf8(raw) == "François"


def test_other_legacy_encoding():
    assert normalize_to_utf8(b"\x80", legacy="cp1252") == "€"
