"""
Best-effort text normalization for cells read from legacy files.

Delimited files are decoded as UTF-8 with ``surrogateescape`` so that bytes
which are not valid UTF-8 survive the read. ``normalize_to_utf8`` turns such a
cell back into its raw bytes and, when they are not valid UTF-8, transcodes
them from a single-byte legacy encoding (Latin-1 by default).
"""

from __future__ import annotations

from typing import Optional, Union

LEGACY_ENCODING = "latin-1"


def is_utf8(raw: bytes) -> bool:
    try:
        raw.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def _to_bytes(value: str) -> Optional[bytes]:
    """Recover raw bytes from a surrogate-escaped str; None if it is clean text."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        pass
    else:
        return None
    try:
        return value.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        # surrogates that did not come from a byte escape
        return value.encode("utf-8", errors="replace")


def normalize_to_utf8(value: Union[str, bytes, None], legacy: str = LEGACY_ENCODING) -> Optional[str]:
    """Return ``value`` as valid text, transcoding from ``legacy`` if needed."""
    if value is None:
        return None
    if isinstance(value, str):
        raw = _to_bytes(value)
        if raw is None:
            return value
    else:
        raw = bytes(value)

    if is_utf8(raw):
        return raw.decode("utf-8")
    return raw.decode(legacy, errors="replace")
