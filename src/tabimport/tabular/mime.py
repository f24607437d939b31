"""MIME type detection and the MIME type -> extension lookup used for dispatch."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Dict, Optional

OLE_STORAGE = "application/x-ole-storage"

_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
_ZIP_MAGIC = b"PK\x03\x04"

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MIME_EXTENSIONS: Dict[str, str] = {
    "application/excel": "xls",
    "application/vnd.msexcel": "xls",
    "application/vnd.ms-excel": "xls",
    "application/x-msexcel": "xls",
    "application/x-excel": "xls",
    XLSX: "xlsx",
    "text/csv": "csv",
    "text/comma-separated-values": "csv",
    "application/csv": "csv",
    "text/plain": "txt",
    "text/tab-separated-values": "tsv",
    "application/zip": "zip",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/octet-stream": "bin",
    "application/json": "json",
    "text/xml": "xml",
    "text/html": "html",
}


def extension_for_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """Return the canonical extension for ``mime_type`` (charset suffix ignored)."""
    if not mime_type:
        return None
    base = mime_type.split(";", 1)[0].split(" ", 1)[0].strip().lower()
    return MIME_EXTENSIONS.get(base)


def _sniff(head: bytes) -> Optional[str]:
    if head.startswith(_OLE_MAGIC):
        return OLE_STORAGE
    if head.startswith(_ZIP_MAGIC):
        return "application/zip"
    if b"\x00" in head:
        return "application/octet-stream"
    if head:
        return "text/plain"
    return None


def detect_mime_type(path: Path) -> Optional[str]:
    """
    Guess the MIME type of ``path``.

    The file extension wins when it is known; otherwise the first bytes are
    sniffed (OLE2 compound file, ZIP container, binary, plain text).
    """
    path = Path(path)
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return guessed
    with path.open("rb") as f:
        head = f.read(4096)
    return _sniff(head)
