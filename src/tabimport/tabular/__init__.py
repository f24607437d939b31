from . import types
from . import encoding
from . import schema
from . import headers
from . import convert
from . import sources
from . import importer
from . import emit

from .schema import build_schema, load_schema
from .headers import resolve_columns
from .convert import convert_row
from .sources import detect_delimiter
from .importer import import_file, import_rows, open_row_source

__all__ = [
    "types",
    "encoding",
    "schema",
    "headers",
    "convert",
    "sources",
    "importer",
    "emit",
    "build_schema",
    "load_schema",
    "resolve_columns",
    "convert_row",
    "detect_delimiter",
    "import_file",
    "import_rows",
    "open_row_source",
]
