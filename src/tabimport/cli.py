from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer

from tabimport.errors import TabularImportError
from tabimport.schemas.models import ImportReport
from tabimport.tabular.dates import date_parser_for
from tabimport.tabular.emit import FORMATS, emit_records, records_to_jsonl
from tabimport.tabular.importer import import_source, open_row_source, read_header
from tabimport.tabular.mime import detect_mime_type, extension_for_mime_type
from tabimport.tabular.schema import load_schema
from tabimport.tabular.sources import DelimitedRowSource

app = typer.Typer(help="tab-import CLI")

logger = logging.getLogger("tabimport")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Import CSV / Excel files into typed records using a column schema."""
    # fresh handler per run, bound to the current stderr
    for old in list(logger.handlers):
        logger.removeHandler(old)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("[tab-import] %(message)s"))
    logger.addHandler(h)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _fail(err: TabularImportError) -> None:
    typer.secho(f"Error [{err.kind}]: {err}", fg=typer.colors.RED, err=True)
    if err.params:
        typer.echo(json.dumps(err.params, default=str), err=True)
    raise typer.Exit(code=1)


def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


# -----------------------------
# Schema helpers
# -----------------------------

@app.command("check-schema")
def check_schema(schema_path: Path = typer.Argument(..., help="Schema YAML")):
    """Validate a schema file and print its normalized form."""
    try:
        schema = load_schema(schema_path)
    except TabularImportError as e:
        _fail(e)
    typer.echo(json.dumps(schema.to_dict(), indent=2))


@app.command("sniff")
def sniff(path: Path = typer.Argument(..., help="Input file")):
    """Print the detected MIME type (and delimiter for text files)."""
    if not path.is_file():
        raise typer.BadParameter(f"{path} not found")
    mime = detect_mime_type(path)
    out = {"file": str(path), "mime_type": mime, "extension": extension_for_mime_type(mime)}
    if out["extension"] in ("csv", "txt"):
        with DelimitedRowSource(path) as src:
            out["delimiter"] = src.delimiter
    typer.echo(json.dumps(out, indent=2))


@app.command("headers")
def headers(
    schema_path: Path = typer.Argument(..., help="Schema YAML"),
    path: Path = typer.Argument(..., help="Input file"),
    mime: Optional[str] = typer.Option(None, "--mime", help="Override MIME type detection"),
):
    """Show which physical column each schema column maps to."""
    try:
        schema = load_schema(schema_path)
        with open_row_source(path, mime) as src:
            columns = read_header(schema, src) or {}
    except FileNotFoundError as e:
        raise typer.BadParameter(f"{e} not found")
    except TabularImportError as e:
        _fail(e)
    typer.echo(json.dumps(columns, indent=2))


# -----------------------------
# Import
# -----------------------------

@app.command("import")
def import_cmd(
    schema_path: Path = typer.Argument(..., help="Schema YAML"),
    path: Path = typer.Argument(..., help="CSV / TXT / XLS / XLSX file"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write records here (stdout if omitted)"),
    fmt: str = typer.Option("jsonl", "--format", "-f", help="jsonl | csv | parquet"),
    mime: Optional[str] = typer.Option(None, "--mime", help="Override MIME type detection"),
    culture: str = typer.Option("en", "--culture", help="Culture used to read date columns"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write an import report (JSON)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Parse and print the record count only"),
):
    """Import a file against a schema."""
    if fmt not in FORMATS:
        raise typer.BadParameter(f"Unknown format '{fmt}'. Choose one of {list(FORMATS)}")
    if fmt != "jsonl" and out is None and not dry_run:
        raise typer.BadParameter(f"--format {fmt} requires --out")

    try:
        schema = load_schema(schema_path)
        mime_type = mime or (detect_mime_type(path) if path.is_file() else None)
        with open_row_source(path, mime_type) as src:
            delimiter = getattr(src, "delimiter", None)
            columns, records = import_source(schema, src, date_parser=date_parser_for(culture))
    except FileNotFoundError as e:
        raise typer.BadParameter(f"{e} not found")
    except TabularImportError as e:
        _fail(e)
    except ValueError as e:
        # date parsing failures from the culture-aware parser
        typer.secho(f"Error [value_error]: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger.info("%s: %d record(s)", path.name, len(records))

    written = None
    if dry_run:
        typer.echo(f"{len(records)} record(s)")
    else:
        if out is None:
            typer.echo(records_to_jsonl(records), nl=False)
        else:
            written = emit_records(records, out, fmt=fmt, columns=list(schema))
            typer.secho(f"Wrote {written} ({len(records)} records)", fg=typer.colors.GREEN)

    if report:
        rep = ImportReport(
            timestamp=time.strftime("%Y-%m-%d %H:%M:%S"),
            file=str(path),
            sha256=_sha256(path),
            mime_type=mime_type,
            delimiter=delimiter,
            columns=columns,
            unresolved=[name for name in schema if name not in columns],
            num_records=len(records),
            output=str(written) if written else None,
        )
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(rep.model_dump_json(indent=2))
        typer.secho(f"Wrote {report}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
