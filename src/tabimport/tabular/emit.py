from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

FORMATS = ("jsonl", "csv", "parquet")


# ============================================================================
# Records → JSONL
# ============================================================================

def records_to_jsonl(records: List[Dict[str, Any]]) -> str:
    lines = [json.dumps(r, ensure_ascii=False, sort_keys=False) for r in records]
    return "\n".join(lines) + ("\n" if lines else "")


def emit_records_jsonl(
    records: List[Dict[str, Any]],
    outpath: Path,
    *,
    dry_run: bool = False,
) -> Optional[str]:
    """Write one JSON object per record. Returns the text instead on dry_run."""
    text = records_to_jsonl(records)
    if dry_run:
        return text

    outpath = outpath.expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)
    outpath.write_text(text, encoding="utf-8")
    return None


# ============================================================================
# Records → tabular (CSV / Parquet) via pandas
# ============================================================================

def records_to_frame(records: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Frame with one column per logical column, in schema order when given."""
    if not records:
        return pd.DataFrame(columns=columns or [])
    df = pd.DataFrame.from_records(records)
    if columns is not None:
        df = df[[c for c in columns if c in df.columns]]
    return df


def emit_records(
    records: List[Dict[str, Any]],
    outpath: Path,
    *,
    fmt: str = "jsonl",
    columns: Optional[List[str]] = None,
) -> Path:
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format '{fmt}'. Choose one of {list(FORMATS)}")

    outpath = outpath.expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "jsonl":
        emit_records_jsonl(records, outpath)
    elif fmt == "csv":
        records_to_frame(records, columns).to_csv(outpath, index=False)
    else:
        records_to_frame(records, columns).to_parquet(outpath, index=False)
    return outpath
