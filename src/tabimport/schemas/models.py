from __future__ import annotations
from typing import Optional, Dict, List
from pydantic import BaseModel, Field

class ImportReport(BaseModel):
    # Provenance for one file import, written next to the output
    schema_version: str = Field(default='0.1.0')
    timestamp: str
    file: str
    sha256: str
    mime_type: Optional[str] = None
    delimiter: Optional[str] = None
    columns: Dict[str, int]
    unresolved: List[str] = Field(default_factory=list)
    num_records: int
    output: Optional[str] = None
    importer: str = Field(default='tabimport.tabular/0.1.0')
