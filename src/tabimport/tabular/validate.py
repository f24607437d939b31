from typing import Any, Dict

import jsonschema

from ..errors import ConfigError

# Envelope only; per-column checks live in schema.normalize_column so that
# they report "missing title" / "invalid spec shape" precisely.
SCHEMA_DOC_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["columns"],
    "properties": {
        "columns": {"type": "object", "minProperties": 1},
        "true_values": {"type": "array", "items": {"type": "string"}},
        "true_token": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}


def validate_schema_doc(doc: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=doc, schema=SCHEMA_DOC_SCHEMA)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"{path}: {e.message}") from e
