import json
import sys
from typing import Optional, TextIO

from go_decls.src.go_decls.errors import SerializationError
from go_decls.src.go_decls.models.ast_models import FileRecord


# --- JSON export --------------------------------------------------------------

def to_json(record: FileRecord) -> str:
    """
    Serializes a file record to a single-line JSON document. This is what the
    indexing services read from our stdout.
    """
    try:
        return json.dumps(
            record.to_dict(), ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode record as JSON: {e}") from e


def write_record(record: FileRecord, stream: Optional[TextIO] = None):
    """
    Writes the JSON document and a trailing newline in one go, so a failed
    encode never leaves a partial record on the stream.
    """
    document = to_json(record)
    out = stream if stream is not None else sys.stdout
    out.write(document + "\n")
    out.flush()
