from .schema import DTYPES, AttemptRow
from .store import (
    init_store,
    row_from_completion,
    validate_records,
    append_attempts,
    load_all,
    query_chapter,
    latest_attempt,
    export_ndjson,
)

__all__ = [
    "DTYPES",
    "AttemptRow",
    "init_store",
    "row_from_completion",
    "validate_records",
    "append_attempts",
    "load_all",
    "query_chapter",
    "latest_attempt",
    "export_ndjson",
]
