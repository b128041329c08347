"""Type aliases for consistent type annotations across codebase."""

from typing import Any

# Raw result row as decoded from the chat backend (after normalize_rows)
ResultRow = dict[str, Any]

# Row after flatten_rows: group keys expanded, nested record arrays exploded
FlattenedRow = dict[str, Any]
