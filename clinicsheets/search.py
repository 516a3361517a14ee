from __future__ import annotations

from typing import List, Sequence

from .normalize import Record


def filter_records(query: str, records: Sequence[Record]) -> List[Record]:
    """Keep records where any value contains the query, case-insensitively."""
    needle = query.strip().lower()
    return [
        record
        for record in records
        if any(needle in str(value).lower() for value in record.values())
    ]
