"""
CSV normalization for published spreadsheet exports.

Responsibilities:
- byte decoding + newline normalization
- header canonicalization
- duplicate header row detection
- short / blank row filtering

Malformed rows are dropped, never reported. Spreadsheet exports carry
repeated header rows, trailing separators and blank lines; none of them
are errors for the caller.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from charset_normalizer import from_bytes

from .rules import FIELD_SEPARATOR, HEADER_RENAMES, LINE_SEPARATOR, MIN_ROW_FILL_RATIO

Record = Dict[str, str]

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
# Spreadsheet exports leave stray BOMs inside cells
_EDGE_BLANKS = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def decode_csv_bytes(raw: bytes) -> Tuple[str, str]:
    """
    Decode CSV bytes to text with LF line endings.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If decode fails, fall back to UTF-8, then UTF-8 with replacement characters.

    Returns (text, encoding_used).
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            # Last resort: keep going with replacement characters
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text, decode_used


def _trim(value: str) -> str:
    return _EDGE_BLANKS.sub("", value)


def canonicalize(cell: str) -> str:
    """Lowercase a cell and strip whitespace and anything outside [a-z0-9]."""
    cleaned = _WHITESPACE.sub("", _trim(cell).lower())
    return _NON_ALNUM.sub("", cleaned)


def fingerprint(cells: Iterable[str]) -> str:
    return "".join(canonicalize(cell) for cell in cells)


def canonical_header(cells: Iterable[str]) -> List[str]:
    names = [canonicalize(cell) for cell in cells]
    return [HEADER_RENAMES.get(name, name) for name in names]


def parse_csv_table(text: str) -> Tuple[List[str], List[Record]]:
    """
    Parse loosely structured CSV text into (header, records).

    The first non-blank line is the header. A later row is skipped when
    it has fewer than 70% of the header's cells, when it is blank, when
    it repeats the header, or when every mapped value is empty.
    Never raises on malformed input.
    """
    lines = [line for line in text.split(LINE_SEPARATOR) if _trim(line) != ""]
    if len(lines) < 2:
        return [], []

    raw_header = lines[0].split(FIELD_SEPARATOR)
    header = canonical_header(raw_header)
    header_print = fingerprint(raw_header)
    min_cells = len(header) * MIN_ROW_FILL_RATIO

    records: List[Record] = []
    for line in lines[1:]:
        values = line.split(FIELD_SEPARATOR)

        if len(values) < min_cells or all(_trim(v) == "" for v in values):
            continue

        # Upstream exports sometimes repeat the header inside the data
        if fingerprint(values) == header_print:
            continue

        record: Record = {}
        is_empty = True
        for index, name in enumerate(header):
            value = _trim(values[index]) if index < len(values) else ""
            record[name] = value
            if value != "":
                is_empty = False

        if not is_empty:
            records.append(record)

    return header, records


def parse_csv(text: str) -> List[Record]:
    """Parse CSV text into records; see parse_csv_table."""
    _, records = parse_csv_table(text)
    return records
