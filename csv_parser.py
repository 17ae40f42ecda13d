# csv_parser.py
# Minimal CSV reader matching what the browser upload produces.
# Quotes only protect commas; there is no escaped-quote ("") support.
import re
from typing import List

from errors import MalformedInputError
from models import ParsedTable

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")


def parse_csv_line(line: str) -> List[str]:
    values = []
    current = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    values.append("".join(current).strip())
    return values


def parse_csv(text: str) -> ParsedTable:
    """
    Parse CSV text into a ParsedTable.

    The first non-blank line is the header. Data rows shorter than the header
    are padded with empty strings; fields past the last header are dropped.
    Raises MalformedInputError when there is no data row or the header is
    unusable as a column list.
    """
    lines = [ln for ln in _LINE_SPLIT_RE.split(text or "") if ln.strip()]
    if len(lines) < 2:
        raise MalformedInputError("CSV file must have at least a header row and one data row")

    headers = parse_csv_line(lines[0])
    seen = set()
    for h in headers:
        if not h:
            raise MalformedInputError("CSV header contains an empty column name")
        if h.lower() in seen:
            raise MalformedInputError(f"CSV header contains duplicate column name: {h}")
        seen.add(h.lower())

    rows = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return ParsedTable(tuple(headers), tuple(rows))
