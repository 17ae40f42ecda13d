# formatting.py
# Fixed-width text rendering of result rows, the way the playground shows them.
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

NULL_MARKER = "NULL"
NO_RESULTS = "No results returned."


@dataclass
class FormattedTable:
    raw: List[Dict[str, Any]]
    formatted: str
    names: List[str]
    widths: Dict[str, int]


def format_value(value: Any) -> str:
    """NULL is never shown as a blank cell."""
    return NULL_MARKER if value is None else str(value)


def format_results_as_table(rows: List[Dict[str, Any]],
                            columns: Optional[Sequence[str]] = None) -> FormattedTable:
    """
    Render rows as an ASCII table:

        +----+------+
        | id | name |
        +----+------+
        | 1  | NULL |
        +----+------+

    `columns` fixes the column order; it defaults to the keys of the first row.
    """
    if columns is None:
        columns = list(rows[0].keys()) if rows else []
    names = list(columns)
    if not rows:
        return FormattedTable(raw=[], formatted=NO_RESULTS, names=names,
                              widths={c: len(c) for c in names})

    widths = {}
    for col in names:
        widths[col] = max([len(col)] + [len(format_value(r.get(col))) for r in rows])

    separator = "+" + "+".join("-" * (widths[c] + 2) for c in names) + "+"
    lines = [separator, _render_line(names, widths), separator]
    for row in rows:
        lines.append(_render_line([format_value(row.get(c)) for c in names], widths, names))
    lines.append(separator)
    return FormattedTable(raw=rows, formatted="\n".join(lines), names=names, widths=widths)


def _render_line(cells: List[str], widths: Dict[str, int], names: List[str] = None) -> str:
    names = names or cells
    return "| " + " | ".join(cell.ljust(widths[n]) for cell, n in zip(cells, names)) + " |"
