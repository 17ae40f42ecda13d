# models.py
# Containers passed between the parser, the executor and the HTTP layer.
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from errors import MalformedInputError

SELECT = "select"
MUTATE = "mutate"
DDL = "ddl"
OTHER = "other"


@dataclass(frozen=True)
class ParsedTable:
    """
    Headers plus rows, where every row maps each header to a string.
    Header order is the column order used for the table and for display.
    """
    headers: Tuple[str, ...]
    rows: Tuple[Dict[str, str], ...]

    def __post_init__(self):
        headers = tuple(self.headers)
        rows = tuple({h: row.get(h, "") for h in headers} for row in self.rows)
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_payload(cls, payload: Any) -> "ParsedTable":
        """
        Build a table from the `csvData` literal sent by the browser:
        {"headers": [...], "rows": [{...}, ...]}.
        """
        if not isinstance(payload, dict):
            raise MalformedInputError("csvData must be an object with headers and rows")
        headers = payload.get("headers")
        rows = payload.get("rows")
        if not isinstance(headers, list) or not headers:
            raise MalformedInputError("csvData.headers must be a non-empty list")
        if not all(isinstance(h, str) for h in headers):
            raise MalformedInputError("csvData.headers must contain only strings")
        if not isinstance(rows, list):
            raise MalformedInputError("csvData.rows must be a list")
        clean_rows = []
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                raise MalformedInputError(f"csvData.rows[{i}] must be an object")
            clean_rows.append({h: _cell_to_str(row.get(h)) for h in headers})
        return cls(tuple(headers), tuple(clean_rows))

    def to_csv(self) -> str:
        """Serialize back to CSV text; fields holding commas are quoted."""
        lines = [",".join(_csv_field(h) for h in self.headers)]
        for row in self.rows:
            lines.append(",".join(_csv_field(row[h]) for h in self.headers))
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        return {"headers": list(self.headers), "rows": [dict(r) for r in self.rows]}


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value if isinstance(value, str) else str(value)


def _csv_field(value: str) -> str:
    return f'"{value}"' if "," in value else value


@dataclass(frozen=True)
class Statement:
    text: str
    kind: str
    verb: str = ""


@dataclass
class ExecutionResult:
    query: str
    rows: List[Dict[str, Any]]
    row_count: int
    message: str
    kind: str = OTHER
    verb: str = ""
    columns: List[str] = field(default_factory=list)
    widths: Dict[str, int] = field(default_factory=dict)
    formatted: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "results": self.rows,
            "rowCount": self.row_count,
            "message": self.message,
            "formattedTable": self.formatted,
            "columns": {"names": self.columns, "widths": self.widths},
        }


@dataclass
class StatementError:
    """A statement that failed inside a batch without stopping it."""
    query: str
    error: str
    error_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"query": self.query, "error": self.error, "errorType": self.error_type, "results": []}


@dataclass
class BatchResult:
    is_multi_statement: bool
    results: List[Union[ExecutionResult, StatementError]]
    message: str
    success: bool = True

    @property
    def errors(self) -> List[StatementError]:
        return [r for r in self.results if isinstance(r, StatementError)]

    def to_dict(self, query: str) -> Dict[str, Any]:
        if not self.is_multi_statement:
            body = self.results[0].to_dict()
            body.update({"success": self.success, "query": query, "message": self.message})
            return body
        return {
            "success": self.success,
            "query": query,
            "isMultiStatement": True,
            "results": [r.to_dict() for r in self.results],
            "message": self.message,
        }
