# executor.py
# Runs one classified statement and shapes the result for display.
import sqlite3
from typing import Any, Dict, List

from errors import ExecutionError
from formatting import format_results_as_table
from models import DDL, MUTATE, SELECT, ExecutionResult, Statement


def _to_json_value(value: Any) -> Any:
    # BLOB columns come back as bytes
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return value


def _fetch_rows(cur: sqlite3.Cursor) -> (List[str], List[Dict[str, Any]]):
    cols = [c[0] for c in cur.description] if cur.description else []
    rows = [{c: _to_json_value(v) for c, v in zip(cols, tuple(r))} for r in cur.fetchall()]
    return cols, rows


def execute_statement(conn: sqlite3.Connection, statement: Statement) -> ExecutionResult:
    """
    Execute `statement` on `conn`.

    select -> the rows themselves
    mutate -> one synthetic row: {operation, rowsAffected}
    ddl    -> one synthetic row: {operation, result: "Success"}
    other  -> one synthetic row: {result: "Success"}

    Raises ExecutionError with sqlite's own message when the engine rejects it.
    """
    verb = statement.verb
    try:
        cur = conn.execute(statement.text)
        try:
            if statement.kind == SELECT:
                columns, rows = _fetch_rows(cur)
                row_count = len(rows)
                if row_count == 0:
                    message = "Query executed successfully. No rows returned."
                else:
                    message = f"Query executed successfully. {row_count} row(s) returned."
            elif statement.kind == MUTATE:
                row_count = max(cur.rowcount, 0)
                columns = ["operation", "rowsAffected"]
                rows = [{"operation": verb, "rowsAffected": row_count}]
                message = f"Query executed successfully. {row_count} row(s) affected."
            elif statement.kind == DDL:
                cur.fetchall()
                row_count = 0
                columns = ["operation", "result"]
                rows = [{"operation": verb, "result": "Success"}]
                message = f"{verb} statement executed successfully."
            else:
                cur.fetchall()
                row_count = 0
                columns = ["result"]
                rows = [{"result": "Success"}]
                message = "Query executed successfully."
        finally:
            cur.close()
    except (sqlite3.Error, UnicodeError) as e:
        raise ExecutionError(str(e))

    table = format_results_as_table(rows, columns)
    return ExecutionResult(
        query=statement.text,
        rows=rows,
        row_count=row_count,
        message=message,
        kind=statement.kind,
        verb=verb,
        columns=table.names,
        widths=table.widths,
        formatted=table.formatted,
    )
