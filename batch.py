# batch.py
# Drives split -> policy -> execute over every statement of a submission.
import logging
import sqlite3
from typing import List

from errors import EmptyQueryError, ExecutionError, PolicyViolation
from executor import execute_statement
from models import DDL, MUTATE, SELECT, BatchResult, ExecutionResult, StatementError
from sql_validator import SHARED_POLICY, SafetyPolicy, check_sql, is_safe_sql
from statements import split_statements

LOG = logging.getLogger(__name__)


def summarize(result: ExecutionResult) -> str:
    """One-line summary used in the combined message of a batch."""
    if result.kind == SELECT:
        return f"SELECT query executed successfully. {result.row_count} row(s) returned."
    if result.kind == MUTATE:
        return f"{result.verb} statement executed successfully. {result.row_count} row(s) affected."
    if result.kind == DDL:
        return f"{result.verb} statement executed successfully."
    return "Statement executed successfully."


def run_batch(conn: sqlite3.Connection, raw_sql: str, policy: SafetyPolicy = SHARED_POLICY) -> BatchResult:
    """
    Run every statement in `raw_sql` against `conn`, in source order.

    A single statement is strict: a policy denial raises PolicyViolation and
    an engine error raises ExecutionError. With several statements each one
    is checked and executed on its own; failures are recorded in place and the
    rest of the batch still runs.
    """
    statements = split_statements(raw_sql)
    if not statements:
        raise EmptyQueryError()

    if len(statements) == 1:
        stmt = statements[0]
        check_sql(stmt.text, policy)
        result = execute_statement(conn, stmt)
        return BatchResult(is_multi_statement=False, results=[result], message=result.message)

    results = []
    summaries: List[str] = []
    for n, stmt in enumerate(statements, start=1):
        ok, reason = is_safe_sql(stmt.text, policy)
        if not ok:
            LOG.info("Statement %d blocked by %s policy: %s", n, policy.name, stmt.text)
            results.append(StatementError(query=stmt.text, error=reason, error_type=PolicyViolation.__name__))
            summaries.append(f"Statement {n} failed: {reason}.")
            continue
        try:
            result = execute_statement(conn, stmt)
        except ExecutionError as e:
            LOG.info("Statement %d failed: %s", n, e)
            results.append(StatementError(query=stmt.text, error=str(e), error_type=ExecutionError.__name__))
            summaries.append(f"Statement {n} failed: {e}.")
            continue
        results.append(result)
        summaries.append(summarize(result))

    return BatchResult(is_multi_statement=True, results=results, message=" ".join(summaries))
