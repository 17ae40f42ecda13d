import pytest

from batch import run_batch
from db.materializer import ephemeral_database
from db.sqlite_client import list_tables
from errors import EmptyQueryError, ExecutionError, PolicyViolation
from models import ExecutionResult, StatementError
from sql_validator import CSV_POLICY, SHARED_POLICY


def test_denied_statement_does_not_stop_the_batch(shared_db):
    batch = run_batch(
        shared_db,
        "SELECT Title FROM Books WHERE BookID = 1; DROP TABLE Books; SELECT COUNT(*) AS n FROM Authors",
        SHARED_POLICY,
    )
    assert batch.is_multi_statement
    assert batch.success
    assert len(batch.results) == 3
    assert isinstance(batch.results[1], StatementError)
    assert batch.results[1].error_type == "PolicyViolation"
    assert batch.results[1].query == "DROP TABLE Books"
    assert batch.results[0].rows == [{"Title": "Pride and Prejudice"}]
    assert batch.results[2].rows == [{"n": 3}]
    assert "Books" in list_tables(shared_db)


def test_engine_error_is_recorded_and_batch_continues(shared_db):
    batch = run_batch(
        shared_db,
        "SELECT 1 AS a; SELECT * FROM nope; INSERT INTO Genres (GenreName) VALUES ('Poetry'); "
        "SELECT COUNT(*) AS n FROM Genres",
    )
    kinds = [type(r) for r in batch.results]
    assert kinds == [ExecutionResult, StatementError, ExecutionResult, ExecutionResult]
    assert batch.results[1].error_type == "ExecutionError"
    assert batch.results[1].error == "no such table: nope"
    assert batch.results[2].row_count == 1
    assert batch.results[3].rows == [{"n": 4}]
    assert batch.success
    assert "Statement 2 failed: no such table: nope." in batch.message
    assert len(batch.errors) == 1


def test_statements_see_earlier_changes(shared_db):
    batch = run_batch(
        shared_db,
        "CREATE TABLE t (x INTEGER); INSERT INTO t VALUES (1); INSERT INTO t VALUES (2); "
        "SELECT SUM(x) AS total FROM t",
    )
    assert batch.results[-1].rows == [{"total": 3}]
    assert batch.message == (
        "CREATE statement executed successfully. "
        "INSERT statement executed successfully. 1 row(s) affected. "
        "INSERT statement executed successfully. 1 row(s) affected. "
        "SELECT query executed successfully. 1 row(s) returned."
    )


def test_every_success_carries_a_formatted_table(shared_db):
    batch = run_batch(shared_db, "SELECT GenreName FROM Genres ORDER BY GenreID; UPDATE Genres SET GenreName = GenreName")
    assert "Science Fiction" in batch.results[0].formatted
    assert "rowsAffected" in batch.results[1].formatted


def test_single_statement_is_not_multi(shared_db):
    batch = run_batch(shared_db, "SELECT COUNT(*) AS n FROM Books;")
    assert not batch.is_multi_statement
    assert len(batch.results) == 1
    assert batch.message == "Query executed successfully. 1 row(s) returned."


def test_single_denied_statement_is_fatal(shared_db):
    with pytest.raises(PolicyViolation):
        run_batch(shared_db, "DELETE FROM Books")


def test_single_failing_statement_is_fatal(shared_db):
    with pytest.raises(ExecutionError):
        run_batch(shared_db, "SELEC 1")


@pytest.mark.parametrize("sql", ["", "   ", ";;", "-- just a note"])
def test_nothing_to_run(shared_db, sql):
    with pytest.raises(EmptyQueryError):
        run_batch(shared_db, sql)


def test_csv_policy_allows_deleting_uploaded_rows(people_table):
    with ephemeral_database(people_table) as conn:
        batch = run_batch(
            conn,
            "DELETE FROM uploaded_csv WHERE Name = 'Ann'; SELECT Name FROM uploaded_csv; DROP TABLE uploaded_csv",
            CSV_POLICY,
        )
    assert batch.results[0].rows == [{"operation": "DELETE", "rowsAffected": 1}]
    assert batch.results[1].rows == [{"Name": "Bob"}]
    assert batch.results[2].error_type == "PolicyViolation"


def test_statement_that_cannot_be_encoded_is_recorded(shared_db):
    batch = run_batch(shared_db, "SELECT 1 AS a; SELECT '\ud800'; SELECT 2 AS b")
    assert len(batch.results) == 3
    assert isinstance(batch.results[1], StatementError)
    assert batch.results[1].error_type == "ExecutionError"
    assert batch.results[0].rows == [{"a": 1}]
    assert batch.results[2].rows == [{"b": 2}]
