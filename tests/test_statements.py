import pytest

from models import DDL, MUTATE, OTHER, SELECT
from statements import classify, split_statements


def test_two_selects_in_order():
    stmts = split_statements("SELECT 1; SELECT 2;")
    assert [s.text for s in stmts] == ["SELECT 1", "SELECT 2"]
    assert [s.kind for s in stmts] == [SELECT, SELECT]


def test_empty_fragments_are_dropped():
    assert split_statements("  ;  ;\n; ") == []


def test_semicolon_inside_string_literal_does_not_split():
    stmts = split_statements("INSERT INTO t VALUES ('a;b'); SELECT 1")
    assert len(stmts) == 2
    assert stmts[0].text == "INSERT INTO t VALUES ('a;b')"


def test_doubled_quote_inside_literal():
    stmts = split_statements("SELECT 'it''s; here'; SELECT 2")
    assert [s.text for s in stmts] == ["SELECT 'it''s; here'", "SELECT 2"]


def test_semicolon_inside_quoted_identifier():
    stmts = split_statements('SELECT "odd;name" FROM t; SELECT [a;b] FROM t')
    assert len(stmts) == 2


def test_trailing_comment_is_not_a_statement():
    stmts = split_statements("SELECT 1; -- done; really")
    assert len(stmts) == 1


def test_semicolon_in_block_comment():
    stmts = split_statements("/* step one; step two */ SELECT 1")
    assert len(stmts) == 1
    assert stmts[0].kind == SELECT
    assert stmts[0].text.startswith("/*")


@pytest.mark.parametrize("sql,kind", [
    ("select * from Books", SELECT),
    ("  SELECT*FROM Books", SELECT),
    ("INSERT INTO t VALUES (1)", MUTATE),
    ("update t set x = 1", MUTATE),
    ("DELETE FROM t", MUTATE),
    ("CREATE TABLE t (x)", DDL),
    ("drop table t", DDL),
    ("ALTER TABLE t ADD COLUMN y", DDL),
    ("PRAGMA table_info(Books)", DDL),
    ("WITH x AS (SELECT 1) SELECT * FROM x", OTHER),
    ("VACUUM", OTHER),
    ("-- leading note\nSELECT 1", SELECT),
])
def test_classify(sql, kind):
    assert classify(sql) == kind


def test_verb_is_upper_cased():
    stmts = split_statements("insert into t values (1); create table u (x)")
    assert [s.verb for s in stmts] == ["INSERT", "CREATE"]
