# statements.py
# Split a submission into statements and tag each with its kind.
import re
from typing import List

from models import DDL, MUTATE, OTHER, SELECT, Statement

KIND_BY_VERB = {
    "select": SELECT,
    "insert": MUTATE,
    "update": MUTATE,
    "delete": MUTATE,
    "create": DDL,
    "drop": DDL,
    "alter": DDL,
    "pragma": DDL,
}

# closing character for each opening quote sqlite understands
_QUOTES = {"'": "'", '"': '"', "`": "`", "[": "]"}

_LEADING_COMMENTS_RE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?(?:\*/|$))*", re.DOTALL)
_VERB_RE = re.compile(r"[A-Za-z_]+")


def _strip_leading_comments(text: str) -> str:
    return text[_LEADING_COMMENTS_RE.match(text).end():]


def leading_verb(text: str) -> str:
    m = _VERB_RE.match(_strip_leading_comments(text))
    return m.group(0).lower() if m else ""


def classify(text: str) -> str:
    return KIND_BY_VERB.get(leading_verb(text), OTHER)


def _make_statement(chunk: List[str]):
    text = "".join(chunk).strip()
    if not _strip_leading_comments(text):
        return None
    verb = leading_verb(text)
    return Statement(text=text, kind=KIND_BY_VERB.get(verb, OTHER), verb=verb.upper())


def split_statements(sql: str) -> List[Statement]:
    """
    Split on top-level `;` only. Semicolons inside string literals, quoted
    identifiers and comments stay part of their statement. Fragments holding
    nothing but whitespace or comments are dropped.
    """
    statements = []
    chunk = []
    closing = None
    i, n = 0, len(sql or "")
    while i < n:
        ch = sql[i]
        if closing is not None:
            chunk.append(ch)
            if ch == closing:
                closing = None
            i += 1
        elif ch in _QUOTES:
            closing = _QUOTES[ch]
            chunk.append(ch)
            i += 1
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            chunk.append(sql[i:end])
            i = end
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            chunk.append(sql[i:end])
            i = end
        elif ch == ";":
            stmt = _make_statement(chunk)
            if stmt:
                statements.append(stmt)
            chunk = []
            i += 1
        else:
            chunk.append(ch)
            i += 1
    stmt = _make_statement(chunk)
    if stmt:
        statements.append(stmt)
    return statements
