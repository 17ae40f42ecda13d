# sql_validator.py
# Destructive-statement filter. Matching is plain substring containment on the
# lower-cased text, so a blocked phrase inside a literal, identifier or
# comment is rejected too.
import re
from dataclasses import dataclass
from typing import Tuple

from errors import PolicyViolation


@dataclass(frozen=True)
class SafetyPolicy:
    name: str
    blocked_phrases: Tuple[str, ...]


# shared seeded dataset
SHARED_POLICY = SafetyPolicy(
    name="shared",
    blocked_phrases=("drop table", "delete from", "truncate", "alter table"),
)

# uploaded CSV lives in a throwaway database
CSV_POLICY = SafetyPolicy(name="csv", blocked_phrases=("drop table",))

_WS_RE = re.compile(r"\s+")


def is_safe_sql(sql: str, policy: SafetyPolicy = SHARED_POLICY) -> (bool, str):
    if not sql or not sql.strip():
        return False, "empty query"
    lower = _WS_RE.sub(" ", sql.lower())
    for phrase in policy.blocked_phrases:
        if phrase in lower:
            return False, f"Destructive operations not allowed in this demo ('{phrase}' is blocked)"
    return True, "ok"


def check_sql(sql: str, policy: SafetyPolicy = SHARED_POLICY) -> None:
    """Raise PolicyViolation when `sql` is not allowed under `policy`."""
    ok, msg = is_safe_sql(sql, policy)
    if not ok:
        raise PolicyViolation(msg)
