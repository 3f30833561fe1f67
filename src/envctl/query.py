"""has/is query decisions.

The exit code is 0 when (found XOR negate), else 1. The printed answer is
YES for code 0 and NO otherwise, so --not inverts both.
"""

from __future__ import annotations

from dataclasses import dataclass

from envctl.models import QueryMode, QuerySpec, RecordStore
from envctl.mutation import key_matches, value_matches


@dataclass(frozen=True)
class QueryDecision:
    found: bool
    negate: bool = False

    @property
    def code(self) -> int:
        return 0 if self.found != self.negate else 1

    @property
    def text(self) -> str:
        return "YES" if self.code == 0 else "NO"


def decide(found: bool, query: QuerySpec) -> QueryDecision:
    return QueryDecision(found=found, negate=query.negate)


def recheck(records: RecordStore, query: QuerySpec) -> QueryDecision:
    """Evaluate query over a finished store (used after an add inserted a key)."""
    if query.mode is QueryMode.HAS:
        found = any(key_matches(k, query.key) for k in records)
    elif query.mode is QueryMode.IS:
        found = any(value_matches(v, query.value) for v in records.values())
    else:
        found = False
    return decide(found, query)
