"""Dotenv parser: raw file content -> RecordStore, one line at a time.

Line rules:
    - each line is trimmed; lines shorter than 3 characters are skipped
    - the line is split on Settings.separator at most Settings.split_n times
    - it must split into exactly two non-empty pieces with a non-empty key
    - both pieces are trimmed; a later duplicate key overwrites an earlier one

There is no comment syntax. Anything that does not split cleanly is dropped.

scan() is the single forward pass used by the engine. It applies the removal
predicate and evaluates an active has/is query inline, stopping at the first
matching line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from envctl.models import MutationSpec, QueryMode, QuerySpec, RecordStore
from envctl.mutation import drops_key, drops_value, key_matches, value_matches

if TYPE_CHECKING:
    from collections.abc import Iterator

    from envctl.settings import Settings

_MIN_LINE_LENGTH = 3


@dataclass
class ScanResult:
    records: RecordStore = field(default_factory=dict)
    found: bool | None = None          # None: no query was active


def iter_entries(content: str, separator: str = "=", split_n: int = 1) -> Iterator[tuple[str, str]]:
    """Yield trimmed (key, value) pairs for every valid line."""
    maxsplit = split_n if split_n > 0 else -1
    for raw in content.split("\n"):
        line = raw.strip()
        if len(line) < _MIN_LINE_LENGTH:
            continue
        pieces = line.split(separator, maxsplit)
        if len(pieces) != 2 or not pieces[0] or not pieces[1]:
            continue
        key = pieces[0].strip()
        if not key:
            continue
        yield key, pieces[1].strip()


def parse(content: str, settings: Settings) -> RecordStore:
    """Parse content into a RecordStore with no query or mutation applied."""
    return dict(iter_entries(content, settings.separator, settings.split_n))


def scan(
    content: str,
    settings: Settings,
    query: QuerySpec | None = None,
    mutation: MutationSpec | None = None,
) -> ScanResult:
    """Parse content while dropping removed lines and deciding a query inline.

    Per line the order is: key removal, has-check, value removal, is-check,
    insert. The first has/is match ends the scan with found=True.
    """
    query = query or QuerySpec()
    mutation = mutation or MutationSpec()
    records: RecordStore = {}

    for key, value in iter_entries(content, settings.separator, settings.split_n):
        if drops_key(key, mutation):
            continue
        if query.mode is QueryMode.HAS and key_matches(key, query.key):
            return ScanResult(records=records, found=True)
        if drops_value(value, mutation):
            continue
        if query.mode is QueryMode.IS and value_matches(value, query.value):
            return ScanResult(records=records, found=True)
        records[key] = value

    return ScanResult(records=records, found=False if query.active else None)
