"""Add/remove mutations against a RecordStore.

Matching folds case; storage does not. A key stored as "Foo" is found by a
query for "FOO" but add("FOO") still inserts a second, differently cased key.
"""

from __future__ import annotations

from envctl.models import MutationOp, MutationSpec, RecordStore


def key_matches(key: str, target: str) -> bool:
    return key.strip().casefold() == target.strip().casefold()


def value_matches(value: str, target: str) -> bool:
    return value.strip().casefold() == target.strip().casefold()


def drops_key(key: str, mutation: MutationSpec) -> bool:
    """True when a remove targets this line's key."""
    return mutation.removes_by_key and key_matches(key, mutation.key)


def drops_value(value: str, mutation: MutationSpec) -> bool:
    """True when a remove targets this line's value."""
    return mutation.removes_by_value and value_matches(value, mutation.value)


def apply_add(records: RecordStore, mutation: MutationSpec) -> bool:
    """Insert the mutation's key/value if the key is absent. Returns True if inserted.

    A blank key is never inserted: "=value" would not parse back.
    """
    if mutation.op is not MutationOp.ADD:
        return False
    key = mutation.key.strip()
    if not key or key in records:
        return False
    records[key] = mutation.value.strip()
    return True
