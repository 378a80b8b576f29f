"""Diff engine: minimal before/after change-set for a proposed update."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.application.dtos.audit_log import AuditChanges


def values_equal(left: Any, right: Any) -> bool:
    """Deep value equality for JSON-like data.

    Dicts compare by keys and values, lists/tuples element-wise; bools are
    never equal to numbers (True != 1), other scalars use ==.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[k], right[k]) for k in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False
    return left == right


def compute_diff(
    before: Mapping[str, Any], after_candidate: Mapping[str, Any]
) -> AuditChanges | None:
    """Compare the proposed fields against the persisted snapshot.

    Only keys in after_candidate are considered. A key missing from before
    diffs with a None before-value. Returns None when nothing differs; the
    caller must then skip both the write and the audit record.

    Args:
        before: Snapshot read before the mutation, in the same transaction.
        after_candidate: Only the fields the caller attempted to change.

    Returns:
        AuditChanges with identical key sets in before and after, or None.
    """
    changed_before: dict[str, Any] = {}
    changed_after: dict[str, Any] = {}
    for key, proposed in after_candidate.items():
        current = before.get(key)
        if key in before and values_equal(current, proposed):
            continue
        if key not in before and proposed is None:
            continue
        changed_before[key] = current
        changed_after[key] = proposed
    if not changed_after:
        return None
    return AuditChanges(before=changed_before, after=changed_after)
