"""
Stateless query operators over in-memory record sequences.

Views call these with their records and naming context; nothing here
touches the store.
"""
from typing import Any, Sequence

from mirrordb.models.results import MatchResult, Record

_MISSING = object()


def field_prefix(source: str, derived: bool) -> str:
    """Prefix applied to field names taken from ``source``."""
    return "" if derived else f"{source}."


def _contains(haystack: Any, needle: str) -> bool:
    if isinstance(haystack, str):
        return needle in haystack
    if isinstance(haystack, (list, tuple)):
        return needle in haystack
    return False


def matches(record: Record, field: str, value: Any) -> bool:
    """
    Test one record against a filter.

    Text values match by substring (or list membership), anything else by
    equality. A record without the field never matches.
    """
    current = record.get(field, _MISSING)
    if current is _MISSING:
        return False
    if isinstance(value, str):
        return _contains(current, value)
    return current == value


def match(records: Sequence[Record], field: str, value: Any) -> MatchResult:
    """Filter records, keeping order; flags an empty input explicitly."""
    if not records:
        return MatchResult.empty_collection()
    return MatchResult(records=[r for r in records if matches(r, field, value)])


def project(records: Sequence[Record], fields: Sequence[str], prefix: str) -> list[Record]:
    """
    Keep only the listed fields of each record, renamed with ``prefix``.

    Fields are emitted in the order requested. Records left with no fields
    are dropped.
    """
    projected = []
    for record in records:
        row = {f"{prefix}{name}": record[name] for name in fields if name in record}
        if row:
            projected.append(row)
    return projected


def inner_join(
    left: Sequence[Record],
    right: Sequence[Record],
    on: str,
    equals: str,
    left_prefix: str,
    right_prefix: str,
) -> list[Record]:
    """
    Nested-loop inner join on ``left[on] == right[equals]``.

    Output order is left records in order, and for each of them the matching
    right records in order. Each merged record holds the left fields followed
    by the right fields.
    """
    joined = []
    for lrec in left:
        lval = lrec.get(on, _MISSING)
        if lval is _MISSING:
            continue
        for rrec in right:
            rval = rrec.get(equals, _MISSING)
            if rval is _MISSING or lval != rval:
                continue
            row = {f"{left_prefix}{k}": v for k, v in lrec.items()}
            row.update({f"{right_prefix}{k}": v for k, v in rrec.items()})
            joined.append(row)
    return joined
