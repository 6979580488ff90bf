"""
Result types for view operations.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Union

from pydantic import BaseModel, Field

Record = dict[str, Any]


class FieldChange(BaseModel):
    """A single field overwrite applied by ``update``."""
    field: str = Field(..., min_length=1, description="Field to overwrite")
    value: Any = Field(None, description="New value")


ChangeLike = Union[FieldChange, tuple, Mapping[str, Any]]


def normalize_changes(changes: Iterable[ChangeLike]) -> list[FieldChange]:
    """
    Coerce the accepted change shapes into FieldChange objects.

    Accepts FieldChange instances, ``(field, value)`` tuples and mappings
    keyed by ``field`` (or ``key``) and ``value``. Order is preserved.

    Raises:
        ValueError: If a change has no field name
    """
    normalized = []
    for change in changes:
        if isinstance(change, FieldChange):
            normalized.append(change)
        elif isinstance(change, tuple):
            name, value = change
            normalized.append(FieldChange(field=name, value=value))
        elif isinstance(change, Mapping):
            name = change.get("field", change.get("key"))
            if name is None:
                raise ValueError(f"Change without a field name: {change!r}")
            normalized.append(FieldChange(field=name, value=change.get("value")))
        else:
            raise ValueError(f"Unsupported change: {change!r}")
    return normalized


@dataclass
class MatchResult:
    """
    Outcome of ``match``.

    ``collection_empty`` is True when there was nothing to search, which is
    distinct from a search over records that found no match. Records are the
    live in-memory objects, not copies.
    """
    records: list[Record] = field(default_factory=list)
    collection_empty: bool = False

    @classmethod
    def empty_collection(cls) -> "MatchResult":
        return cls(collection_empty=True)

    @property
    def found(self) -> bool:
        return bool(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
