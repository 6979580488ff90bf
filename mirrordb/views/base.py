"""
Read and derive operations shared by every view.
"""
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Optional, Union

from mirrordb.models.results import MatchResult, Record
from mirrordb.services import query_service

if TYPE_CHECKING:
    from mirrordb.mirror import Mirror
    from mirrordb.views.result import ResultView


class QueryableView:
    """
    Capabilities available on both collections and derived results:
    ``fetchall``, ``count``, ``match``, ``select`` and ``innerjoin``.
    """

    derived = False

    def __init__(self, mirror: Optional["Mirror"], name: str, records: list[Record]):
        self._mirror = mirror
        self._name = name
        self._records = records

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, count={len(self._records)})"

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    # ==================== Reads ====================

    def fetchall(self) -> list[Record]:
        """Return the current records; the list is a copy, records are not."""
        return list(self._records)

    def count(self) -> int:
        return len(self._records)

    def match(self, field: Union[str, Mapping[str, Any]], value: Any = None) -> MatchResult:
        """
        Filter records by one field.

        Args:
            field: Field name, or a filter mapping ``{"key": ..., "value": ...}``
            value: Text is matched as a substring, anything else by equality

        Returns:
            MatchResult; ``collection_empty`` is set when there was nothing
            to search
        """
        if isinstance(field, Mapping):
            field, value = field.get("field", field.get("key")), field.get("value")
        if not isinstance(field, str):
            raise ValueError("match needs a field name")
        return query_service.match(self._records, field, value)

    # ==================== Derivations ====================

    def select(self, fields: Union[str, Iterable[str]]) -> "ResultView":
        """Project records onto ``fields`` into a derived result."""
        from mirrordb.views.result import ResultView

        if isinstance(fields, str):
            fields = [fields]
        prefix = query_service.field_prefix(self._name, self.derived)
        rows = query_service.project(self._records, list(fields), prefix)
        return ResultView(self._mirror, self._name, rows)

    def innerjoin(self, other: Union[str, "QueryableView"], on: str, equals: str) -> "ResultView":
        """
        Inner join with another collection.

        Args:
            other: Collection name resolved through the mirror, or a view
            on: Field of this view's records
            equals: Field of the other view's records

        Returns:
            Derived result of merged records, left fields first
        """
        from mirrordb.views.result import ResultView

        right = self._resolve(other)
        rows = query_service.inner_join(
            self._records,
            right._records,
            on,
            equals,
            query_service.field_prefix(self._name, self.derived),
            query_service.field_prefix(right._name, right.derived),
        )
        return ResultView(self._mirror, f"{self._name}+{right._name}", rows)

    def _resolve(self, other: Union[str, "QueryableView"]) -> "QueryableView":
        if isinstance(other, QueryableView):
            return other
        if self._mirror is None:
            raise ValueError(f"Cannot resolve collection '{other}' without a mirror")
        return self._mirror.collection(other)
