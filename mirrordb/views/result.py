"""
Derived results produced by ``select`` and ``innerjoin``.
"""
from typing import NoReturn

from mirrordb.core.exceptions import CapabilityError
from mirrordb.views.base import QueryableView

RESTRICTED_OPERATIONS = frozenset({
    "insert",
    "update",
    "delete",
    "get",
    "get_index",
    "truncate",
    "store_collection",
})


class ResultView(QueryableView):
    """
    Materialized, never persisted result.

    Field names are already prefixed, so further selects and joins on a
    result keep them as they are.
    """

    derived = True

    def __getattr__(self, name: str) -> NoReturn:
        if name in RESTRICTED_OPERATIONS:
            raise CapabilityError(f"'{name}' is not available on a derived result")
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
