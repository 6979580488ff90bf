"""
Views over mirrored collections and derived results.
"""
from mirrordb.views.base import QueryableView
from mirrordb.views.collection import CollectionView
from mirrordb.views.result import ResultView

__all__ = ["QueryableView", "CollectionView", "ResultView"]
