"""
Value types returned by views.
"""
from mirrordb.models.keys import KeyGenerator
from mirrordb.models.results import FieldChange, MatchResult, Record

__all__ = ["FieldChange", "KeyGenerator", "MatchResult", "Record"]
